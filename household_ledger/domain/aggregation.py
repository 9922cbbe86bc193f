"""Dashboard aggregation - cashflow, card performance and billing totals"""

import logging
import time
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from household_ledger.domain.exceptions import InvalidMonthError
from household_ledger.domain.models import (
    BenefitTier,
    BillingSummary,
    CardBilling,
    CardPerformance,
    CardUsageTransaction,
    CashflowSummary,
    DashboardResult,
    MonthKey,
    PaymentMethodConfig,
    PerformanceWindow,
    PeriodPerformance,
    TierStatus,
    Transaction,
)
from household_ledger.domain.periods import (
    billing_month_key,
    expected_billing_date,
    month_range,
    performance_window,
    window_owns,
)
from household_ledger.infrastructure.observability.logging import log_dashboard
from household_ledger.infrastructure.observability.metrics import (
    month_fallback_counter,
    record_dashboard,
    record_tiers,
)
from household_ledger.utils.date_utils import (
    clamp_day,
    month_key,
    next_month,
    parse_month,
    previous_month,
)

logger = logging.getLogger(__name__)


def resolve_month(month: Any, today: date) -> Tuple[int, int]:
    """Parse the requested month, falling back to today's month when malformed"""
    if month is None:
        return today.year, today.month
    try:
        return parse_month(month)
    except InvalidMonthError as e:
        month_fallback_counter.inc()
        logger.warning(f"Invalid month parameter: {e}", extra={"month": repr(month)})
        return today.year, today.month


def compute_cashflow(
    year: int,
    month: int,
    transactions: Iterable[Transaction],
    carry_over_enabled: bool = False,
) -> CashflowSummary:
    """
    Income/expense totals for one calendar month.

    Billing-excluded rows never count. With carry-over enabled, every row dated
    before the first of the month is summed into ``carry_over``.
    """
    window = month_range(year, month)
    income = 0
    expense = 0
    carry_over = 0

    for txn in transactions:
        if txn.exclude_from_billing:
            continue
        if window.contains(txn.transaction_date):
            if txn.amount > 0:
                income += txn.amount
            elif txn.amount < 0:
                expense += -txn.amount
        elif carry_over_enabled and txn.transaction_date < window.start:
            carry_over += txn.amount

    return CashflowSummary(
        month=month_key(year, month),
        income=income,
        expense=expense,
        balance=income - expense,
        carry_over=carry_over if carry_over_enabled else None,
    )


def sort_tiers(tiers: Iterable[BenefitTier]) -> List[BenefitTier]:
    """Order tiers ascending by threshold, sort_order breaking ties"""
    return sorted(tiers, key=lambda t: (t.threshold_amount, t.sort_order))


def evaluate_tiers(amount: int, tiers: List[BenefitTier]) -> Tuple[List[TierStatus], Optional[int]]:
    """Mark achieved tiers and compute the distance to the next one"""
    statuses = [
        TierStatus(
            id=t.id,
            payment_method_id=t.payment_method_id,
            threshold_amount=t.threshold_amount,
            benefit_desc=t.benefit_desc,
            sort_order=t.sort_order,
            achieved=amount >= t.threshold_amount,
        )
        for t in sort_tiers(tiers)
    ]

    next_tier = next((t for t in statuses if not t.achieved), None)
    remaining = next_tier.threshold_amount - amount if next_tier else None

    achieved = sum(1 for t in statuses if t.achieved)
    record_tiers(achieved, len(statuses) - achieved)
    return statuses, remaining


def _counts_toward_performance(card: PaymentMethodConfig, txn: Transaction, window: PerformanceWindow) -> bool:
    if txn.payment_method_id != card.id or not txn.is_expense:
        return False
    if not window_owns(window, txn.transaction_date):
        return False
    # Credit cards honour the performance flag; other methods the billing flag
    if card.is_credit:
        return not txn.exclude_from_performance
    return not txn.exclude_from_billing


def compute_period_performance(
    card: PaymentMethodConfig,
    window: PerformanceWindow,
    transactions: Iterable[Transaction],
    tiers: List[BenefitTier],
) -> PeriodPerformance:
    """Sum one card's qualifying spending inside a window and match it to tiers"""
    usage = [
        CardUsageTransaction(
            id=txn.id,
            transaction_date=txn.transaction_date,
            amount=txn.amount,
            category=txn.category,
            memo=txn.memo,
        )
        for txn in sorted(transactions, key=lambda t: (t.transaction_date, t.id))
        if _counts_toward_performance(card, txn, window)
    ]
    amount = sum(-u.amount for u in usage)
    statuses, remaining = evaluate_tiers(amount, tiers)

    return PeriodPerformance(
        window=window,
        amount=amount,
        usage_transactions=usage,
        tiers=statuses,
        next_tier_remaining=remaining,
    )


def awaiting_previous_bill(card: PaymentMethodConfig, year: int, month: int, today: date) -> bool:
    """True while last period's bill has not posted yet in the current real month"""
    if not card.is_credit or card.billing_day is None:
        return False
    if (year, month) != (today.year, today.month):
        return False
    return today.day < clamp_day(card.billing_day)


def compute_card_performance(
    card: PaymentMethodConfig,
    year: int,
    month: int,
    transactions: List[Transaction],
    tiers: List[BenefitTier],
    today: date,
) -> CardPerformance:
    """
    Current (and, while unbilled, previous) performance for one card.

    Credit cards accumulate over their performance window; every other
    payment method uses the calendar month.
    """
    start_day = clamp_day(card.performance_start_day)
    billing_day = clamp_day(card.billing_day) if card.billing_day is not None else None

    if card.is_credit:
        window = performance_window(year, month, start_day)
    else:
        window = month_range(year, month)

    current = compute_period_performance(card, window, transactions, tiers)

    previous = None
    if awaiting_previous_bill(card, year, month, today):
        prev_year, prev_month = previous_month(year, month)
        prev_window = performance_window(prev_year, prev_month, start_day)
        previous = compute_period_performance(card, prev_window, transactions, tiers)

    expected = None
    if card.is_credit and billing_day is not None:
        expected = expected_billing_date(window.end, billing_day)

    return CardPerformance(
        payment_method_id=card.id,
        card_name=card.name,
        payment_method_type=card.type,
        billing_day=billing_day,
        performance_start_day=start_day,
        current=current,
        previous=previous,
        expected_billing_date=expected,
    )


def compute_card_billing(
    card: PaymentMethodConfig,
    year: int,
    month: int,
    transactions: List[Transaction],
) -> CardBilling:
    """
    Resolve which calendar month each nearby performance period is charged in.

    The previous, current and next target month windows are each mapped to a
    billing month key; their spending lands in this month's or next month's
    bill accordingly.
    """
    billing_day = clamp_day(card.billing_day)
    start_day = clamp_day(card.performance_start_day)
    current_key = month_key(year, month)
    next_key = month_key(*next_month(year, month))

    current_total = 0
    next_total = 0
    windows: Dict[MonthKey, List[PerformanceWindow]] = {}

    for target in (previous_month(year, month), (year, month), next_month(year, month)):
        window = performance_window(target[0], target[1], start_day)
        key = billing_month_key(window.end, billing_day)
        if key not in (current_key, next_key):
            continue

        spent = sum(
            -txn.amount
            for txn in transactions
            if txn.payment_method_id == card.id
            and txn.is_expense
            and not txn.exclude_from_billing
            and window_owns(window, txn.transaction_date)
        )
        windows.setdefault(key, []).append(window)
        if key == current_key:
            current_total += spent
        else:
            next_total += spent

    return CardBilling(
        payment_method_id=card.id,
        card_name=card.name,
        billing_day=billing_day,
        current_month_billing=current_total,
        next_month_billing=next_total,
        windows=windows,
    )


def compute_billing_summary(
    year: int,
    month: int,
    cards: Iterable[PaymentMethodConfig],
    transactions: List[Transaction],
) -> BillingSummary:
    """Billing totals for every active credit card that has a billing day"""
    billed = [
        compute_card_billing(card, year, month, transactions)
        for card in cards
        if card.is_active and card.is_credit and card.billing_day is not None
    ]
    return BillingSummary(
        month=month_key(year, month),
        next_month=month_key(*next_month(year, month)),
        cards=billed,
        current_month_total=sum(b.current_month_billing for b in billed),
        next_month_total=sum(b.next_month_billing for b in billed),
    )


def compute_dashboard(
    month: Any,
    cards: List[PaymentMethodConfig],
    transactions: List[Transaction],
    today: date,
    carry_over_enabled: bool = False,
    tiers: Optional[List[BenefitTier]] = None,
) -> DashboardResult:
    """
    Main entry point: cashflow, card performance and billing for one month.

    Flow:
    1. Resolve the month (malformed -> today's month)
    2. Cashflow totals, optionally with carry-over
    3. Performance per active card, with the unbilled previous period if any
    4. Billing totals for credit cards with a billing day
    """
    start_time = time.time()
    year, month_num = resolve_month(month, today)

    tiers_by_card: Dict[str, List[BenefitTier]] = {}
    for tier in tiers or []:
        tiers_by_card.setdefault(tier.payment_method_id, []).append(tier)

    active_cards = [c for c in cards if c.is_active]

    cashflow = compute_cashflow(year, month_num, transactions, carry_over_enabled)
    performances = [
        compute_card_performance(
            card, year, month_num, transactions, tiers_by_card.get(card.id, []), today
        )
        for card in active_cards
    ]
    billing = compute_billing_summary(year, month_num, active_cards, transactions)

    duration = time.time() - start_time
    record_dashboard(carry_over_enabled, duration)
    log_dashboard(
        cashflow.month,
        len(active_cards),
        len(transactions),
        billing.current_month_total,
        duration * 1000,
    )

    return DashboardResult(
        month=cashflow.month,
        cashflow=cashflow,
        card_performances=performances,
        billing=billing,
    )
