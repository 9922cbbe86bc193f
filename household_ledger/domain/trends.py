"""Transaction-level helpers: billing labels, cumulative trends, filtering"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from household_ledger.config import settings
from household_ledger.domain.models import MonthKey, MonthlyTrends, PaymentMethodConfig, Transaction
from household_ledger.domain.periods import (
    billing_month_key,
    month_range,
    performance_target_month,
    performance_window,
)
from household_ledger.utils.coercion import coerce_int
from household_ledger.utils.date_utils import (
    clamp_day,
    month_key,
    month_key_of,
    next_month,
    previous_month,
)

PERFORMANCE_FILTERS = ("all", "included", "excluded")


def transaction_billing_month(transaction_date: date, card: Optional[PaymentMethodConfig]) -> MonthKey:
    """
    Month in which a transaction will be billed.

    Non-credit methods and unassigned transactions settle in their own month.
    A credit card's transaction first falls into the performance window that
    contains it; with a billing day, that window is mapped to its statement
    month, otherwise the window's target month is used.
    """
    if card is None or not card.is_credit:
        return month_key_of(transaction_date)

    year, month = performance_target_month(transaction_date, card.performance_start_day)
    if card.billing_day is None:
        return month_key(year, month)

    window = performance_window(year, month, card.performance_start_day)
    return billing_month_key(window.end, card.billing_day)


def label_billing_months(
    transactions: Iterable[Transaction],
    cards: Iterable[PaymentMethodConfig],
) -> Dict[str, MonthKey]:
    """Billing month label for each transaction, keyed by transaction id"""
    by_id = {card.id: card for card in cards}
    return {
        txn.id: transaction_billing_month(txn.transaction_date, by_id.get(txn.payment_method_id))
        for txn in transactions
    }


def _accumulate(values: List[int]) -> List[int]:
    running = 0
    out = []
    for value in values:
        running += value
        out.append(running)
    return out


def monthly_trends(
    transactions: Iterable[Transaction],
    cards: Optional[Iterable[PaymentMethodConfig]] = None,
    unassigned_label: Optional[str] = None,
) -> MonthlyTrends:
    """
    Cumulative income and per-method expense series over the months present.

    Expense series are labelled by payment method name (joined name on the
    row first, then the card config) and ordered by final total, largest
    first.
    """
    fallback = unassigned_label or settings.unassigned_method_label
    names = {card.id: card.name for card in cards or []}

    income_by_month: Dict[MonthKey, int] = {}
    expense_by_method: Dict[str, Dict[MonthKey, int]] = {}

    for txn in transactions:
        if txn.exclude_from_billing:
            continue
        key = month_key_of(txn.transaction_date)
        if txn.amount > 0:
            income_by_month[key] = income_by_month.get(key, 0) + txn.amount
        elif txn.amount < 0:
            label = (txn.payment_method_name or names.get(txn.payment_method_id) or "").strip() or fallback
            per_month = expense_by_method.setdefault(label, {})
            per_month[key] = per_month.get(key, 0) - txn.amount

    months = sorted(set(income_by_month) | {m for per in expense_by_method.values() for m in per})

    series = {
        label: _accumulate([per_month.get(m, 0) for m in months])
        for label, per_month in expense_by_method.items()
    }
    ordered = dict(sorted(series.items(), key=lambda item: (-(item[1][-1] if item[1] else 0), item[0])))

    return MonthlyTrends(
        months=months,
        cumulative_income=_accumulate([income_by_month.get(m, 0) for m in months]),
        cumulative_expense_by_method=ordered,
    )


def filter_transactions(
    transactions: Iterable[Transaction],
    month: Optional[str] = None,
    search: str = "",
    category: Optional[str] = None,
    payment_method_id: Optional[str] = None,
    performance: str = "all",
    limit: Any = None,
) -> List[Transaction]:
    """
    Transaction list filtering, newest first.

    ``"all"`` for category or payment method means no filter. ``performance``
    is one of all | included | excluded; unknown values behave like all.
    """
    page_size = coerce_int(limit, default=settings.transaction_page_size)
    if page_size <= 0:
        page_size = settings.transaction_page_size

    keyword = (search or "").strip().lower()
    if performance not in PERFORMANCE_FILTERS:
        performance = "all"

    def matches(txn: Transaction) -> bool:
        if month and not txn.transaction_date.isoformat().startswith(month):
            return False
        if keyword:
            haystack = [txn.memo or "", txn.category or "", txn.payment_method_name or ""]
            if not any(keyword in text.lower() for text in haystack):
                return False
        if category and category != "all" and txn.category != category:
            return False
        if payment_method_id and payment_method_id != "all" and txn.payment_method_id != payment_method_id:
            return False
        if performance == "included" and txn.exclude_from_performance:
            return False
        if performance == "excluded" and not txn.exclude_from_performance:
            return False
        return True

    selected = [txn for txn in transactions if matches(txn)]
    selected.sort(key=lambda t: t.transaction_date, reverse=True)
    return selected[:page_size]


def dashboard_fetch_range(
    year: int,
    month: int,
    cards: Iterable[PaymentMethodConfig],
    carry_over_enabled: bool = False,
) -> Tuple[Optional[date], date]:
    """
    Inclusive date range to load from the transaction store for a dashboard.

    Covers the calendar month plus every performance window the aggregation
    may read (previous, current and next target month per credit card).
    The start is None when carry-over needs the full history.
    """
    prev = previous_month(year, month)
    nxt = next_month(year, month)

    start = month_range(*prev).start
    end = month_range(year, month).end

    for card in cards:
        if not card.is_active or not card.is_credit:
            continue
        start_day = clamp_day(card.performance_start_day)
        start = min(start, performance_window(prev[0], prev[1], start_day).start)
        end = max(end, performance_window(nxt[0], nxt[1], start_day).end)

    return (None if carry_over_enabled else start), end
