"""Entry points for collaborators holding raw store rows"""

from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from household_ledger.config import settings
from household_ledger.domain.aggregation import compute_dashboard, resolve_month
from household_ledger.domain.models import DashboardResult, ListedTransaction, MonthlyTrends
from household_ledger.domain.trends import (
    filter_transactions,
    label_billing_months,
    monthly_trends,
)
from household_ledger.infrastructure.observability.logging import setup_logging
from household_ledger.infrastructure.rows import (
    to_benefit_tiers,
    to_payment_methods,
    to_transactions,
)
from household_ledger.utils.date_utils import month_key

Row = Mapping[str, Any]


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install structured JSON logging on the root logger.

    Called once by the embedding application at startup; importing this
    module leaves existing logging configuration alone.
    """
    setup_logging(level or settings.log_level)


def build_dashboard(
    month: Any,
    payment_method_rows: Iterable[Row],
    benefit_tier_rows: Iterable[Row],
    transaction_rows: Iterable[Row],
    today: date,
    carry_over_enabled: Optional[bool] = None,
) -> DashboardResult:
    """
    Dashboard for one month from raw store rows.

    Flow:
    1. Map payment method, tier and transaction rows (malformed rows skipped)
    2. Apply the configured carry-over default when the caller has no preference
    3. Run the aggregation
    """
    if carry_over_enabled is None:
        carry_over_enabled = settings.carry_over_enabled

    return compute_dashboard(
        month,
        to_payment_methods(payment_method_rows),
        to_transactions(transaction_rows),
        today,
        carry_over_enabled=carry_over_enabled,
        tiers=to_benefit_tiers(benefit_tier_rows),
    )


def list_transactions(
    transaction_rows: Iterable[Row],
    payment_method_rows: Iterable[Row] = (),
    billing_mode: bool = False,
    month: Optional[str] = None,
    search: str = "",
    category: Optional[str] = None,
    payment_method_id: Optional[str] = None,
    performance: str = "all",
    limit: Any = None,
) -> List[ListedTransaction]:
    """Filtered transaction list; billing mode labels each row with its billing month"""
    transactions = filter_transactions(
        to_transactions(transaction_rows),
        month=month,
        search=search,
        category=category,
        payment_method_id=payment_method_id,
        performance=performance,
        limit=limit,
    )
    if not billing_mode:
        return [ListedTransaction(transaction=txn) for txn in transactions]

    labels = label_billing_months(transactions, to_payment_methods(payment_method_rows))
    return [ListedTransaction(transaction=txn, billing_month_key=labels[txn.id]) for txn in transactions]


def build_trends(
    transaction_rows: Iterable[Row],
    payment_method_rows: Iterable[Row] = (),
) -> MonthlyTrends:
    """Cumulative monthly trends from raw rows"""
    return monthly_trends(
        to_transactions(transaction_rows),
        to_payment_methods(payment_method_rows),
    )


def current_month_key(month: Any, today: date) -> str:
    """Month key a request resolves to, with malformed input replaced by today's month"""
    year, month_num = resolve_month(month, today)
    return month_key(year, month_num)
