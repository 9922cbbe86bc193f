"""Performance and billing window engine - pure calendar arithmetic"""

from datetime import date
from typing import Any, Tuple

from household_ledger.domain.models import BillingWindow, MonthKey, PerformanceWindow
from household_ledger.utils.date_utils import (
    clamp_day,
    clamped_date,
    days_in_month,
    month_key_of,
    next_month,
    normalize_month,
    previous_month,
)

DEFAULT_BILLING_DAY = 14


def month_range(year: int, month: int) -> PerformanceWindow:
    """Whole calendar month, day 1 through the last day"""
    year, month = normalize_month(year, month)
    return PerformanceWindow(
        start=date(year, month, 1),
        end=date(year, month, days_in_month(year, month)),
        start_day=1,
    )


def performance_window(year: int, month: int, start_day: Any) -> PerformanceWindow:
    """
    Performance-accumulation window for target month (year, month).

    Rules:
    - start day 1: the calendar month itself
    - otherwise: start day of the previous month through (start day - 1) of
      the target month, each pulled back to its month's last day

    Example:
        start_day=15, March 2025 -> 2025-02-15 .. 2025-03-14
    """
    day = clamp_day(start_day)
    if day == 1:
        return month_range(year, month)

    prev_year, prev_month = previous_month(year, month)
    return PerformanceWindow(
        start=clamped_date(prev_year, prev_month, day),
        end=clamped_date(year, month, day - 1),
        start_day=day,
    )


def billing_window(year: int, month: int, billing_day: Any) -> BillingWindow:
    """
    Spending covered by the statement issued in (year, month).

    Rules:
    - billing day 1: the entire previous month
    - otherwise: billing day of the previous month through (billing day - 1)
      of the target month, each pulled back to its month's last day
    """
    day = clamp_day(billing_day)
    prev_year, prev_month = previous_month(year, month)

    if day == 1:
        whole = month_range(prev_year, prev_month)
        return BillingWindow(start=whole.start, end=whole.end)

    return BillingWindow(
        start=clamped_date(prev_year, prev_month, day),
        end=clamped_date(year, month, day - 1),
    )


def expected_billing_date(window_end: date, billing_day: Any) -> date:
    """
    Calendar date on which a performance window ending on ``window_end`` is charged.

    An end day on or after the billing day has missed that month's statement,
    so the charge lands in the following month. The billing day is pulled back
    to the charge month's last day.

    Example:
        window_end=2025-02-28, billing_day=14 -> 2025-03-14
        window_end=2025-03-30, billing_day=31 -> 2025-04-30

    December 9999 has no following month; its late charges stay in 9999-12.
    """
    day = clamp_day(billing_day)
    year, month = window_end.year, window_end.month
    if window_end.day >= day:
        year, month = next_month(year, month)
    return clamped_date(year, month, day)


def billing_month_key(window_end: date, billing_day: Any) -> MonthKey:
    """
    Month whose bill includes a performance window ending on ``window_end``.

    Month of expected_billing_date, so it is the inverse of billing_window.
    """
    return month_key_of(expected_billing_date(window_end, billing_day))


def performance_target_month(day: date, start_day: Any) -> Tuple[int, int]:
    """Target month whose performance window contains ``day``"""
    start = clamp_day(start_day)
    if start == 1 or day.day < start:
        return day.year, day.month
    return next_month(day.year, day.month)


def window_owns(window: PerformanceWindow, day: date) -> bool:
    """
    True when ``day`` is counted in ``window``.

    With a start day past the end of a short month, adjacent windows share
    that month's last day; it is owned by the earlier window only.
    """
    if not window.contains(day):
        return False
    return performance_target_month(day, window.start_day) == (window.end.year, window.end.month)


def suggested_performance_start_day(billing_day: Any) -> int:
    """
    Performance start day commonly paired with a billing day.

    Billing on the 14th or later suggests (billing day - 13), earlier billing
    days suggest (billing day + 18). Missing billing days count as the 14th.
    """
    day = clamp_day(billing_day, fallback=DEFAULT_BILLING_DAY)
    return day - 13 if day >= 14 else day + 18


def performance_range_label(start_day: Any) -> str:
    """Human-readable day range of a performance window"""
    day = clamp_day(start_day)
    if day == 1:
        return "1st to end of this month"
    return f"day {day} of last month to day {day - 1} of this month"
