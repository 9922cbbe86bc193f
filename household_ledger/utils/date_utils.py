"""Date manipulation utilities for year/month/day triples"""

import calendar
import math
import re
from datetime import date, datetime
from typing import Any, Tuple

from household_ledger.domain.exceptions import InvalidMonthError

MIN_DAY = 1
MAX_DAY = 31

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


def clamp_day(day: Any, fallback: int = 1) -> int:
    """
    Coerce a configured day-of-month into the range 1..31.

    Accepts ints, floats and numeric strings. Anything that is not a finite
    number (None, NaN, infinity, garbage text) resolves to ``fallback``.
    Fractions round half up, so 14.5 becomes 15.
    """
    try:
        value = float(day)
    except (TypeError, ValueError, OverflowError):
        return _clamp(fallback)

    if not math.isfinite(value):
        return _clamp(fallback)

    return _clamp(math.floor(value + 0.5))


def _clamp(day: Any) -> int:
    try:
        value = int(day)
    except (TypeError, ValueError, OverflowError):
        return MIN_DAY
    return max(MIN_DAY, min(MAX_DAY, value))


def normalize_month(year: int, month: int) -> Tuple[int, int]:
    """Fold an out-of-range month into (year, 1..12), keeping the year representable"""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    if year < date.min.year:
        return date.min.year, 1
    if year > date.max.year:
        return date.max.year, 12
    return year, month


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month (leap-year aware)"""
    year, month = normalize_month(year, month)
    return calendar.monthrange(year, month)[1]


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return _shift_month(year, month, -1)


def next_month(year: int, month: int) -> Tuple[int, int]:
    return _shift_month(year, month, 1)


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    # Count months from year 0 so wrap-around is plain integer division
    total = year * 12 + (month - 1) + delta
    return total // 12, total % 12 + 1


def clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, pulling the day back to the month's last day when it overflows"""
    year, month = normalize_month(year, month)
    return date(year, month, max(MIN_DAY, min(day, days_in_month(year, month))))


def month_key(year: int, month: int) -> str:
    year, month = normalize_month(year, month)
    return f"{year:04d}-{month:02d}"


def month_key_of(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def parse_month(value: Any) -> Tuple[int, int]:
    """Parse a "YYYY-MM" key, raising InvalidMonthError for anything else"""
    if not isinstance(value, str):
        raise InvalidMonthError(f"Month must be a YYYY-MM string, got {value!r}")

    match = _MONTH_KEY_RE.match(value.strip())
    if not match:
        raise InvalidMonthError(f"Month must be formatted YYYY-MM, got {value!r}")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < date.min.year:
        raise InvalidMonthError(f"Month out of range: {value!r}")
    return year, month


def parse_iso_date(value: Any) -> date:
    """Parse a YYYY-MM-DD value (date, datetime or string) into a date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO date string, got {value!r}")
    # Rows may carry a timestamp suffix; only the calendar date matters
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
