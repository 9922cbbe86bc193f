"""Lenient coercion of loosely typed store values"""

import math
from typing import Any


def coerce_int(value: Any, default: int = 0) -> int:
    """Parse a numeric value, defaulting when it is not a finite number"""
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def coerce_flag(value: Any) -> bool:
    """Interpret 0/1 integer columns, booleans and "true"/"false" strings"""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    if value is None:
        return False
    return bool(coerce_int(value))
