"""Numeric coercion and rounding helpers"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Union


def to_amount(value: Any) -> float:
    """
    Coerce a raw numeric field to a float, treating anything unusable as 0.

    Stored rows carry numbers as ints, floats, numeric strings or null.
    None, non-numeric strings, NaN and infinities all become 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def to_decimal(value: Union[int, float, Decimal]) -> Decimal:
    """Exact decimal view of a number as it prints (0.1 stays 0.1)"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Union[int, float, Decimal]) -> int:
    """Round to the nearest whole currency unit, halves away from zero"""
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def safe_percentage(numerator: float, denominator: float) -> float:
    """numerator / denominator as a percentage, or 0.0 when the denominator is zero"""
    if denominator == 0:
        return 0.0
    return numerator * 100 / denominator
