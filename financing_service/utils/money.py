"""Decimal helpers for currency arithmetic"""

from decimal import Decimal, ROUND_CEILING, ROUND_DOWN, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal, going through str() for floats so 0.1 stays 0.1"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round a currency amount to cents (half-up)"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def ceil_int(value: Decimal) -> int:
    """Smallest integer >= value"""
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def floor_money(value: Number) -> Decimal:
    """Truncate a non-negative currency amount to cents"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_DOWN)


def is_whole_cents(value: Number) -> bool:
    value = to_decimal(value)
    return value == value.quantize(CENT, rounding=ROUND_HALF_UP)
