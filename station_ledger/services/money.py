"""Decimal helpers for currency amounts."""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """
    Convert a database or user value to a 2-place Decimal.

    SQL SUM() over NUMERIC comes back as float on some drivers,
    so go through str() to avoid binary float artifacts.
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value) -> Decimal:
    """Convert without rounding; None and empty values become zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
