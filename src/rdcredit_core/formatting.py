"""Rounding and display helpers.

Every currency amount the engine produces is rounded to whole dollars at the
point it is computed, half up. Totals are built from already-rounded parts,
so the order of rounding is part of the result.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

WHOLE_DOLLAR = Decimal("1")
ONE_DECIMAL = Decimal("0.1")

Number = Union[Decimal, int]


def round_whole(value: Number) -> Decimal:
    """Round to whole currency units, ties away from zero."""
    return Decimal(value).quantize(WHOLE_DOLLAR, rounding=ROUND_HALF_UP)


def round_tenth(value: Number) -> Decimal:
    """Round to one decimal place, ties away from zero."""
    return Decimal(value).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def format_currency(amount: Number) -> str:
    """Format as US dollars with no cents, e.g. ``$1,234,568``."""
    rounded = round_whole(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}"


def format_percentage(value: Number) -> str:
    """Format a percentage value without trailing zeros, e.g. ``65%``."""
    normalized = Decimal(value).normalize()
    # normalize() turns 100 into 1E+2
    if normalized == normalized.to_integral_value():
        normalized = normalized.quantize(WHOLE_DOLLAR)
    return f"{normalized}%"


def format_multiple(value: Decimal) -> str:
    """Format an ROI multiple, e.g. ``43.4x``."""
    return f"{round_tenth(value)}x"


def format_range(min_amount: Decimal, max_amount: Optional[Decimal]) -> str:
    """Format a half-open credit band, using ``∞`` for an open upper bound."""
    upper = "∞" if max_amount is None else format_currency(max_amount)
    return f"{format_currency(min_amount)} - {upper}"
