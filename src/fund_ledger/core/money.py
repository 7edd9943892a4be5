"""Decimal helpers for money, share and percentage values."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

ZERO = Decimal("0")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number or numeric string to Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Raises ValueError for non-numeric input.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def optional_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Convert value to Decimal, passing None through."""
    if value is None:
        return None
    return to_decimal(value)


def round_money(value: Decimal, places: int = 2) -> Decimal:
    """Round a money value half-up to the given number of places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return part / whole * 100, or 0 when whole is 0."""
    if whole == ZERO:
        return ZERO
    return part / whole * HUNDRED


def format_currency(amount: Decimal, digits: int = 4, symbol: str = "¥") -> str:
    """Format an amount like ``¥1,234.5678`` (negative as ``-¥12.0000``)."""
    rounded = round_money(amount, digits)
    sign = "-" if rounded < ZERO else ""
    return f"{sign}{symbol}{abs(rounded):,.{digits}f}"


def format_percent(value: Decimal) -> str:
    """Format a percentage with explicit sign, e.g. ``+1.23%``."""
    rounded = round_money(value, 2)
    sign = "+" if rounded >= ZERO else ""
    return f"{sign}{rounded:.2f}%"
