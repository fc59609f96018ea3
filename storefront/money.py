"""
Money Utilities - Safe Decimal operations for prices and quantities.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

Numeric = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Rupee amounts are displayed without paise
INTEGER_PRECISION = Decimal("1")

RUPEE_SYMBOL = "₹"


def to_decimal(value: Union[Numeric, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Go through str so 0.1 stays 0.1
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def to_quantity(value: object) -> Optional[Decimal]:
    """
    Convert user input to a finite Decimal quantity.

    Unlike to_decimal, invalid input is reported as None so callers can
    ignore it instead of treating it as zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (str, int, float, Decimal)):
        return None
    try:
        result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    return result


def round_money(value: Numeric, to_int: bool = False) -> Decimal:
    """
    Round monetary value to appropriate precision.

    Args:
        value: Value to round
        to_int: If True, round to whole rupees

    Returns:
        Rounded Decimal value
    """
    decimal_value = to_decimal(value)
    precision = INTEGER_PRECISION if to_int else MONEY_PRECISION
    return decimal_value.quantize(precision, rounding=ROUND_HALF_UP)


def multiply(value: Numeric, factor: Numeric) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def to_float(value: Numeric) -> float:
    """
    Convert Decimal to float for JSON serialization.

    Use only at API/storage boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def _group_indian(digits: str) -> str:
    """Group digits the en-IN way: last three, then pairs (12,34,567)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_price(value: Numeric) -> str:
    """
    Format a price in rupees without decimals.

    >>> format_price(123456)
    '₹1,23,456'
    """
    rounded = round_money(value, to_int=True)
    sign = "-" if rounded < 0 else ""
    digits = str(abs(int(rounded)))
    return f"{sign}{RUPEE_SYMBOL}{_group_indian(digits)}"
