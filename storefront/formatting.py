"""Display helpers for units and quantities."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from .money import to_decimal

UNIT_LABELS: dict[str, tuple[str, str]] = {
    "meter": ("meter", "meters"),
    "piece": ("piece", "pieces"),
    "kg": ("kg", "kg"),
    "yard": ("yard", "yards"),
    "set": ("set", "sets"),
}

# Units sold by length show a decimal when the quantity is fractional
FRACTIONAL_UNITS = {"meter", "yard"}


def format_unit(unit: str, quantity: Optional[Union[int, float, str, Decimal]] = None) -> str:
    """
    Human label for a unit.

    Without a quantity the singular form is returned ("meter").
    Unknown units are echoed back unchanged.
    """
    singular, plural = UNIT_LABELS.get(unit, (unit, unit))
    if quantity is None:
        return singular
    return singular if to_decimal(quantity) == 1 else plural


def format_quantity(quantity: Union[int, float, str, Decimal], unit: Optional[str] = None) -> str:
    """Format a cart quantity: 2.5 meters stays "2.5", pieces are whole."""
    qty = to_decimal(quantity)

    if unit in FRACTIONAL_UNITS:
        if qty == qty.to_integral_value():
            return str(int(qty))
        return f"{qty:.1f}"

    return str(int(qty.to_integral_value(rounding=ROUND_HALF_UP)))
