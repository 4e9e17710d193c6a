"""
Financial calculations module with precise Decimal arithmetic.

Realized and net P/L for journaled trades. Prices, quantities and the
resulting P/L are kept at full precision; rounding happens only for display.
"""

from decimal import Decimal
from typing import Optional, Union

from data.models.trade import LONG, normalize_direction

# Type alias for numeric inputs that will be converted to Decimal
NumericInput = Union[float, int, str, Decimal]


def _to_decimal(value: NumericInput) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def direction_multiplier(direction: Optional[str]) -> int:
    """1 for LONG trades, -1 for anything else."""
    return 1 if normalize_direction(direction) == LONG else -1


def calculate_realized_pl(entry_price: Optional[NumericInput],
                          exit_price: Optional[NumericInput],
                          quantity: Optional[NumericInput],
                          direction: Optional[str]) -> Optional[Decimal]:
    """
    Calculate realized P/L from entry/exit prices.

    Args:
        entry_price: Price the position was opened at
        exit_price: Price the position was closed at
        quantity: Position size
        direction: LONG or SHORT

    Returns:
        (exit - entry) * quantity for LONG, (entry - exit) * quantity for SHORT.
        None if any price or the quantity is missing.

    Examples:
        >>> calculate_realized_pl(100, 110, 10, "LONG")
        Decimal('100')
        >>> calculate_realized_pl(100, 110, 10, "SHORT")
        Decimal('-100')
        >>> calculate_realized_pl("43210.55", "43300.10", "0.005", "LONG")
        Decimal('0.44775')
    """
    if entry_price is None or exit_price is None or quantity is None:
        return None

    entry_dec = _to_decimal(entry_price)
    exit_dec = _to_decimal(exit_price)
    quantity_dec = _to_decimal(quantity)

    return (exit_dec - entry_dec) * quantity_dec * direction_multiplier(direction)


def resolve_realized_pl(realized_pl: Optional[NumericInput],
                        entry_price: Optional[NumericInput],
                        exit_price: Optional[NumericInput],
                        quantity: Optional[NumericInput],
                        direction: Optional[str]) -> Optional[Decimal]:
    """Use a directly entered P/L when given, otherwise derive it from prices."""
    if realized_pl is not None:
        return _to_decimal(realized_pl)
    return calculate_realized_pl(entry_price, exit_price, quantity, direction)


def calculate_net_pl(realized_pl: NumericInput, commission: Optional[NumericInput] = None) -> Decimal:
    """
    Net P/L is realized P/L minus commission (commission defaults to 0).

    Examples:
        >>> calculate_net_pl(Decimal('100'), Decimal('2'))
        Decimal('98')
    """
    commission_dec = _to_decimal(commission) if commission is not None else Decimal('0')
    return _to_decimal(realized_pl) - commission_dec
