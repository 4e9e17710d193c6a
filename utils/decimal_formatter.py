"""
Decimal formatting utilities for consistent money display.

Used by the dashboard chart axis and tooltips so every P/L value is rendered
the same way for a given currency.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

NumericValue = Union[Decimal, float, int, str, None]

# currency code -> (symbol, decimal places)
CURRENCY_FORMATS = {
    'USD': ('$', 2),
    'CAD': ('$', 2),
    'AUD': ('$', 2),
    'EUR': ('€', 2),
    'GBP': ('£', 2),
    'JPY': ('¥', 0),
}


def _to_decimal(value: NumericValue) -> Decimal:
    if value is None:
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal('0')


def currency_symbol(currency: str = 'USD') -> str:
    """Symbol for a currency code, or the code itself when unknown."""
    symbol, _ = CURRENCY_FORMATS.get((currency or 'USD').upper(), (None, 2))
    return symbol or currency.upper()


def currency_decimals(currency: str = 'USD') -> int:
    _, places = CURRENCY_FORMATS.get((currency or 'USD').upper(), (None, 2))
    return places


def format_currency(value: NumericValue, currency: str = 'USD') -> str:
    """
    Format a money value for display.

    Examples:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-98, 'EUR')
        '-€98.00'
        >>> format_currency(10, 'CHF')
        '10.00 CHF'
    """
    code = (currency or 'USD').upper()
    places = currency_decimals(code)
    quantum = Decimal(1).scaleb(-places)
    amount = _to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)

    sign = '-' if amount < 0 else ''
    digits = f"{abs(amount):,.{places}f}"

    if code in CURRENCY_FORMATS:
        return f"{sign}{currency_symbol(code)}{digits}"
    return f"{sign}{digits} {code}"

