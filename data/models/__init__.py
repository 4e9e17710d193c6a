"""Data models for the trade journal.

Trades are kept in the application shape here; the repository layer owns the
translation to and from database rows.
"""

from .trade import Trade, TradeFormData, LONG, SHORT, DIRECTIONS, INSTRUMENT_TYPES

__all__ = ['Trade', 'TradeFormData', 'LONG', 'SHORT', 'DIRECTIONS', 'INSTRUMENT_TYPES']
