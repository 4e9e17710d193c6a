"""
Financial calculations for the trade journal.

Realized/net P&L with Decimal arithmetic, account and date filters over trade
lists, and the cumulative P&L series behind the dashboard chart.
"""

from .calculations import (
    direction_multiplier,
    calculate_realized_pl,
    resolve_realized_pl,
    calculate_net_pl
)

from .filters import (
    ALL_ACCOUNTS,
    filter_trades_by_account,
    sort_trades_by_date
)

from .pnl_calculator import (
    PLPoint,
    CumulativePLSeries,
    iter_cumulative_pl,
    calculate_cumulative_pl
)

__all__ = [
    # Calculations
    'direction_multiplier',
    'calculate_realized_pl',
    'resolve_realized_pl',
    'calculate_net_pl',

    # Filters
    'ALL_ACCOUNTS',
    'filter_trades_by_account',
    'sort_trades_by_date',

    # Cumulative P&L
    'PLPoint',
    'CumulativePLSeries',
    'iter_cumulative_pl',
    'calculate_cumulative_pl'
]
