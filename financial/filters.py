"""Trade list filters used by the dashboard views."""

from typing import Iterable, List, Optional

from data.models.trade import Trade

ALL_ACCOUNTS = 'all'


def filter_trades_by_account(trades: Iterable[Trade], account_id: Optional[str]) -> List[Trade]:
    """Keep trades for one account; None, '' or 'all' selects every account."""
    if not account_id or account_id == ALL_ACCOUNTS:
        return list(trades)
    return [trade for trade in trades if trade.account_id == account_id]


def sort_trades_by_date(trades: Iterable[Trade], descending: bool = False) -> List[Trade]:
    """Sort by entry date, then entry time. Stable for equal keys."""
    return sorted(
        trades,
        key=lambda t: (t.entry_date, t.entry_time or ''),
        reverse=descending,
    )
