"""
Cumulative P&L calculation for the dashboard equity curve.

Turns an ordered list of trades into chart-ready points: a synthetic starting
point at zero followed by one point per trade carrying the running sum of
net P/L.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Iterator, List, Optional

import pandas as pd

from data.models.trade import Trade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PLPoint:
    """One point on the cumulative P/L curve. Index 0 is the starting point."""
    index: int
    pl: Decimal
    date: Optional[str] = None

    @property
    def is_starting_point(self) -> bool:
        return self.index == 0


@dataclass
class CumulativePLSeries:
    """Cumulative P/L points plus the extremes used for axis scaling."""
    data: List[PLPoint] = field(default_factory=list)
    min_value: Decimal = Decimal('0')
    max_value: Decimal = Decimal('0')

    @property
    def value_range(self) -> Decimal:
        return self.max_value - self.min_value

    @property
    def final_value(self) -> Decimal:
        return self.data[-1].pl if self.data else Decimal('0')

    def to_dataframe(self) -> pd.DataFrame:
        """Points as a DataFrame with columns index, pl (float) and date."""
        return pd.DataFrame(
            {
                'index': [p.index for p in self.data],
                'pl': [float(p.pl) for p in self.data],
                'date': [p.date for p in self.data],
            }
        )


def iter_cumulative_pl(trades: Iterable[Trade]) -> Iterator[PLPoint]:
    """
    Yield cumulative P/L points for trades in the order given.

    The caller is responsible for filtering and sorting; this only accumulates.
    """
    running = Decimal('0')
    yield PLPoint(index=0, pl=running)
    for position, trade in enumerate(trades, start=1):
        running += trade.net_pl
        entry_date = trade.entry_date.isoformat() if trade.entry_date else None
        yield PLPoint(index=position, pl=running, date=entry_date)


def calculate_cumulative_pl(trades: Iterable[Trade]) -> CumulativePLSeries:
    """
    Build the full cumulative P/L series and track its min/max.

    Args:
        trades: Trades already filtered and sorted ascending by entry date

    Returns:
        CumulativePLSeries whose min/max cover every point, including point 0
    """
    points = []
    min_value = Decimal('0')
    max_value = Decimal('0')
    for point in iter_cumulative_pl(trades):
        points.append(point)
        min_value = min(min_value, point.pl)
        max_value = max(max_value, point.pl)

    logger.debug(f"Cumulative P/L over {len(points) - 1} trades: min={min_value}, max={max_value}")
    return CumulativePLSeries(data=points, min_value=min_value, max_value=max_value)
