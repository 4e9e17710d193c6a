#!/usr/bin/env python3
"""
Chart utilities for the cumulative P/L graph with Plotly.

Features:
- Account filter and date ordering before accumulation
- Memoized series per (trade list, selected account)
- Area chart with padded y range and currency-formatted axis and hover text
"""

import logging
from typing import Any, List, Optional, Sequence

import numpy as np
import plotly.graph_objs as go

from config.constants import CHART_DOMAIN_PADDING, CHART_HEIGHT, DEFAULT_CURRENCY
from data.models.trade import Trade
from financial.filters import filter_trades_by_account, sort_trades_by_date
from financial.pnl_calculator import CumulativePLSeries, PLPoint, calculate_cumulative_pl
from utils.decimal_formatter import format_currency

logger = logging.getLogger(__name__)

PRIMARY_COLOR = '#2563eb'
FILL_COLOR = 'rgba(37, 99, 235, 0.2)'
Y_TICK_COUNT = 6


def point_label(point: PLPoint) -> str:
    """Tooltip heading for a point."""
    return 'Starting Point' if point.is_starting_point else f'Trade #{point.index}'


def _hover_rows(series: CumulativePLSeries, currency: str) -> List[List[str]]:
    rows = []
    for point in series.data:
        date_line = '' if point.is_starting_point or not point.date else f'<br>{point.date}'
        rows.append([point_label(point), f'P/L: {format_currency(point.pl, currency)}', date_line])
    return rows


def y_axis_range(series: CumulativePLSeries, padding_ratio: float = CHART_DOMAIN_PADDING) -> Optional[List[float]]:
    """Y range padded by a share of the value range above the max and below the min.

    Returns None when every point has the same value, leaving Plotly to autorange.
    """
    value_range = float(series.value_range)
    if value_range == 0:
        return None
    padding = value_range * padding_ratio
    return [float(series.min_value) - padding, float(series.max_value) + padding]


def create_cumulative_pl_chart(series: CumulativePLSeries, currency: str = DEFAULT_CURRENCY,
                               title: str = 'Cumulative P/L') -> go.Figure:
    """Create an area chart of cumulative P/L by trade number.

    Args:
        series: Output of calculate_cumulative_pl
        currency: Currency code used for axis ticks and hover text
        title: Chart title

    Returns:
        Plotly figure
    """
    df = series.to_dataframe()

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=df['index'].tolist(),
        y=df['pl'].tolist(),
        mode='lines',
        name='Cumulative P/L',
        line=dict(color=PRIMARY_COLOR, width=2, shape='spline'),
        fill='tozeroy',
        fillcolor=FILL_COLOR,
        customdata=_hover_rows(series, currency),
        hovertemplate='%{customdata[0]}<br>%{customdata[1]}%{customdata[2]}<extra></extra>'
    ))

    y_range = y_axis_range(series)
    if y_range is not None:
        tick_values = np.linspace(y_range[0], y_range[1], Y_TICK_COUNT)
        yaxis = dict(
            range=y_range,
            tickvals=tick_values.tolist(),
            ticktext=[format_currency(value, currency) for value in tick_values],
        )
    else:
        # Flat series: Plotly autoranges around the single value, labelled like the hover text
        value = float(series.min_value)
        yaxis = dict(tickvals=[value], ticktext=[format_currency(value, currency)])

    fig.update_layout(
        title=title,
        height=CHART_HEIGHT,
        margin=dict(t=50, r=30, l=80, b=50),
        xaxis=dict(title='Trade #', tickmode='auto', rangemode='nonnegative'),
        yaxis=dict(title=f'P/L ({currency.upper()})', **yaxis),
        hovermode='closest',
        showlegend=False,
        template='plotly_white'
    )

    return fig


class PLChart:
    """Cumulative P/L chart for a trade list and selected account.

    The series is recomputed only when the trade list object or the selected
    account changes; passing the same list again reuses the cached series.
    The cache lives on the instance, so it only helps callers that keep one
    PLChart across renders.
    """

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self.currency = currency
        self.compute_count = 0
        self._trades: Optional[Sequence[Trade]] = None
        self._account_id: Any = None
        self._series: Optional[CumulativePLSeries] = None

    def get_series(self, trades: Sequence[Trade], selected_account_id: Optional[str]) -> CumulativePLSeries:
        """Filtered, date-ordered cumulative P/L series (memoized)."""
        if (self._series is not None
                and trades is self._trades
                and selected_account_id == self._account_id):
            return self._series

        filtered = filter_trades_by_account(trades, selected_account_id)
        ordered = sort_trades_by_date(filtered)
        self._series = calculate_cumulative_pl(ordered)
        self._trades = trades
        self._account_id = selected_account_id
        self.compute_count += 1

        logger.debug(f"Computed cumulative P/L for account {selected_account_id or 'all'}: {len(ordered)} trades")
        return self._series

    def render(self, trades: Sequence[Trade], selected_account_id: Optional[str]) -> go.Figure:
        return create_cumulative_pl_chart(self.get_series(trades, selected_account_id), self.currency)
