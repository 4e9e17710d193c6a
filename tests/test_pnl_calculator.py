#!/usr/bin/env python3
"""
Tests for account filtering, date ordering and the cumulative P/L series.
"""

import sys
import unittest
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from data.models.trade import Trade
from financial.filters import filter_trades_by_account, sort_trades_by_date
from financial.pnl_calculator import calculate_cumulative_pl, iter_cumulative_pl


def make_trade(trade_id, entry_date, realized_pl, commission=0, account_id='acc-1', entry_time=None):
    return Trade(
        id=trade_id, account_id=account_id, instrument_type='STOCK', direction='LONG',
        symbol='AAPL', entry_date=entry_date, realized_pl=realized_pl,
        commission=commission, entry_time=entry_time,
    )


class TestFilters(unittest.TestCase):

    def setUp(self):
        self.trades = [
            make_trade('a', '2024-01-03', 10, account_id='acc-1'),
            make_trade('b', '2024-01-01', 20, account_id='acc-2'),
            make_trade('c', '2024-01-02', 30, account_id='acc-1'),
        ]

    def test_all_accounts(self):
        for selection in (None, '', 'all'):
            self.assertEqual(len(filter_trades_by_account(self.trades, selection)), 3)

    def test_single_account(self):
        ids = [t.id for t in filter_trades_by_account(self.trades, 'acc-1')]
        self.assertEqual(ids, ['a', 'c'])

    def test_unknown_account(self):
        self.assertEqual(filter_trades_by_account(self.trades, 'acc-9'), [])

    def test_sort_ascending_by_date_then_time(self):
        trades = self.trades + [
            make_trade('d', '2024-01-02', 0, entry_time='09:30'),
            make_trade('e', '2024-01-02', 0, entry_time='08:00'),
        ]
        ids = [t.id for t in sort_trades_by_date(trades)]
        self.assertEqual(ids, ['b', 'c', 'e', 'd', 'a'])

    def test_sort_does_not_modify_input(self):
        sort_trades_by_date(self.trades)
        self.assertEqual([t.id for t in self.trades], ['a', 'b', 'c'])


class TestCumulativePL(unittest.TestCase):

    def test_empty_trades_only_starting_point(self):
        series = calculate_cumulative_pl([])

        self.assertEqual(len(series.data), 1)
        self.assertTrue(series.data[0].is_starting_point)
        self.assertEqual(series.data[0].pl, Decimal('0'))
        self.assertEqual(series.min_value, Decimal('0'))
        self.assertEqual(series.max_value, Decimal('0'))
        self.assertEqual(series.value_range, Decimal('0'))

    def test_running_net_pl(self):
        trades = [
            make_trade('a', '2024-01-01', 100, commission=2),
            make_trade('b', '2024-01-02', -50),
            make_trade('c', '2024-01-03', 30, commission=1),
        ]
        series = calculate_cumulative_pl(trades)

        self.assertEqual([p.index for p in series.data], [0, 1, 2, 3])
        self.assertEqual([p.pl for p in series.data],
                         [Decimal('0'), Decimal('98'), Decimal('48'), Decimal('77')])
        self.assertEqual([p.date for p in series.data],
                         [None, '2024-01-01', '2024-01-02', '2024-01-03'])
        self.assertEqual(series.final_value, Decimal('77'))

    def test_min_max_include_starting_point(self):
        series = calculate_cumulative_pl([
            make_trade('a', '2024-01-01', 50),
            make_trade('b', '2024-01-02', 25),
        ])
        self.assertEqual(series.min_value, Decimal('0'))
        self.assertEqual(series.max_value, Decimal('75'))

        losing = calculate_cumulative_pl([make_trade('a', '2024-01-01', -40)])
        self.assertEqual(losing.min_value, Decimal('-40'))
        self.assertEqual(losing.max_value, Decimal('0'))

    def test_generator_matches_series(self):
        trades = [make_trade('a', '2024-01-01', 5), make_trade('b', '2024-01-02', 5)]
        self.assertEqual(list(iter_cumulative_pl(trades)), calculate_cumulative_pl(trades).data)

    def test_to_dataframe(self):
        df = calculate_cumulative_pl([make_trade('a', '2024-01-01', 12.5)]).to_dataframe()

        self.assertEqual(list(df.columns), ['index', 'pl', 'date'])
        self.assertEqual(df['pl'].tolist(), [0.0, 12.5])
        self.assertEqual(df['index'].tolist(), [0, 1])


if __name__ == '__main__':
    unittest.main()
