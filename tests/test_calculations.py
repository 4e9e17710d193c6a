#!/usr/bin/env python3
"""
Unit tests for realized and net P/L calculations.
"""

import sys
import unittest
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from financial.calculations import (
    calculate_net_pl,
    calculate_realized_pl,
    direction_multiplier,
    resolve_realized_pl,
)


class TestRealizedPL(unittest.TestCase):

    def test_long_trade(self):
        self.assertEqual(calculate_realized_pl(100, 110, 10, 'LONG'), Decimal('100.00'))
        self.assertEqual(calculate_realized_pl(110, 100, 10, 'LONG'), Decimal('-100.00'))

    def test_short_trade(self):
        self.assertEqual(calculate_realized_pl(100, 110, 10, 'SHORT'), Decimal('-100.00'))
        self.assertEqual(calculate_realized_pl(110, 100, 10, 'SHORT'), Decimal('100.00'))

    def test_direction_is_case_insensitive(self):
        self.assertEqual(calculate_realized_pl(100, 110, 10, 'long'), Decimal('100.00'))

    def test_anything_but_long_is_treated_as_short(self):
        self.assertEqual(direction_multiplier('LONG'), 1)
        self.assertEqual(direction_multiplier('SHORT'), -1)
        self.assertEqual(direction_multiplier(None), -1)

    def test_missing_inputs(self):
        self.assertIsNone(calculate_realized_pl(None, 110, 10, 'LONG'))
        self.assertIsNone(calculate_realized_pl(100, None, 10, 'LONG'))
        self.assertIsNone(calculate_realized_pl(100, 110, None, 'LONG'))

    def test_zero_price_is_a_real_value(self):
        self.assertEqual(calculate_realized_pl(0, 5, 2, 'LONG'), Decimal('10.00'))

    def test_float_inputs_are_exact(self):
        # 0.1 * 3 in float would be 0.30000000000000004
        self.assertEqual(calculate_realized_pl(1.1, 1.2, 3, 'LONG'), Decimal('0.3'))
        self.assertEqual(calculate_realized_pl('10.005', '10.010', 1, 'LONG'), Decimal('0.005'))

    def test_sub_cent_result_is_not_rounded(self):
        # Fractional crypto quantity: 89.55 * 0.005
        self.assertEqual(calculate_realized_pl(43210.55, 43300.10, 0.005, 'LONG'), Decimal('0.44775'))
        self.assertEqual(calculate_realized_pl(43210.55, 43300.10, 0.005, 'SHORT'), Decimal('-0.44775'))


class TestResolveAndNetPL(unittest.TestCase):

    def test_direct_value_wins(self):
        self.assertEqual(resolve_realized_pl(50, 100, 110, 10, 'LONG'), Decimal('50'))

    def test_falls_back_to_prices(self):
        self.assertEqual(resolve_realized_pl(None, 100, 110, 10, 'LONG'), Decimal('100.00'))

    def test_unresolvable(self):
        self.assertIsNone(resolve_realized_pl(None, 100, None, 10, 'LONG'))

    def test_net_pl(self):
        self.assertEqual(calculate_net_pl(Decimal('100'), Decimal('2')), Decimal('98'))
        self.assertEqual(calculate_net_pl(Decimal('100')), Decimal('100'))
        self.assertEqual(calculate_net_pl(-10, 0), Decimal('-10'))


if __name__ == '__main__':
    unittest.main()
