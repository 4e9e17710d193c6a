"""Tests for screenshot removal from Supabase Storage."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from fake_supabase import FakeSupabaseClient
from data.repositories.trade_image_storage import TradeImageStorage


class TestTradeImageStorage(unittest.TestCase):

    def setUp(self):
        self.client = FakeSupabaseClient()
        self.storage = TradeImageStorage(self.client, bucket='trade-images')

    def test_object_path_from_public_url(self):
        url = 'https://demo.supabase.co/storage/v1/object/public/trade-images/user-1/my%20chart.png'
        self.assertEqual(self.storage.object_path(url), 'user-1/my chart.png')

    def test_object_path_from_bucket_path(self):
        self.assertEqual(self.storage.object_path('user-1/chart.png'), 'user-1/chart.png')
        self.assertEqual(self.storage.object_path('/user-1/chart.png'), 'user-1/chart.png')

    def test_url_in_other_bucket_is_ignored(self):
        url = 'https://demo.supabase.co/storage/v1/object/public/avatars/user-1.png'
        self.assertIsNone(self.storage.object_path(url))
        self.assertFalse(self.storage.delete_trade_image(url))
        self.assertEqual(self.client.calls, [])

    def test_empty_reference(self):
        self.assertIsNone(self.storage.object_path(''))
        self.assertFalse(self.storage.delete_trade_image(None))

    def test_delete_removes_object(self):
        self.assertTrue(self.storage.delete_trade_image('user-1/chart.png'))
        self.assertEqual(self.client.removed, [('trade-images', ['user-1/chart.png'])])

    def test_delete_failure_returns_false(self):
        self.client.fail_storage = True
        self.assertFalse(self.storage.delete_trade_image('user-1/chart.png'))


if __name__ == '__main__':
    unittest.main()
