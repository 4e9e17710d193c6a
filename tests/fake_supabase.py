"""
In-memory stand-in for the supabase-py client used by the repository tests.

Supports the subset of the query builder the repository uses
(select/eq/in_/order/insert/update/delete/execute), ``rpc`` for the balance
function and ``storage.from_().remove``. Every call is recorded in
``client.calls`` so tests can assert on ordering, and failures can be
injected per operation.
"""

import base64
import copy
import itertools
import json
import time
from decimal import Decimal


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeSupabaseError(Exception):
    pass


class FakeQuery:
    def __init__(self, client, table_name):
        self.client = client
        self.table_name = table_name
        self.action = 'select'
        self.payload = None
        self.filters = []
        self.orders = []

    def select(self, *columns):
        self.action = 'select'
        return self

    def insert(self, row):
        self.action = 'insert'
        self.payload = row
        return self

    def update(self, payload):
        self.action = 'update'
        self.payload = payload
        return self

    def delete(self):
        self.action = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append(('eq', column, value))
        return self

    def in_(self, column, values):
        self.filters.append(('in', column, list(values)))
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        return self

    def _matches(self, row):
        for kind, column, value in self.filters:
            if kind == 'eq' and row.get(column) != value:
                return False
            if kind == 'in' and row.get(column) not in value:
                return False
        return True

    def execute(self):
        self.client.calls.append(('table', self.table_name, self.action, list(self.filters)))
        if self.action in self.client.fail_actions:
            raise FakeSupabaseError(f"{self.action} failed")

        rows = self.client.tables.setdefault(self.table_name, [])

        if self.action == 'insert':
            row = dict(self.payload)
            row.setdefault('id', f"trade-{next(self.client.id_counter)}")
            rows.append(row)
            return FakeResponse([copy.deepcopy(row)])

        matching = [row for row in rows if self._matches(row)]

        if self.action == 'select':
            result = [copy.deepcopy(row) for row in matching]
            for column, desc in reversed(self.orders):
                result.sort(key=lambda r: r.get(column) or '', reverse=desc)
            return FakeResponse(result)

        if self.action == 'update':
            for row in matching:
                row.update(self.payload)
            return FakeResponse([copy.deepcopy(row) for row in matching])

        if self.action == 'delete':
            self.client.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return FakeResponse([copy.deepcopy(row) for row in matching])

        raise AssertionError(f"Unknown action {self.action}")


class FakeRpc:
    def __init__(self, client, name, params):
        self.client = client
        self.name = name
        self.params = params

    def execute(self):
        self.client.calls.append(('rpc', self.name, dict(self.params)))
        self.client.rpc_calls.append((self.name, dict(self.params)))
        if self.client.fail_rpc_at is not None and len(self.client.rpc_calls) >= self.client.fail_rpc_at:
            raise FakeSupabaseError("rpc failed")

        account_id = self.params['p_account_id']
        amount = Decimal(str(self.params['p_amount']))
        self.client.balances[account_id] = self.client.balances.get(account_id, Decimal('0')) + amount
        return FakeResponse(None)


class FakeBucket:
    def __init__(self, client, bucket):
        self.client = client
        self.bucket = bucket

    def remove(self, paths):
        self.client.calls.append(('storage', self.bucket, list(paths)))
        if self.client.fail_storage:
            raise FakeSupabaseError("storage failed")
        self.client.removed.append((self.bucket, list(paths)))
        return [{'name': path} for path in paths]


class FakeStorage:
    def __init__(self, client):
        self.client = client

    def from_(self, bucket):
        return FakeBucket(self.client, bucket)


class FakeSupabaseClient:
    """Recording fake of ``supabase.Client``.

    Attributes:
        tables: table name -> list of row dicts
        balances: account id -> Decimal balance changed by the balance function
        calls: every executed table/rpc/storage call in order
        fail_actions: table actions ('select', 'insert', ...) that raise
        fail_rpc_at: 1-based rpc call number from which rpc calls raise
        fail_storage: storage removals raise
    """

    def __init__(self, rows=None, table_name='trades'):
        self.tables = {table_name: [dict(row) for row in rows or []]}
        self.balances = {}
        self.calls = []
        self.rpc_calls = []
        self.removed = []
        self.fail_actions = set()
        self.fail_rpc_at = None
        self.fail_storage = False
        self.id_counter = itertools.count(1)
        self.storage = FakeStorage(self)

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        return FakeRpc(self, name, params)

    def call_kinds(self):
        """Sequence of 'rpc' / '<table action>' / 'storage' for ordering checks."""
        kinds = []
        for call in self.calls:
            kinds.append(call[2] if call[0] == 'table' else call[0])
        return kinds


def trade_row(trade_id, account_id='acc-1', user_id='user-1', **overrides):
    """A stored trade row with sensible defaults."""
    row = {
        'id': trade_id,
        'user_id': user_id,
        'account_id': account_id,
        'instrument_type': 'STOCK',
        'direction': 'LONG',
        'symbol': 'AAPL',
        'entry_date': '2024-01-02',
        'entry_time': None,
        'exit_date': None,
        'exit_time': None,
        'entry_price': None,
        'exit_price': None,
        'quantity': None,
        'realized_pl': 0.0,
        'commission': 0.0,
        'timeframe': None,
        'emotional_state': None,
        'strategy': None,
        'setup': None,
        'notes': None,
        'entry_screenshot': None,
        'exit_screenshot': None,
    }
    row.update(overrides)
    return row


def _b64(data):
    return base64.urlsafe_b64encode(json.dumps(data).encode()).decode().rstrip('=')


def make_access_token(user_id='user-1', expires_in=3600):
    """Unsigned JWT shaped like a Supabase access token (only the payload is read)."""
    header = _b64({'alg': 'HS256', 'typ': 'JWT'})
    payload = _b64({'sub': user_id, 'exp': int(time.time()) + expires_in})
    return f"{header}.{payload}.signature"
