import os
import sys

import pytest

# Add the repo root and tests directory to path so tests can import the packages and fakes
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from fake_supabase import FakeSupabaseClient, make_access_token, trade_row


@pytest.fixture
def supabase_client():
    """Fake Supabase client seeded with two trades for user-1 and one for user-2."""
    return FakeSupabaseClient([
        trade_row('t1', account_id='acc-1', entry_date='2024-01-01', realized_pl=100.0, commission=2.0),
        trade_row('t2', account_id='acc-2', entry_date='2024-01-03', realized_pl=-50.0),
        trade_row('t3', account_id='acc-1', user_id='user-2', entry_date='2024-01-02', realized_pl=10.0),
    ])


@pytest.fixture
def app(supabase_client):
    """Create and configure a new app instance for each test."""
    from config.settings import Settings
    from data.repositories.supabase_repository import SupabaseTradeRepository
    from web_dashboard.app import create_app

    settings = Settings(load_env_file=False)
    settings.set('display.currency', 'USD')

    app = create_app(
        repository=SupabaseTradeRepository(client=supabase_client),
        settings=settings,
        configure_logging=False,
    )
    app.config.update({
        "TESTING": True,
        "DEBUG": False
    })

    yield app


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {'Authorization': f"Bearer {make_access_token('user-1')}"}
