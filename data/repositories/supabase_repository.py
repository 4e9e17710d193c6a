"""Supabase-based trade repository implementation."""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from supabase import create_client

from config.constants import (
    BALANCE_RPC,
    BALANCE_RPC_ACCOUNT_PARAM,
    BALANCE_RPC_AMOUNT_PARAM,
    DEFAULT_IMAGE_BUCKET,
    ERROR_PL_UNRESOLVABLE,
    ERROR_TRADE_NOT_FOUND,
    TRADES_TABLE,
)
from financial.calculations import calculate_net_pl, calculate_realized_pl, resolve_realized_pl
from ..models.trade import Trade, TradeFormData, to_decimal
from .base_repository import (
    BaseTradeRepository,
    DataNotFoundError,
    DataValidationError,
    RemoteProcedureError,
    RepositoryError,
    StorageError,
)
from .field_mapper import TradeMapper
from .trade_image_storage import TradeImageStorage

logger = logging.getLogger(__name__)

# Suppress httpx INFO logs (Supabase HTTP requests)
logging.getLogger("httpx").setLevel(logging.WARNING)

PRICING_FIELDS = ('entry_price', 'exit_price', 'quantity', 'direction')


class SupabaseTradeRepository(BaseTradeRepository):
    """Trade repository backed by a Supabase table and balance function.

    The account balance lives in the database and is only changed through the
    ``update_account_balance`` function. Each mutation adjusts the balance
    before writing the trade row; the two calls are not atomic, so a failed
    row write after a successful adjustment leaves the balance off by that
    amount. Nothing here retries or compensates.
    """

    def __init__(self, client: Any = None, url: str = None, key: str = None,
                 trades_table: str = TRADES_TABLE, balance_rpc: str = BALANCE_RPC,
                 image_storage: Optional[TradeImageStorage] = None,
                 bucket: str = DEFAULT_IMAGE_BUCKET):
        """Initialize the repository.

        Args:
            client: Existing Supabase client; created from url/key when omitted
            url: Supabase project URL
            key: Supabase API key
            trades_table: Name of the trades table
            balance_rpc: Name of the balance adjustment function
            image_storage: Screenshot storage; defaults to a bucket on the same client
            bucket: Storage bucket used when image_storage is not given
        """
        if client is None:
            url = url or os.getenv("SUPABASE_URL")
            key = key or os.getenv("SUPABASE_PUBLISHABLE_KEY") or os.getenv("SUPABASE_ANON_KEY")
            if not url or not key:
                raise RepositoryError("Supabase URL and key must be provided")
            try:
                client = create_client(url, key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise RepositoryError(f"Failed to initialize Supabase client: {e}") from e

        self.supabase = client
        self.trades_table = trades_table
        self.balance_rpc = balance_rpc
        self.image_storage = image_storage or TradeImageStorage(client, bucket=bucket)

    def _table(self):
        return self.supabase.table(self.trades_table)

    def _execute(self, query: Any, action: str) -> Any:
        """Run a table query, converting client failures into StorageError."""
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Failed to {action}: {e}")
            raise StorageError(f"Failed to {action}: {e}") from e

    def _owned(self, query: Any, user_id: Optional[str]) -> Any:
        """Restrict a query to one user's rows when a user id is given."""
        return query.eq("user_id", user_id) if user_id is not None else query

    def _fetch_row(self, trade_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        result = self._execute(
            self._owned(self._table().select("*").eq("id", trade_id), user_id),
            f"fetch trade {trade_id}"
        )
        if not result.data:
            raise DataNotFoundError(f"{ERROR_TRADE_NOT_FOUND}: {trade_id}")
        return result.data[0]

    def _adjust_balance(self, account_id: str, amount: Decimal) -> None:
        """Add a signed amount to the account's stored balance (one call per adjustment)."""
        params = {
            BALANCE_RPC_ACCOUNT_PARAM: account_id,
            BALANCE_RPC_AMOUNT_PARAM: float(amount),
        }
        try:
            self.supabase.rpc(self.balance_rpc, params).execute()
        except Exception as e:
            logger.error(f"Failed to adjust balance of account {account_id} by {amount}: {e}")
            raise RemoteProcedureError(
                f"Failed to adjust balance of account {account_id}: {e}"
            ) from e
        logger.info(f"Adjusted balance of account {account_id} by {amount}")

    def _delete_screenshots(self, trade: Trade) -> None:
        for reference in trade.screenshots():
            self.image_storage.delete_trade_image(reference)

    def fetch_trades(self, user_id: str) -> List[Trade]:
        """Get a user's trades, newest entry date first.

        Args:
            user_id: Owning user id

        Returns:
            List of trades

        Raises:
            StorageError: If data retrieval fails
        """
        # Secondary order on id keeps same-day trades in a repeatable order
        result = self._execute(
            self._table()
                .select("*")
                .eq("user_id", user_id)
                .order("entry_date", desc=True)
                .order("id"),
            "fetch trades"
        )
        trades = [TradeMapper.db_to_model(row) for row in result.data or []]
        logger.debug(f"Fetched {len(trades)} trades for user {user_id}")
        return trades

    def get_trade(self, trade_id: str) -> Trade:
        """Get one trade by id."""
        return TradeMapper.db_to_model(self._fetch_row(trade_id))

    def create_trade(self, user_id: str, form: TradeFormData) -> Trade:
        """Create a trade and credit its net P/L to the account.

        Args:
            user_id: Owning user id
            form: Trade form data; realized P/L is derived from prices when absent

        Returns:
            The created trade

        Raises:
            DataValidationError: If realized P/L can neither be read nor calculated
            RemoteProcedureError: If the balance adjustment fails (no row is written)
            StorageError: If the insert fails
        """
        realized_pl = resolve_realized_pl(
            form.realized_pl, form.entry_price, form.exit_price, form.quantity, form.direction
        )
        if realized_pl is None:
            raise DataValidationError(ERROR_PL_UNRESOLVABLE)

        net_pl = calculate_net_pl(realized_pl, form.commission)

        self._adjust_balance(form.account_id, net_pl)

        row = TradeMapper.form_to_db(form, user_id, realized_pl)
        result = self._execute(self._table().insert(row), f"create trade for {form.symbol}")
        if not result.data:
            raise StorageError(f"Insert for {form.symbol} returned no row")

        trade = TradeMapper.db_to_model(result.data[0])
        logger.info(f"Created trade {trade.id} ({trade.symbol}) with net P/L {net_pl}")
        return trade

    def _updated_realized_pl(self, existing: Trade, changes: Mapping[str, Any]) -> Decimal:
        """Realized P/L after applying changes.

        A supplied value wins. Otherwise P/L is recalculated only when a
        pricing field changed, from the supplied values merged over the
        existing ones; a directly entered P/L is kept when prices are absent.
        """
        supplied = to_decimal(changes.get('realized_pl'))
        if supplied is not None:
            return supplied

        if not any(name in changes for name in PRICING_FIELDS):
            return existing.realized_pl

        merged = {
            name: changes[name] if name in changes else getattr(existing, name)
            for name in PRICING_FIELDS
        }
        recalculated = calculate_realized_pl(
            to_decimal(merged['entry_price']),
            to_decimal(merged['exit_price']),
            to_decimal(merged['quantity']),
            merged['direction'],
        )
        return recalculated if recalculated is not None else existing.realized_pl

    def update_trade(self, trade_id: str, changes: Mapping[str, Any],
                     user_id: Optional[str] = None) -> Trade:
        """Apply a partial update and move the balance by the net P/L difference.

        Args:
            trade_id: Trade to update
            changes: Fields to change, keyed by application (camelCase) or
                attribute (snake_case) names
            user_id: Owning user; another user's trade is reported as not found

        Returns:
            The updated trade

        Raises:
            DataNotFoundError: If the trade does not exist or belongs to another user
            RemoteProcedureError: If the balance adjustment fails (row is not updated)
            StorageError: If a query fails
        """
        existing = TradeMapper.db_to_model(self._fetch_row(trade_id, user_id))
        normalized = TradeMapper.normalize_changes(changes)

        try:
            payload = TradeMapper.partial_to_db(normalized)
            new_realized_pl = self._updated_realized_pl(existing, normalized)
            if 'commission' in normalized:
                new_commission = to_decimal(normalized['commission']) or Decimal('0')
            else:
                new_commission = existing.commission
        except ValueError as e:
            raise DataValidationError(f"Invalid trade update: {e}") from e

        old_net_pl = existing.net_pl
        new_net_pl = calculate_net_pl(new_realized_pl, new_commission)

        difference = new_net_pl - old_net_pl
        if difference != 0:
            self._adjust_balance(existing.account_id, difference)

        if new_realized_pl != existing.realized_pl or 'realized_pl' in normalized:
            payload['realized_pl'] = float(new_realized_pl)

        if not payload:
            logger.debug(f"No updatable fields supplied for trade {trade_id}")
            return existing

        result = self._execute(
            self._owned(self._table().update(payload).eq("id", trade_id), user_id),
            f"update trade {trade_id}"
        )
        if not result.data:
            raise DataNotFoundError(f"{ERROR_TRADE_NOT_FOUND}: {trade_id}")

        logger.info(f"Updated trade {trade_id} ({', '.join(sorted(payload))}); net P/L change {difference}")
        return TradeMapper.db_to_model(result.data[0])

    def delete_trade(self, trade_id: str, user_id: Optional[str] = None) -> None:
        """Delete a trade, its screenshots, and reverse its net P/L.

        Raises:
            DataNotFoundError: If the trade does not exist or belongs to another user
            RemoteProcedureError: If the balance reversal fails (row is kept)
            StorageError: If a query fails
        """
        trade = TradeMapper.db_to_model(self._fetch_row(trade_id, user_id))

        self._delete_screenshots(trade)
        self._adjust_balance(trade.account_id, -trade.net_pl)

        self._execute(
            self._owned(self._table().delete().eq("id", trade_id), user_id),
            f"delete trade {trade_id}"
        )
        logger.info(f"Deleted trade {trade_id} ({trade.symbol})")

    def delete_trades(self, trade_ids: Iterable[str], user_id: Optional[str] = None) -> None:
        """Delete several trades.

        Screenshots go first, then one balance reversal per trade in order;
        the first failed reversal aborts the batch before any row is deleted.
        All rows are removed with a single delete. With a user id, only that
        user's trades are fetched, reversed and deleted; other ids are skipped.
        """
        ids = list(dict.fromkeys(trade_ids))
        if not ids:
            return

        result = self._execute(
            self._owned(self._table().select("*").in_("id", ids), user_id),
            f"fetch {len(ids)} trades"
        )
        trades = [TradeMapper.db_to_model(row) for row in result.data or []]
        if not trades:
            logger.info(f"None of {len(ids)} trades found for deletion")
            return
        if len(trades) < len(ids):
            logger.warning(f"Skipping {len(ids) - len(trades)} trades not found for deletion")

        for trade in trades:
            self._delete_screenshots(trade)

        for trade in trades:
            self._adjust_balance(trade.account_id, -trade.net_pl)

        found_ids = [trade.id for trade in trades]
        self._execute(
            self._owned(self._table().delete().in_("id", found_ids), user_id),
            f"delete {len(found_ids)} trades"
        )
        logger.info(f"Deleted {len(found_ids)} trades")
