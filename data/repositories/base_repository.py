"""Abstract base repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional

from ..models.trade import Trade, TradeFormData


class BaseTradeRepository(ABC):
    """Abstract base class for trade data access.

    Implementations keep each account's stored balance equal to the sum of
    its trades' net P/L: every create, update and delete adjusts the balance
    alongside the trade row.
    """

    @abstractmethod
    def fetch_trades(self, user_id: str) -> List[Trade]:
        """Retrieve all trades for a user, newest entry date first.

        Raises:
            StorageError: If the query fails
        """
        pass

    @abstractmethod
    def get_trade(self, trade_id: str) -> Trade:
        """Retrieve a single trade.

        Raises:
            DataNotFoundError: If no trade has this id
            StorageError: If the query fails
        """
        pass

    @abstractmethod
    def create_trade(self, user_id: str, form: TradeFormData) -> Trade:
        """Record a new trade and credit its net P/L to the account.

        Raises:
            DataValidationError: If realized P/L cannot be resolved
            RemoteProcedureError: If the balance adjustment fails (nothing is written)
            StorageError: If the insert fails (the balance was already adjusted)
        """
        pass

    @abstractmethod
    def update_trade(self, trade_id: str, changes: Mapping[str, Any],
                     user_id: Optional[str] = None) -> Trade:
        """Apply a partial update and move the balance by the net P/L delta.

        When user_id is given, only that user's trade can be changed.

        Raises:
            DataNotFoundError: If no trade has this id (for this user)
            RemoteProcedureError: If the balance adjustment fails
            StorageError: If a query fails
        """
        pass

    @abstractmethod
    def delete_trade(self, trade_id: str, user_id: Optional[str] = None) -> None:
        """Delete a trade, its screenshots, and reverse its balance effect.

        When user_id is given, only that user's trade can be deleted.

        Raises:
            DataNotFoundError: If no trade has this id (for this user)
            RemoteProcedureError: If the balance reversal fails
            StorageError: If a query fails
        """
        pass

    @abstractmethod
    def delete_trades(self, trade_ids: Iterable[str], user_id: Optional[str] = None) -> None:
        """Batch delete; balances are reversed one trade at a time.

        When user_id is given, ids belonging to other users are skipped.

        Raises:
            RemoteProcedureError: On the first failed balance reversal
            StorageError: If a query fails
        """
        pass


class RepositoryError(Exception):
    """Base exception for repository operations."""
    pass


class DataValidationError(RepositoryError):
    """Exception raised when data validation fails."""
    pass


class DataNotFoundError(RepositoryError):
    """Exception raised when requested data is not found."""
    pass


class StorageError(RepositoryError):
    """Exception raised when a table query fails."""
    pass


class RemoteProcedureError(RepositoryError):
    """Exception raised when a database function call fails."""
    pass
