"""Repository pattern implementation for trade data access."""

from .base_repository import (
    BaseTradeRepository,
    RepositoryError,
    DataValidationError,
    DataNotFoundError,
    StorageError,
    RemoteProcedureError
)
from .field_mapper import TradeMapper
from .trade_image_storage import TradeImageStorage
from .supabase_repository import SupabaseTradeRepository
from .repository_factory import (
    RepositoryFactory,
    get_trade_repository,
    set_trade_repository
)

__all__ = [
    # Base repository interface
    'BaseTradeRepository',
    'RepositoryError',
    'DataValidationError',
    'DataNotFoundError',
    'StorageError',
    'RemoteProcedureError',

    # Mapping and collaborators
    'TradeMapper',
    'TradeImageStorage',

    # Concrete implementations
    'SupabaseTradeRepository',

    # Factory
    'RepositoryFactory',
    'get_trade_repository',
    'set_trade_repository',
]
