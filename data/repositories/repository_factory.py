"""Repository factory for creating repository instances."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from config.settings import Settings, get_settings
from .base_repository import BaseTradeRepository
from .supabase_repository import SupabaseTradeRepository

logger = logging.getLogger(__name__)


class RepositoryFactory:
    """Factory for creating trade repository instances based on configuration."""

    _repositories: Dict[str, type] = {
        'supabase': SupabaseTradeRepository,
    }

    # Constructor arguments each repository type accepts
    _accepted_kwargs: Dict[str, tuple] = {
        'supabase': ('client', 'url', 'key', 'trades_table', 'balance_rpc', 'image_storage', 'bucket'),
    }

    @classmethod
    def create_repository(cls, repository_type: str = 'supabase', **kwargs) -> BaseTradeRepository:
        """Create a repository instance based on type.

        Args:
            repository_type: Registered repository type name
            **kwargs: Arguments for the repository constructor; unknown or None ones are dropped

        Raises:
            ValueError: If repository type is not supported
        """
        if repository_type not in cls._repositories:
            available_types = list(cls._repositories.keys())
            raise ValueError(
                f"Unsupported repository type: {repository_type}. "
                f"Available types: {available_types}"
            )

        repository_class = cls._repositories[repository_type]
        accepted = cls._accepted_kwargs.get(repository_type)
        clean_kwargs = {
            k: v for k, v in kwargs.items()
            if k != 'type' and v is not None and (accepted is None or k in accepted)
        }

        logger.info(f"Creating {repository_type} repository with args: {sorted(clean_kwargs)}")
        return repository_class(**clean_kwargs)

    @classmethod
    def create_from_settings(cls, settings: Optional[Settings] = None, client: Any = None) -> BaseTradeRepository:
        """Create the configured repository.

        Args:
            settings: Settings to read (global settings by default)
            client: Optional pre-built Supabase client
        """
        settings = settings or get_settings()
        repo_config = settings.get_repository_config()
        supabase_config = settings.get_supabase_config()

        return cls.create_repository(
            repo_config.get('type', 'supabase'),
            client=client,
            url=supabase_config['url'],
            key=supabase_config['key'],
            trades_table=repo_config.get('trades_table'),
            balance_rpc=repo_config.get('balance_rpc'),
            bucket=settings.get_image_bucket(),
        )

    @classmethod
    def register_repository(cls, name: str, repository_class: type, accepted_kwargs: Optional[tuple] = None) -> None:
        """Register a new repository type.

        Args:
            name: Name for the repository type
            repository_class: Class implementing BaseTradeRepository
            accepted_kwargs: Constructor arguments to pass through (all when None)
        """
        if not issubclass(repository_class, BaseTradeRepository):
            raise ValueError(
                f"Repository class must implement BaseTradeRepository interface: {repository_class}"
            )

        cls._repositories[name] = repository_class
        if accepted_kwargs is not None:
            cls._accepted_kwargs[name] = tuple(accepted_kwargs)
        else:
            cls._accepted_kwargs.pop(name, None)
        logger.info(f"Registered repository type: {name}")

    @classmethod
    def get_available_types(cls) -> list[str]:
        return list(cls._repositories.keys())


# Global repository instance
_repository: Optional[BaseTradeRepository] = None


def get_trade_repository() -> BaseTradeRepository:
    """Get the process-wide trade repository, creating it from settings on first use."""
    global _repository
    if _repository is None:
        _repository = RepositoryFactory.create_from_settings()
    return _repository


def set_trade_repository(repository: Optional[BaseTradeRepository]) -> None:
    """Replace (or clear, with None) the process-wide trade repository."""
    global _repository
    _repository = repository
