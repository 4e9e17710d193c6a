"""Configuration management system."""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .constants import (
    BALANCE_RPC,
    DEFAULT_CURRENCY,
    DEFAULT_IMAGE_BUCKET,
    DEFAULT_LOG_DATEFMT,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_TIMEZONE,
    DEFAULT_REPOSITORY_TYPE,
    LOG_FILE,
    TRADES_TABLE,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'supabase': {
        'url': None,
        'key': None,
        'service_role_key': None,
    },
    'repository': {
        'type': DEFAULT_REPOSITORY_TYPE,
        'trades_table': TRADES_TABLE,
        'balance_rpc': BALANCE_RPC,
    },
    'storage': {
        'bucket': DEFAULT_IMAGE_BUCKET,
    },
    'display': {
        'currency': DEFAULT_CURRENCY,
    },
    'logging': {
        'level': DEFAULT_LOG_LEVEL,
        'file': LOG_FILE,
        'format': DEFAULT_LOG_FORMAT,
        'datefmt': DEFAULT_LOG_DATEFMT,
        'timezone': DEFAULT_LOG_TIMEZONE,
    },
}


class Settings:
    """Configuration management class for the trade journal.

    Values are layered: built-in defaults, then an optional JSON file, then
    environment variables (a local .env file is loaded first).
    """

    def __init__(self, config_file: Optional[str] = None, load_env_file: bool = True):
        """Initialize settings.

        Args:
            config_file: Optional path to a JSON configuration file
            load_env_file: Load a .env file into the environment before reading it
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._config_file = config_file

        if config_file:
            self.load_from_file(config_file)

        if load_env_file:
            load_dotenv()
        self._load_from_environment()

    def _load_from_environment(self) -> None:
        """Load configuration from environment variables."""
        if os.getenv('SUPABASE_URL'):
            self.set('supabase.url', os.getenv('SUPABASE_URL'))

        key = os.getenv('SUPABASE_PUBLISHABLE_KEY') or os.getenv('SUPABASE_ANON_KEY')
        if key:
            self.set('supabase.key', key)

        service_key = os.getenv('SUPABASE_SECRET_KEY') or os.getenv('SUPABASE_SERVICE_ROLE_KEY')
        if service_key:
            self.set('supabase.service_role_key', service_key)

        if os.getenv('TRADE_JOURNAL_REPOSITORY_TYPE'):
            self.set('repository.type', os.getenv('TRADE_JOURNAL_REPOSITORY_TYPE'))

        if os.getenv('TRADES_TABLE'):
            self.set('repository.trades_table', os.getenv('TRADES_TABLE'))

        if os.getenv('TRADE_IMAGES_BUCKET'):
            self.set('storage.bucket', os.getenv('TRADE_IMAGES_BUCKET'))

        if os.getenv('DISPLAY_CURRENCY'):
            self.set('display.currency', os.getenv('DISPLAY_CURRENCY').upper())

        if os.getenv('LOG_LEVEL'):
            self.set('logging.level', os.getenv('LOG_LEVEL').upper())

        if os.getenv('LOG_TIMEZONE'):
            self.set('logging.timezone', os.getenv('LOG_TIMEZONE'))

        # Development mode
        if self.is_development_mode():
            self.set('logging.level', 'DEBUG')

    def load_from_file(self, config_file: str) -> None:
        """Load configuration from JSON file.

        Args:
            config_file: Path to configuration file
        """
        config_path = Path(config_file)

        if not config_path.exists():
            logger.warning(f"Configuration file not found: {config_file}")
            return

        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load configuration file {config_file}: {e}")
            return

        self._merge_config(self._config, file_config)
        logger.info(f"Loaded configuration from: {config_file}")

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Configuration key (supports dot notation, e.g., 'repository.type')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by key (supports dot notation)."""
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_supabase_config(self, use_service_role: bool = False) -> Dict[str, Optional[str]]:
        """URL and API key for the Supabase client.

        Args:
            use_service_role: Return the service role key (bypasses RLS)
        """
        key_name = 'supabase.service_role_key' if use_service_role else 'supabase.key'
        return {
            'url': self.get('supabase.url'),
            'key': self.get(key_name),
        }

    def get_repository_config(self) -> Dict[str, Any]:
        """Get repository configuration."""
        return dict(self.get('repository', {}))

    def get_repository_type(self) -> str:
        return self.get('repository.type', DEFAULT_REPOSITORY_TYPE)

    def get_image_bucket(self) -> str:
        return self.get('storage.bucket', DEFAULT_IMAGE_BUCKET)

    def get_display_currency(self) -> str:
        return self.get('display.currency', DEFAULT_CURRENCY)

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return dict(self.get('logging', {}))

    def is_development_mode(self) -> bool:
        """Check if development mode is enabled."""
        return os.getenv('TRADE_JOURNAL_DEV', 'false').lower() == 'true'


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_system(config_file: Optional[str] = None) -> Settings:
    """Configure the system with settings.

    Args:
        config_file: Optional path to configuration file

    Returns:
        Configured settings instance
    """
    global _settings
    _settings = Settings(config_file)
    return _settings
