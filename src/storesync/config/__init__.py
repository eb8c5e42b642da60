"""Application configuration helpers."""

from __future__ import annotations

from storesync.common.logging import configure_logging

from .env import env_bool, env_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .storage import DatabaseConfig, get_data_dir, get_database_config
from .store import StoreConfig, get_store_config
from .sync import SyncOptions, get_sync_options

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StoreConfig",
    "SyncOptions",
    "configure_logging",
    "env_bool",
    "env_int",
    "get_database_config",
    "get_data_dir",
    "get_store_config",
    "get_sync_options",
    "require_env_var",
    "require_env_vars",
]
