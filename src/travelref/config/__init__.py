"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_list, optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .seeding import SeedConfig, SeedMode, get_seed_config, parse_seed_mode
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_http_cache_path,
    get_storage_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SeedConfig",
    "SeedMode",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_list",
    "get_database_config",
    "get_http_cache_path",
    "get_seed_config",
    "get_storage_config",
    "optional_env_var",
    "parse_seed_mode",
]
