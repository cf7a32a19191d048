"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .feeds import FeedConfig, RetryPolicy, get_feed_config
from .ingest import IngestConfig, get_ingest_config, get_max_attempts
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "FeedConfig",
    "IngestConfig",
    "MissingConfigurationError",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_feed_config",
    "get_ingest_config",
    "get_max_attempts",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
