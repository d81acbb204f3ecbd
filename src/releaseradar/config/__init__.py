"""Application configuration helpers."""

from __future__ import annotations

from .deezer import DeezerConfig, get_deezer_config
from .email import EmailConfig, get_email_config
from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .scheduler import SchedulerConfig, get_scheduler_config
from .spotify import SpotifyConfig, get_spotify_config
from .storage import (
    StorageConfig,
    get_database_uri,
    get_http_cache_path,
    get_storage_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DeezerConfig",
    "EmailConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SchedulerConfig",
    "SpotifyConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_uri",
    "get_deezer_config",
    "get_email_config",
    "get_http_cache_path",
    "get_scheduler_config",
    "get_spotify_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
