"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .remote import RemoteSourceConfig, get_remote_source_config
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ReconcileConfig",
    "RemoteSourceConfig",
    "configure_logging",
    "get_database_config",
    "get_reconcile_config",
    "get_remote_source_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
