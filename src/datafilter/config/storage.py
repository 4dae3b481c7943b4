"""Database configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_var


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_database_config(*, uri: str | None = None) -> DatabaseConfig:
    """Return the database to reconcile against, preferring an explicit ``uri``."""

    if uri is not None and uri.strip():
        return DatabaseConfig(uri=uri.strip())
    return DatabaseConfig(uri=require_env_var("DATABASE_URI"))
