"""SQLAlchemy adapter package for datafilter."""

from __future__ import annotations

from .catalog import EntityCatalog, entities_from_registry, reflect_entities
from .handlers import column_handlers, column_sources
from .store import LocalHandle, SqlAlchemyLocalStore
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    configured_entities,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "EntityCatalog",
    "LocalHandle",
    "SqlAlchemyLocalStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "column_handlers",
    "column_sources",
    "configured_engine",
    "configured_entities",
    "entities_from_registry",
    "is_started",
    "reflect_entities",
    "shutdown",
    "startup",
]
