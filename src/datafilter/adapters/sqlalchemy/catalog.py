"""Entity-name lookup for mapped classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Table
from sqlalchemy.ext.automap import automap_base

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import registry

type EntityCatalog = dict[str, type[Any]]


def entities_from_registry(mapper_registry: registry) -> EntityCatalog:
    """Index every class in ``mapper_registry`` by class name and by table name.

    Class names take precedence when a table name collides with another class.
    """

    entities: EntityCatalog = {}
    by_table: EntityCatalog = {}
    for mapper in mapper_registry.mappers:
        entity = mapper.class_
        entities[entity.__name__] = entity
        table = mapper.local_table
        if isinstance(table, Table):
            by_table.setdefault(table.name, entity)
    for name, entity in by_table.items():
        entities.setdefault(name, entity)
    return entities


def reflect_entities(engine: Engine) -> EntityCatalog:
    """Reflect the database schema and map each table with a primary key."""

    base = automap_base()
    base.prepare(autoload_with=engine)
    return entities_from_registry(base.registry)
