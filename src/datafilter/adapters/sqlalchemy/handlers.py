"""Generic insert/update handlers copying remote fields onto mapped columns."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect

from datafilter.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.orm import Session

    from datafilter.domain.records import RemoteRecord
    from datafilter.domain.reconcile import InsertHandler, UpdateHandler

log = logging.getLogger(__name__)


def column_sources(
    entity: type[Any],
    *,
    local_key: str,
    remote_key: str,
    field_map: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return ``{column attribute: remote field}`` for the columns to copy.

    Columns default to the remote field of the same name; ``field_map``
    overrides individual columns and the key column always reads ``remote_key``.
    Primary key columns are left to the database unless mapped explicitly.
    """

    mapper = inspect(entity)
    column_attrs = mapper.column_attrs
    primary_key = {mapper.get_property_by_column(column).key for column in mapper.primary_key}
    overrides = dict(field_map or {})
    unknown = sorted(name for name in overrides if name not in column_attrs)
    if unknown:
        raise ConfigurationError(
            f"{entity.__name__} has no mapped columns named: {', '.join(unknown)}"
        )
    if local_key not in column_attrs:
        raise ConfigurationError(f"{entity.__name__} has no mapped column named {local_key!r}")

    sources = {
        attr.key: overrides.get(attr.key, attr.key)
        for attr in column_attrs
        if attr.key not in primary_key or attr.key in overrides
    }
    sources[local_key] = remote_key
    return sources


def column_handlers(
    session: Session,
    entity: type[Any],
    *,
    local_key: str,
    remote_key: str,
    field_map: Mapping[str, str] | None = None,
) -> tuple[InsertHandler, UpdateHandler[Any]]:
    """Build handlers that create and update ``entity`` rows from remote records.

    Only fields present in a record are copied, so partial records leave the
    remaining columns at their defaults (insert) or untouched (update). The
    mapped class must accept column values as keyword arguments, which holds
    for declarative and automap classes.
    """

    sources = column_sources(
        entity, local_key=local_key, remote_key=remote_key, field_map=field_map
    )

    def insert(record: RemoteRecord) -> None:
        values = {attr: record[source] for attr, source in sources.items() if source in record}
        session.add(entity(**values))

    def update(record: RemoteRecord, local: Any) -> None:
        changed: list[str] = []
        for attr, source in sources.items():
            if attr == local_key or source not in record:
                continue
            value = record[source]
            if getattr(local, attr) != value:
                setattr(local, attr, value)
                changed.append(attr)
        if changed:
            log.debug("Updated %s columns: %s", entity.__name__, ", ".join(changed))

    return insert, update
