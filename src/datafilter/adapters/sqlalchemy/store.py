"""SQLAlchemy implementation of the local store contract."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect, select

from datafilter.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import InstrumentedAttribute, Mapper, Session

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocalHandle:
    """Identity of one stored row: mapped class plus primary key values."""

    entity: type[Any]
    identity: tuple[Any, ...]


class SqlAlchemyLocalStore:
    """Index, resolve and delete mapped rows through one session."""

    def __init__(self, session: Session, entities: Mapping[str, type[Any]]) -> None:
        self.session = session
        self._entities = dict(entities)

    def entity(self, entity_name: str) -> type[Any]:
        try:
            return self._entities[entity_name]
        except KeyError:
            known = ", ".join(sorted(self._entities)) or "none"
            raise ConfigurationError(
                f"Unknown entity {entity_name!r} (known entities: {known})"
            ) from None

    def index_keys(
        self,
        entity_name: str,
        key_field: str,
        predicate: ColumnElement[bool] | None = None,
    ) -> dict[Hashable, LocalHandle]:
        """Map key values to handles, deleting rows with missing or repeated keys.

        Rows are visited in primary key order, so the oldest row of a set of
        duplicates is the one that survives. Deletions are flushed before the
        index is returned.
        """

        entity = self.entity(entity_name)
        mapper: Mapper[Any] = inspect(entity)
        key_attribute = self._key_attribute(entity, mapper, key_field)
        primary_key = mapper.primary_key

        stmt = select(key_attribute, *primary_key).select_from(entity)
        if predicate is not None:
            stmt = stmt.where(predicate)
        stmt = stmt.order_by(*primary_key)

        index: dict[Hashable, LocalHandle] = {}
        redundant: list[LocalHandle] = []
        for row in self.session.execute(stmt):
            key, *identity = row
            handle = LocalHandle(entity=entity, identity=tuple(identity))
            if key is None or key in index:
                redundant.append(handle)
                continue
            index[key] = handle

        if redundant:
            for handle in redundant:
                record = self.resolve(handle)
                if record is not None:
                    self.session.delete(record)
            self.session.flush()
            log.info(
                "Removed %s %s rows with a missing or duplicate %r",
                len(redundant),
                entity_name,
                key_field,
            )
        return index

    def resolve(self, handle: LocalHandle) -> Any | None:
        return self.session.get(handle.entity, handle.identity)

    def delete(self, record: object) -> None:
        self.session.delete(record)

    @staticmethod
    def _key_attribute(
        entity: type[Any], mapper: Mapper[Any], key_field: str
    ) -> InstrumentedAttribute[Any]:
        if key_field not in mapper.column_attrs:
            raise ConfigurationError(
                f"{entity.__name__} has no mapped column named {key_field!r}"
            )
        return getattr(entity, key_field)


if TYPE_CHECKING:
    from typing import cast

    from datafilter.domain.ports.storage import LocalStore

    _session_stub = cast("Session", object())
    _store_check: LocalStore[LocalHandle, Any, ColumnElement[bool]] = SqlAlchemyLocalStore(
        _session_stub, {}
    )
