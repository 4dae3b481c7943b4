"""Storage collaborator contract consumed by the reconciler."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping


@runtime_checkable
class LocalStore[THandle: Hashable, TRecord, TPredicate](Protocol):
    """Local persistence of the entities a reconciliation pass compares against.

    ``index_keys`` is not read-only: records lacking ``key_field`` and records
    repeating a key already seen are deleted before the index is returned, so
    the returned mapping never holds duplicate keys.
    """

    def index_keys(
        self,
        entity_name: str,
        key_field: str,
        predicate: TPredicate | None = None,
    ) -> Mapping[Hashable, THandle]: ...

    def resolve(self, handle: THandle) -> TRecord | None:
        """Return the record behind ``handle`` or ``None`` when it is stale."""
        ...

    def delete(self, record: TRecord) -> None: ...
