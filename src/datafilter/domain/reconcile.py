"""Set reconciliation of remote changes against a local store.

Flow of one ``reconcile`` call:
1) index local records by key (the store deletes key-less and duplicate rows)
2) index remote records by key (records without a usable key are skipped)
3) classify keys into deletions, insertions and updates
4) delete, then insert, then update, each pass only if selected

Deletions are classified from the same snapshot of the local index as the
other passes, so later passes never see the effect of issued deletions.
The core never commits or rolls back; that belongs to the unit of work.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import (
    ConfigurationError,
    HandlerFailure,
    InconsistentIndexError,
    InternalConsistencyWarning,
)
from .keys import Key, extract_remote_keys, require_key_field
from .operations import ALL_OPERATIONS, Operation, normalize_operations
from .records import RemoteRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .ports.storage import LocalStore

log = logging.getLogger(__name__)

type InsertHandler = Callable[[RemoteRecord], object]
type UpdateHandler[TRecord] = Callable[[RemoteRecord, TRecord], object]


class InconsistencyPolicy(StrEnum):
    """What to do with a key that was indexed but cannot be resolved."""

    WARN = "warn"
    RAISE = "raise"


@dataclass(frozen=True, slots=True)
class Classification:
    """Disjoint key sets computed once per reconciliation."""

    deletions: tuple[Hashable, ...] = ()
    insertions: tuple[Key, ...] = ()
    updates: tuple[Key, ...] = ()


@dataclass(slots=True)
class ReconcileResult:
    """Keys acted on by one reconciliation, in the order they were processed."""

    deleted: list[Hashable] = field(default_factory=list[Hashable])
    inserted: list[Key] = field(default_factory=list[Key])
    updated: list[Key] = field(default_factory=list[Key])
    skipped: int = 0
    warnings: list[InternalConsistencyWarning] = field(
        default_factory=list[InternalConsistencyWarning]
    )

    @property
    def changed(self) -> bool:
        return bool(self.deleted or self.inserted or self.updated)


def classify(local_keys: Iterable[Hashable], remote_keys: Iterable[Key]) -> Classification:
    """Split keys into ``L - R``, ``R - L`` and ``R & L`` by value equality.

    Deletions keep local order; insertions and updates keep the order of
    first appearance in ``remote_keys``.
    """

    local = list(dict.fromkeys(local_keys))
    remote = list(dict.fromkeys(remote_keys))
    local_set = set(local)
    remote_set = set(remote)
    return Classification(
        deletions=tuple(key for key in local if key not in remote_set),
        insertions=tuple(key for key in remote if key not in local_set),
        updates=tuple(key for key in remote if key in local_set),
    )


@dataclass(slots=True)
class _Inconsistencies:
    policy: InconsistencyPolicy
    result: ReconcileResult

    def report(self, operation: Operation, key: Hashable, reason: str) -> None:
        warning = InternalConsistencyWarning(operation=operation, key=key, reason=reason)
        if self.policy is InconsistencyPolicy.RAISE:
            raise InconsistentIndexError(warning)
        log.warning("Skipping inconsistent key: %s", warning)
        self.result.warnings.append(warning)


def reconcile[THandle: Hashable, TRecord, TPredicate](  # noqa: PLR0913
    records: Iterable[RemoteRecord],
    *,
    store: LocalStore[THandle, TRecord, TPredicate],
    entity_name: str,
    local_key: str,
    remote_key: str,
    operations: Iterable[Operation | str] = ALL_OPERATIONS,
    predicate: TPredicate | None = None,
    on_insert: InsertHandler | None = None,
    on_update: UpdateHandler[TRecord] | None = None,
    inconsistency: InconsistencyPolicy = InconsistencyPolicy.WARN,
) -> ReconcileResult:
    """Reconcile ``records`` against the local ``entity_name`` records.

    ``on_insert`` receives each remote record whose key is not stored locally.
    ``on_update`` receives each remote record whose key is stored locally,
    together with the resolved local record. Local records whose key is
    absent remotely are deleted through ``store``.

    The first handler exception aborts the run and is raised as
    ``HandlerFailure``; work already done stays done.
    """

    entity_name = require_key_field(entity_name, name="entity name")
    local_key = require_key_field(local_key, name="local key field")
    remote_key = require_key_field(remote_key, name="remote key field")
    selected = normalize_operations(operations)
    if Operation.INSERT in selected and on_insert is None:
        raise ConfigurationError("An insert handler is required when inserting")
    if Operation.UPDATE in selected and on_update is None:
        raise ConfigurationError("An update handler is required when updating")

    # Built even for insert-only runs; the store's uniquing pass depends on it.
    local_index: dict[Hashable, THandle] = dict(
        store.index_keys(entity_name, local_key, predicate)
    )
    remote = extract_remote_keys(records, remote_key)
    plan = classify(local_index.keys(), remote.ordered)

    result = ReconcileResult(skipped=remote.skipped)
    inconsistencies = _Inconsistencies(policy=inconsistency, result=result)
    log.info(
        "Reconciling %s: local=%s, remote=%s, skipped=%s, operations=%s",
        entity_name,
        len(local_index),
        len(remote.by_key),
        remote.skipped,
        ",".join(sorted(selected)),
    )

    if Operation.DELETE in selected:
        _delete(plan.deletions, store, local_index, result, inconsistencies)
    if Operation.INSERT in selected and on_insert is not None:
        _insert(plan.insertions, remote.by_key, on_insert, result, inconsistencies)
    if Operation.UPDATE in selected and on_update is not None:
        _update(plan.updates, remote.by_key, store, local_index, on_update, result, inconsistencies)

    log.info(
        "Reconciled %s: deleted=%s, inserted=%s, updated=%s, warnings=%s",
        entity_name,
        len(result.deleted),
        len(result.inserted),
        len(result.updated),
        len(result.warnings),
    )
    return result


def _delete[THandle: Hashable, TRecord, TPredicate](
    keys: tuple[Hashable, ...],
    store: LocalStore[THandle, TRecord, TPredicate],
    local_index: Mapping[Hashable, THandle],
    result: ReconcileResult,
    inconsistencies: _Inconsistencies,
) -> None:
    for key in keys:
        handle = local_index.get(key)
        local = store.resolve(handle) if handle is not None else None
        if local is None:
            inconsistencies.report(Operation.DELETE, key, "local record not found")
            continue
        log.debug("Deleting local record %r", key)
        store.delete(local)
        result.deleted.append(key)


def _insert(
    keys: tuple[Key, ...],
    remote_by_key: Mapping[Key, RemoteRecord],
    on_insert: InsertHandler,
    result: ReconcileResult,
    inconsistencies: _Inconsistencies,
) -> None:
    for key in keys:
        record = remote_by_key.get(key)
        if record is None:
            inconsistencies.report(Operation.INSERT, key, "remote record not found")
            continue
        log.debug("Inserting remote record %r", key)
        try:
            on_insert(record)
        except Exception as exc:
            raise HandlerFailure(Operation.INSERT, key, exc, result) from exc
        result.inserted.append(key)


def _update[THandle: Hashable, TRecord, TPredicate](  # noqa: PLR0913
    keys: tuple[Key, ...],
    remote_by_key: Mapping[Key, RemoteRecord],
    store: LocalStore[THandle, TRecord, TPredicate],
    local_index: Mapping[Hashable, THandle],
    on_update: UpdateHandler[TRecord],
    result: ReconcileResult,
    inconsistencies: _Inconsistencies,
) -> None:
    for key in keys:
        record = remote_by_key.get(key)
        if record is None:
            inconsistencies.report(Operation.UPDATE, key, "remote record not found")
            continue
        handle = local_index.get(key)
        local = store.resolve(handle) if handle is not None else None
        if local is None:
            inconsistencies.report(Operation.UPDATE, key, "local record not found")
            continue
        log.debug("Updating local record %r", key)
        try:
            on_update(record, local)
        except Exception as exc:
            raise HandlerFailure(Operation.UPDATE, key, exc, result) from exc
        result.updated.append(key)
