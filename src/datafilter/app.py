"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from datafilter.adapters.sqlalchemy import column_handlers
from datafilter.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from datafilter.config import get_database_config, get_reconcile_config
from datafilter.domain.reconcile import reconcile

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from datafilter.config import ReconcileConfig
    from datafilter.domain.operations import Operation
    from datafilter.domain.reconcile import ReconcileResult
    from datafilter.domain.records import RemoteRecord

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


log = getLogger(__name__)


def reconcile_table(  # noqa: PLR0913
    records: Iterable[RemoteRecord],
    *,
    entity_name: str,
    local_key: str,
    remote_key: str | None = None,
    operations: Iterable[Operation | str] | None = None,
    config: ReconcileConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    field_map: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> ReconcileResult:
    """Reconcile ``records`` against a mapped table and commit the outcome.

    Remote fields are copied onto columns of the same name (see
    ``field_map``). With ``dry_run`` the changes are rolled back instead of
    committed. A failure leaves the database untouched because the unit of
    work rolls back on exit.
    """

    effective_config = config or get_reconcile_config()
    effective_uow = unit_of_work_factory or SqlAlchemyUnitOfWork
    effective_remote_key = remote_key or local_key

    with effective_uow() as uow:
        insert, update = column_handlers(
            uow.session,
            uow.store.entity(entity_name),
            local_key=local_key,
            remote_key=effective_remote_key,
            field_map=field_map,
        )
        result = reconcile(
            records,
            store=uow.store,
            entity_name=entity_name,
            local_key=local_key,
            remote_key=effective_remote_key,
            operations=operations if operations is not None else effective_config.operations,
            on_insert=insert,
            on_update=update,
            inconsistency=effective_config.inconsistency,
        )
        if dry_run:
            log.info("Dry run: rolling back %s changes", entity_name)
            uow.rollback()
        else:
            uow.commit()

    return result


def reconcile_database(  # noqa: PLR0913
    records: Iterable[RemoteRecord],
    *,
    entity_name: str,
    local_key: str,
    remote_key: str | None = None,
    operations: Iterable[Operation | str] | None = None,
    config: ReconcileConfig | None = None,
    database_uri: str | None = None,
    field_map: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> ReconcileResult:
    """Start the SQLAlchemy adapter for the configured database and reconcile."""

    if not is_started():
        startup(database_uri=get_database_config(uri=database_uri).uri)
    log.info(
        "Starting reconciliation: entity=%s, local_key=%s, remote_key=%s, dry_run=%s",
        entity_name,
        local_key,
        remote_key or local_key,
        dry_run,
    )

    result = reconcile_table(
        records,
        entity_name=entity_name,
        local_key=local_key,
        remote_key=remote_key,
        operations=operations,
        config=config,
        field_map=field_map,
        dry_run=dry_run,
    )

    log.info(
        f"Finished reconciliation: deleted={len(result.deleted)}, "
        f"inserted={len(result.inserted)}, updated={len(result.updated)}, "
        f"skipped={result.skipped}, warnings={len(result.warnings)}"
    )
    return result
