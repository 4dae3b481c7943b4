from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from datafilter.adapters.remote import load_remote_records
from datafilter.app import reconcile_database
from datafilter.config import (
    ConfigurationError,
    configure_logging,
    get_reconcile_config,
    get_remote_source_config,
)
from datafilter.domain.operations import parse_operations
from datafilter.domain.reconcile import InconsistencyPolicy

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile remote records against a local database table"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("reconcile", help="Insert, update and delete rows by key")
    run.add_argument(
        "--entity",
        required=True,
        help="Mapped class or table name of the local records",
    )
    run.add_argument(
        "--local-key",
        required=True,
        help="Column holding the key of each local record",
    )
    run.add_argument(
        "--remote-key",
        help="Field holding the key of each remote record (defaults to --local-key)",
    )
    run.add_argument(
        "--source",
        required=True,
        help="JSON array of remote records: a file path, an http(s) URL, or - for stdin",
    )
    run.add_argument(
        "--operations",
        type=str,
        help="Comma separated subset of insert,update,delete (defaults to config)",
    )
    run.add_argument(
        "--map",
        dest="field_map",
        action="append",
        default=[],
        metavar="COLUMN=FIELD",
        help="Read COLUMN from remote FIELD instead of the field of the same name",
    )
    run.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI)",
    )
    run.add_argument(
        "--strict",
        action="store_true",
        help="Fail instead of warning when an indexed key cannot be resolved",
    )
    run.add_argument(
        "--dry-run",
        action="store_true",
        help="Roll back instead of committing",
    )

    return parser.parse_args(list(argv))


def _parse_field_map(pairs: Sequence[str]) -> dict[str, str]:
    field_map: dict[str, str] = {}
    for pair in pairs:
        column, separator, remote_field = pair.partition("=")
        if not separator or not column.strip() or not remote_field.strip():
            raise ValueError(f"Invalid --map value: {pair!r} (expected COLUMN=FIELD)")
        field_map[column.strip()] = remote_field.strip()
    return field_map


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        config = get_reconcile_config()
        if parsed_args.operations is not None:
            config = replace(config, operations=parse_operations(parsed_args.operations))
        if parsed_args.strict:
            config = replace(config, inconsistency=InconsistencyPolicy.RAISE)
        field_map = _parse_field_map(parsed_args.field_map)
        remote_config = get_remote_source_config()
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        records = load_remote_records(parsed_args.source, config=remote_config)
        reconcile_database(
            records,
            entity_name=parsed_args.entity,
            local_key=parsed_args.local_key,
            remote_key=parsed_args.remote_key,
            config=config,
            database_uri=parsed_args.database_uri,
            field_map=field_map,
            dry_run=parsed_args.dry_run,
        )
    except ConfigurationError:
        log.exception("Invalid reconciliation settings")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
