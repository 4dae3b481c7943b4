"""Selectable reconciliation operations."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Final

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable


class Operation(StrEnum):
    """One classification a reconciliation pass can act on."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


ALL_OPERATIONS: Final[frozenset[Operation]] = frozenset(Operation)


def normalize_operations(operations: Iterable[Operation | str]) -> frozenset[Operation]:
    """Return ``operations`` as a frozenset, rejecting unknown or empty selections."""

    selected: set[Operation] = set()
    for operation in operations:
        try:
            selected.add(Operation(str(operation).strip().lower()))
        except ValueError as exc:
            valid = ", ".join(op.value for op in Operation)
            raise ConfigurationError(
                f"Unknown operation {operation!r} (expected one of: {valid})"
            ) from exc
    if not selected:
        raise ConfigurationError("At least one operation must be selected")
    return frozenset(selected)


def parse_operations(text: str) -> frozenset[Operation]:
    """Parse a comma separated list such as ``"insert,update"`` or ``"all"``."""

    names = [name.strip() for name in text.split(",") if name.strip()]
    if any(name.lower() == "all" for name in names):
        return ALL_OPERATIONS
    return normalize_operations(names)
