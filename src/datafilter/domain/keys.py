"""Key extraction for remote change collections."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .records import RemoteRecord

log = logging.getLogger(__name__)

type Key = str | int | float


@dataclass(slots=True)
class RemoteKeyIndex:
    """Remote records indexed by key value.

    ``ordered`` lists every valid key occurrence in input order, duplicates
    included. ``by_key`` keeps the last record seen for each key.
    """

    by_key: dict[Key, RemoteRecord] = field(default_factory=dict[Key, "RemoteRecord"])
    ordered: tuple[Key, ...] = ()
    skipped: int = 0


def require_key_field(key_field: object, *, name: str = "key field") -> str:
    """Return ``key_field`` if it is a non-blank string."""

    if not isinstance(key_field, str) or not key_field.strip():
        raise ConfigurationError(f"Invalid {name}: {key_field!r}")
    return key_field


def is_valid_key(value: object) -> bool:
    """Return whether ``value`` can take part in key matching."""

    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        # NaN never equals itself and would never match anything
        return not math.isnan(value)
    return isinstance(value, str | int)


def extract_remote_keys(records: Iterable[RemoteRecord], key_field: str) -> RemoteKeyIndex:
    """Index ``records`` by ``key_field``, excluding records without a usable key."""

    key_field = require_key_field(key_field, name="remote key field")
    by_key: dict[Key, RemoteRecord] = {}
    ordered: list[Key] = []
    skipped = 0
    for position, record in enumerate(records):
        value = record.get(key_field)
        if not is_valid_key(value):
            log.debug("Skipping remote record %s without a usable %r", position, key_field)
            skipped += 1
            continue
        key: Key = value  # type: ignore[assignment]
        by_key[key] = record
        ordered.append(key)
    return RemoteKeyIndex(by_key=by_key, ordered=tuple(ordered), skipped=skipped)
