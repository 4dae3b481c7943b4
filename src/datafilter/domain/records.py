"""Remote record types and strict field accessors.

A remote record is a decoded JSON object. The core never mutates it; the
accessors below let handlers read fields without silent coercion.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from .errors import FieldTypeError

if TYPE_CHECKING:
    from collections.abc import Sequence

type JsonValue = str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]
type RemoteRecord = Mapping[str, JsonValue]


def _missing(record: RemoteRecord, field: str, *, required: bool, expected: str) -> bool:
    if record.get(field) is not None:
        return False
    if required:
        raise FieldTypeError(field, expected, record.get(field))
    return True


def get_str(record: RemoteRecord, field: str, *, required: bool = False) -> str | None:
    if _missing(record, field, required=required, expected="str"):
        return None
    value = record[field]
    if not isinstance(value, str):
        raise FieldTypeError(field, "str", value)
    return value


def get_int(record: RemoteRecord, field: str, *, required: bool = False) -> int | None:
    if _missing(record, field, required=required, expected="int"):
        return None
    value = record[field]
    # bool is an int subclass; JSON true/false is never a number here
    if isinstance(value, bool) or not isinstance(value, int):
        raise FieldTypeError(field, "int", value)
    return value


def get_float(record: RemoteRecord, field: str, *, required: bool = False) -> float | None:
    """Return a numeric field as float; JSON integers are accepted."""

    if _missing(record, field, required=required, expected="float"):
        return None
    value = record[field]
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise FieldTypeError(field, "float", value)
    return float(value)


def get_bool(record: RemoteRecord, field: str, *, required: bool = False) -> bool | None:
    if _missing(record, field, required=required, expected="bool"):
        return None
    value = record[field]
    if not isinstance(value, bool):
        raise FieldTypeError(field, "bool", value)
    return value


def get_mapping(
    record: RemoteRecord, field: str, *, required: bool = False
) -> Mapping[str, JsonValue] | None:
    if _missing(record, field, required=required, expected="mapping"):
        return None
    value = record[field]
    if not isinstance(value, Mapping):
        raise FieldTypeError(field, "mapping", value)
    return cast("Mapping[str, JsonValue]", value)


def get_list(
    record: RemoteRecord, field: str, *, required: bool = False
) -> Sequence[JsonValue] | None:
    if _missing(record, field, required=required, expected="list"):
        return None
    value = record[field]
    if not isinstance(value, list):
        raise FieldTypeError(field, "list", value)
    return value
