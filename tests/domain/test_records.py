from __future__ import annotations

import pytest

from datafilter.domain.errors import FieldTypeError
from datafilter.domain.records import (
    get_bool,
    get_float,
    get_int,
    get_list,
    get_mapping,
    get_str,
)

RECORD = {
    "name": "Widget",
    "count": 3,
    "ratio": 0.5,
    "active": True,
    "tags": ["a", "b"],
    "meta": {"source": "api"},
    "missing": None,
}


def test_accessors_return_typed_values() -> None:
    assert get_str(RECORD, "name") == "Widget"
    assert get_int(RECORD, "count") == 3
    assert get_float(RECORD, "ratio") == 0.5
    assert get_float(RECORD, "count") == 3.0
    assert get_bool(RECORD, "active") is True
    assert get_list(RECORD, "tags") == ["a", "b"]
    assert get_mapping(RECORD, "meta") == {"source": "api"}


def test_accessors_return_none_for_absent_or_null_fields() -> None:
    assert get_str(RECORD, "absent") is None
    assert get_int(RECORD, "missing") is None


def test_required_field_raises_when_absent() -> None:
    with pytest.raises(FieldTypeError) as exc:
        get_str(RECORD, "absent", required=True)

    assert exc.value.field == "absent"


def test_accessors_do_not_coerce() -> None:
    with pytest.raises(FieldTypeError):
        get_str(RECORD, "count")
    with pytest.raises(FieldTypeError):
        get_int(RECORD, "name")
    with pytest.raises(FieldTypeError):
        get_mapping(RECORD, "tags")


def test_bool_is_not_a_number() -> None:
    with pytest.raises(FieldTypeError):
        get_int(RECORD, "active")
    with pytest.raises(FieldTypeError):
        get_float(RECORD, "active")
