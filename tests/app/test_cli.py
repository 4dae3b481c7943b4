from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from datafilter.domain.errors import ConfigurationError
from datafilter.domain.operations import ALL_OPERATIONS, Operation
from datafilter.domain.reconcile import InconsistencyPolicy, ReconcileResult
from datafilter.ui import cli as cli_module

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def changes_file(tmp_path: Path) -> Path:
    path = tmp_path / "changes.json"
    path.write_text('[{"id": 1, "name": "one"}]')
    return path


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    calls: dict[str, object] = {}

    def fake_reconcile(records: object, **kwargs: object) -> ReconcileResult:
        calls["records"] = records
        calls.update(kwargs)
        return ReconcileResult()

    monkeypatch.delenv("DATAFILTER_OPERATIONS", raising=False)
    monkeypatch.delenv("DATAFILTER_INCONSISTENCY", raising=False)
    monkeypatch.setattr(cli_module, "reconcile_database", fake_reconcile)
    return calls


def test_cli_defaults(changes_file: Path, captured: dict[str, object]) -> None:
    cli_module.main(
        ["reconcile", "--entity", "widget", "--local-key", "remote_id", "--source", str(changes_file)]
    )

    assert captured["records"] == [{"id": 1, "name": "one"}]
    assert captured["entity_name"] == "widget"
    assert captured["local_key"] == "remote_id"
    assert captured["remote_key"] is None
    assert captured["field_map"] == {}
    assert captured["dry_run"] is False
    config = captured["config"]
    assert config.operations == ALL_OPERATIONS  # type: ignore[attr-defined]
    assert config.inconsistency is InconsistencyPolicy.WARN  # type: ignore[attr-defined]


def test_cli_with_flags(changes_file: Path, captured: dict[str, object]) -> None:
    cli_module.main(
        [
            "--verbose",
            "reconcile",
            "--entity",
            "Widget",
            "--local-key",
            "remote_id",
            "--remote-key",
            "id",
            "--source",
            str(changes_file),
            "--operations",
            "update,delete",
            "--map",
            "colour=color",
            "--database-uri",
            "sqlite+pysqlite:///other.db",
            "--strict",
            "--dry-run",
        ]
    )

    assert captured["remote_key"] == "id"
    assert captured["field_map"] == {"colour": "color"}
    assert captured["database_uri"] == "sqlite+pysqlite:///other.db"
    assert captured["dry_run"] is True
    config = captured["config"]
    assert config.operations == {Operation.UPDATE, Operation.DELETE}  # type: ignore[attr-defined]
    assert config.inconsistency is InconsistencyPolicy.RAISE  # type: ignore[attr-defined]


@pytest.mark.parametrize(
    "extra",
    [["--operations", "upsert"], ["--map", "colour"]],
)
def test_cli_invalid_arguments_exit_with_2(
    changes_file: Path, captured: dict[str, object], extra: list[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "reconcile",
                "--entity",
                "widget",
                "--local-key",
                "id",
                "--source",
                str(changes_file),
                *extra,
            ]
        )

    assert excinfo.value.code == 2
    assert "records" not in captured


def test_cli_configuration_errors_exit_with_2(
    changes_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fake_reconcile(*_: object, **__: object) -> None:
        raise ConfigurationError("Unknown entity 'gadget'")

    monkeypatch.setattr(cli_module, "reconcile_database", fake_reconcile)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["reconcile", "--entity", "gadget", "--local-key", "id", "--source", str(changes_file)]
        )

    assert excinfo.value.code == 2


def test_cli_runtime_errors_exit_with_1(tmp_path: Path, captured: dict[str, object]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "reconcile",
                "--entity",
                "widget",
                "--local-key",
                "id",
                "--source",
                str(tmp_path / "missing.json"),
            ]
        )

    assert excinfo.value.code == 1
    assert "records" not in captured
