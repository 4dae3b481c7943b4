from __future__ import annotations

import io
from typing import TYPE_CHECKING

import httpx
import pytest

from datafilter.adapters.remote import (
    RemoteSourceError,
    load_remote_records,
    parse_remote_records,
)
from datafilter.config.remote import RemoteSourceConfig

if TYPE_CHECKING:
    from pathlib import Path


def test_parse_remote_records_accepts_array_of_objects() -> None:
    records = parse_remote_records(b'[{"id": 1, "tags": ["a"], "meta": {"x": null}}, {"id": "2"}]')

    assert records == [{"id": 1, "tags": ["a"], "meta": {"x": None}}, {"id": "2"}]


@pytest.mark.parametrize("payload", ['{"id": 1}', "[1, 2]", "not json"])
def test_parse_remote_records_rejects_other_documents(payload: str) -> None:
    with pytest.raises(RemoteSourceError):
        parse_remote_records(payload)


def test_load_remote_records_reads_files(tmp_path: Path) -> None:
    path = tmp_path / "changes.json"
    path.write_text('[{"id": 1}]')

    assert load_remote_records(str(path)) == [{"id": 1}]


def test_load_remote_records_reports_missing_files(tmp_path: Path) -> None:
    with pytest.raises(RemoteSourceError):
        load_remote_records(str(tmp_path / "missing.json"))


def test_load_remote_records_reads_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO('[{"id": 3}]'))

    assert load_remote_records("-") == [{"id": 3}]


def test_load_remote_records_fetches_urls() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1}, {"id": 2}])

    config = RemoteSourceConfig(headers={"Authorization": "Bearer token"})
    with httpx.Client(
        transport=httpx.MockTransport(handler), headers=config.headers
    ) as client:
        records = load_remote_records("https://example.test/changes", client=client)

    assert records == [{"id": 1}, {"id": 2}]
    assert seen[0].headers["Authorization"] == "Bearer token"


def test_load_remote_records_wraps_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, request=request)

    with (
        httpx.Client(transport=httpx.MockTransport(handler)) as client,
        pytest.raises(RemoteSourceError) as exc,
    ):
        load_remote_records("https://example.test/changes", client=client)

    assert "503" in str(exc.value)
