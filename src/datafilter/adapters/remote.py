"""Load remote change collections from files, stdin or HTTP endpoints."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import JsonValue, TypeAdapter, ValidationError

from datafilter.config.remote import RemoteSourceConfig

if TYPE_CHECKING:
    from datafilter.domain.records import RemoteRecord

log = logging.getLogger(__name__)

STDIN_SOURCE: Final[str] = "-"

_RECORDS_ADAPTER: TypeAdapter[list[dict[str, JsonValue]]] = TypeAdapter(
    list[dict[str, JsonValue]]
)


class RemoteSourceError(RuntimeError):
    """Raised when remote changes cannot be fetched or are not a list of objects."""


def is_http_source(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def parse_remote_records(payload: str | bytes, *, source: str = "<payload>") -> list[RemoteRecord]:
    """Validate a JSON document holding an array of objects."""

    try:
        records = _RECORDS_ADAPTER.validate_json(payload)
    except ValidationError as exc:
        raise RemoteSourceError(
            f"{source} is not a JSON array of objects: {exc.error_count()} error(s)"
        ) from exc
    return list(records)


def fetch_remote_payload(
    url: str,
    *,
    config: RemoteSourceConfig | None = None,
    client: httpx.Client | None = None,
) -> bytes:
    """GET ``url`` and return the response body, raising for non-2xx responses."""

    effective = config or RemoteSourceConfig()
    owned = client is None
    http = client or httpx.Client(timeout=effective.timeout_seconds, headers=effective.headers)
    try:
        response = http.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise RemoteSourceError(f"Failed to fetch {url}: {exc}") from exc
    finally:
        if owned:
            http.close()
    return response.content


def load_remote_records(
    source: str,
    *,
    config: RemoteSourceConfig | None = None,
    client: httpx.Client | None = None,
) -> list[RemoteRecord]:
    """Read remote changes from ``source``: a path, ``-`` for stdin, or an http(s) URL."""

    if is_http_source(source):
        payload: str | bytes = fetch_remote_payload(source, config=config, client=client)
    elif source == STDIN_SOURCE:
        payload = sys.stdin.read()
    else:
        path = Path(source).expanduser()
        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise RemoteSourceError(f"Cannot read {path}: {exc}") from exc

    records = parse_remote_records(payload, source=source)
    log.info("Loaded %s remote records from %s", len(records), source)
    return records
