"""Remote change source configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var
from .errors import ConfigurationError

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class RemoteSourceConfig:
    """Holds settings for fetching remote changes over HTTP."""

    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    headers: dict[str, str] = field(default_factory=dict[str, str])


def get_remote_source_config() -> RemoteSourceConfig:
    timeout_value = optional_env_var("DATAFILTER_HTTP_TIMEOUT")
    timeout = DEFAULT_HTTP_TIMEOUT_SECONDS
    if timeout_value is not None:
        try:
            timeout = float(timeout_value)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid DATAFILTER_HTTP_TIMEOUT: {timeout_value!r}"
            ) from exc
        if timeout <= 0:
            raise ConfigurationError("DATAFILTER_HTTP_TIMEOUT must be positive")

    headers = {"Accept": "application/json"}
    token = optional_env_var("DATAFILTER_HTTP_TOKEN")
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"
    return RemoteSourceConfig(timeout_seconds=timeout, headers=headers)
