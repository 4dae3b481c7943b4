"""Error taxonomy for the reconciliation core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Hashable

    from .operations import Operation
    from .reconcile import ReconcileResult


class ReconcileError(Exception):
    """Base class for errors raised by the reconciliation core."""


class ConfigurationError(ReconcileError, ValueError):
    """Raised when reconciliation arguments are invalid, before any work starts."""


class FieldTypeError(ReconcileError, TypeError):
    """Raised when a remote record field does not hold the requested type."""

    def __init__(self, field: str, expected: str, value: object) -> None:
        super().__init__(
            f"Field {field!r} expected {expected}, got {type(value).__name__}: {value!r}"
        )
        self.field = field
        self.expected = expected
        self.value = value


@dataclass(frozen=True, slots=True)
class InternalConsistencyWarning:
    """A key that was classified but could not be resolved during its pass."""

    operation: Operation
    key: Hashable
    reason: str

    def __str__(self) -> str:
        return f"{self.operation}: {self.reason} (key={self.key!r})"


class InconsistentIndexError(ReconcileError):
    """Raised instead of collecting a warning when inconsistencies are fatal."""

    def __init__(self, warning: InternalConsistencyWarning) -> None:
        super().__init__(str(warning))
        self.warning = warning


class HandlerFailure(ReconcileError):
    """Wraps the first exception raised by an insert or update handler.

    The original exception is available unchanged as ``error`` (and as
    ``__cause__``). ``result`` holds the work completed before the failure,
    which the core does not roll back.
    """

    def __init__(
        self,
        operation: Operation,
        key: Hashable,
        error: Exception,
        result: ReconcileResult,
    ) -> None:
        super().__init__(f"{operation} handler failed for key {key!r}: {error}")
        self.operation = operation
        self.key = key
        self.error = error
        self.result = result
