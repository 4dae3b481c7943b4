"""Reconciliation defaults loaded from the environment."""

from __future__ import annotations

from dataclasses import dataclass, field

from datafilter.domain.operations import ALL_OPERATIONS, Operation, parse_operations
from datafilter.domain.reconcile import InconsistencyPolicy

from .env import optional_env_var
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    inconsistency: InconsistencyPolicy = InconsistencyPolicy.WARN
    operations: frozenset[Operation] = field(default_factory=lambda: ALL_OPERATIONS)


def get_reconcile_config() -> ReconcileConfig:
    policy_value = optional_env_var("DATAFILTER_INCONSISTENCY") or InconsistencyPolicy.WARN.value
    try:
        policy = InconsistencyPolicy(policy_value.lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid DATAFILTER_INCONSISTENCY: {policy_value!r} (expected 'warn' or 'raise')"
        ) from exc

    operations_value = optional_env_var("DATAFILTER_OPERATIONS")
    operations = parse_operations(operations_value) if operations_value else ALL_OPERATIONS
    return ReconcileConfig(inconsistency=policy, operations=operations)
