"""Reconciliation defaults."""

from __future__ import annotations

from dataclasses import dataclass

from contactlink.domain.reconciliation import DEFAULT_MAX_ATTEMPTS

from .env import optional_env_int

MAX_ATTEMPTS_ENV_VAR = "CONTACTLINK_MAX_ATTEMPTS"


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        max_attempts=optional_env_int(MAX_ATTEMPTS_ENV_VAR, DEFAULT_MAX_ATTEMPTS, minimum=1),
    )
