"""Root logger setup for the contactlink entry points."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_LEVEL_ENV_VAR: Final[str] = "CONTACTLINK_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(default: int = logging.INFO) -> int:
    """Return the level named by ``CONTACTLINK_LOG_LEVEL`` (e.g. ``debug``), else ``default``."""

    raw = os.getenv(LOG_LEVEL_ENV_VAR, "").strip()
    if not raw:
        return default
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_ENV_VAR} must name a logging level, got {raw!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once.

    ``level`` overrides the environment; ``force=True`` replaces handlers installed
    by an earlier call.
    """

    logging.basicConfig(
        level=resolve_log_level() if level is None else level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
