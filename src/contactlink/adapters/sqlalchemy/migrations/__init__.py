"""Alembic entry points for the contact schema."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

from contactlink.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
PYPROJECT_PATH: Final[Path] = Path(__file__).resolve().parents[5] / "pyproject.toml"


def _alembic_options() -> dict[str, str]:
    """Return the ``[tool.alembic]`` table when running from a source checkout."""

    if not PYPROJECT_PATH.is_file():
        return {}
    with PYPROJECT_PATH.open("rb") as pyproject_file:
        section = tomllib.load(pyproject_file).get("tool", {}).get("alembic", {})
    return {str(key): str(value) for key, value in section.items()}


def _script_location(options: dict[str, str]) -> Path:
    configured = options.get("script_location")
    if configured is None:
        return MIGRATIONS_PATH
    path = Path(configured)
    if not path.is_absolute():
        path = PYPROJECT_PATH.parent / path
    return path if path.is_dir() else MIGRATIONS_PATH


def build_config(*, database_uri: str | None = None) -> Config:
    """Return an Alembic config pointing at the bundled migration scripts."""

    options = _alembic_options()
    config = Config()
    config.set_main_option("script_location", str(_script_location(options)))
    for key, value in options.items():
        if key != "script_location":
            config.set_main_option(key, value)
    if database_uri is not None:
        # configparser interpolation treats % specially
        config.set_main_option("sqlalchemy.url", database_uri.replace("%", "%%"))
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the schema to the latest revision, over ``engine`` when one is given."""

    if engine is None:
        config = build_config(database_uri=database_uri or get_database_config().uri)
        command.upgrade(config, "head")
        return

    config = build_config()
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")


def current_revision(engine: Engine) -> str | None:
    """Return the revision the database behind ``engine`` is stamped with."""

    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()
