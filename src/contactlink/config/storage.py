"""Where contactlink keeps its database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "contactlink"
DEFAULT_DB_FILENAME: Final[str] = "contactlink.db"
DATA_DIR_ENV_VAR: Final[str] = "CONTACTLINK_DATA_DIR"
DATABASE_URI_ENV_VAR: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @property
    def database_path(self) -> Path:
        return self.data_dir.expanduser().resolve() / self.database_filename

    def sqlite_uri(self, *, create_dir: bool = True) -> str:
        """Return the SQLite URI of the database file, creating its directory if asked."""

        path = self.database_path
        if create_dir:
            path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def default_data_dir() -> Path:
    """Per-user data directory: XDG_DATA_HOME on POSIX, LOCALAPPDATA on Windows."""

    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Local"
    else:
        base = os.getenv("XDG_DATA_HOME")
        root = Path(base) if base else Path.home() / ".local" / "share"
    return root / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    override = os.getenv(DATA_DIR_ENV_VAR, "").strip()
    return StorageConfig(data_dir=Path(override) if override else default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the storage directory."""

    env_uri = os.getenv(DATABASE_URI_ENV_VAR, "").strip()
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).sqlite_uri())
