"""Local SQLite database location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_FILENAME = "storesync.db"
DATA_DIR_ENV = "STORESYNC_DATA_DIR"


def get_data_dir() -> Path:
    """``$STORESYNC_DATA_DIR`` if set, else ``~/.storesync``."""

    configured = os.getenv(DATA_DIR_ENV, "").strip()
    data_dir = Path(configured) if configured else Path.home() / ".storesync"
    return data_dir.expanduser().resolve()


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    @classmethod
    def sqlite_file(cls, path: Path) -> DatabaseConfig:
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(uri=f"sqlite+pysqlite:///{path}")


def get_database_config() -> DatabaseConfig:
    uri = os.getenv("DATABASE_URI", "").strip()
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig.sqlite_file(get_data_dir() / DEFAULT_DB_FILENAME)
