"""Where releaseradar keeps its database and HTTP cache on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

DATA_DIR_ENV: Final[str] = "RELEASERADAR_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"

DATABASE_FILENAME: Final[str] = "releaseradar.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def file(self, filename: str, *, create_dir: bool = True) -> Path:
        """Path of ``filename`` inside the data directory, creating the directory first."""

        directory = self.data_dir.expanduser().resolve()
        if create_dir:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    @property
    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.file(DATABASE_FILENAME)}"

    @property
    def http_cache_path(self) -> Path:
        return self.file(HTTP_CACHE_FILENAME)


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = optional_env_var("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = optional_env_var("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    configured = optional_env_var(DATA_DIR_ENV)
    data_dir = Path(configured) if configured else _platform_data_home() / "releaseradar"
    return StorageConfig(data_dir=data_dir)


def get_database_uri() -> str:
    # An explicit URI wins; otherwise a sqlite file in the data directory.
    return optional_env_var(DATABASE_URI_ENV) or get_storage_config().database_uri


def get_http_cache_path() -> Path:
    return get_storage_config().http_cache_path
