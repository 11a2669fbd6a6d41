"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Stockfolio"
    DB_FILENAME = "stockfolio.db"
    TESTING = False
    DEBUG = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("STOCKFOLIO_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("STOCKFOLIO_DEV_MODE", default=True)
        self.LOG_LEVEL = os.getenv("STOCKFOLIO_LOG_LEVEL", "INFO").upper()
        self.DATABASE_URL = os.getenv("STOCKFOLIO_DATABASE_URL", self._build_sqlite_url())
        self.FRIEND_COOLDOWN_MINUTES = _env_int("STOCKFOLIO_FRIEND_COOLDOWN_MINUTES", 5)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("STOCKFOLIO_SECRET_KEY must be set in non-dev mode.")
        if self.FRIEND_COOLDOWN_MINUTES < 0:
            raise ValueError("STOCKFOLIO_FRIEND_COOLDOWN_MINUTES must not be negative.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file and logs."""

        data_root = os.getenv("STOCKFOLIO_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.is_sqlite:
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True


__all__ = ["BaseConfig", "DevConfig", "TestConfig"]
