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

    APP_NAME = "Gridbook"
    DB_FILENAME = "gridbook.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("GRIDBOOK_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("GRIDBOOK_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("GRIDBOOK_DATABASE_URL", self._build_sqlite_url())

        self.JWT_SECRET = os.getenv("GRIDBOOK_JWT_SECRET", self.SECRET_KEY)
        self.JWT_ALGORITHM = "HS256"
        self.JWT_EXPIRES_DAYS = _env_int("GRIDBOOK_JWT_EXPIRES_DAYS", 7)
        self.OTP_TTL_MINUTES = _env_int("GRIDBOOK_OTP_TTL_MINUTES", 10)

        self.SMTP_HOST = os.getenv("GRIDBOOK_SMTP_HOST", "smtp.gmail.com")
        self.SMTP_PORT = _env_int("GRIDBOOK_SMTP_PORT", 587)
        self.SMTP_USERNAME = os.getenv("GRIDBOOK_SMTP_USERNAME")
        # App passwords are often pasted with spaces between groups.
        password = os.getenv("GRIDBOOK_SMTP_PASSWORD")
        self.SMTP_PASSWORD = "".join(password.split()) if password else None
        self.SMTP_SENDER = os.getenv("GRIDBOOK_SMTP_SENDER", self.SMTP_USERNAME or "")
        self.SMTP_USE_TLS = _env_bool("GRIDBOOK_SMTP_USE_TLS", default=True)

        self.ENABLE_SCHEDULER = _env_bool("GRIDBOOK_ENABLE_SCHEDULER", default=False)
        self.DAILY_ENTRIES_HOUR = _env_int("GRIDBOOK_DAILY_ENTRIES_HOUR", 0)

        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("GRIDBOOK_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("GRIDBOOK_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; never starts background jobs."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.ENABLE_SCHEDULER = False
