"""Database engine and session wiring."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig

SessionFactory = Callable[[], ContextManager[Session]]


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when ``exc`` was raised by a unique index rather than another constraint."""

    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""

    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        _apply_sqlite_pragmas(engine, config.SQLITE_PRAGMAS)
    return engine


def _apply_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragmas(dbapi_connection, _record) -> None:  # pragma: no cover - driver hook
        cursor = dbapi_connection.cursor()
        for name, value in pragmas.items():
            cursor.execute(f"PRAGMA {name}={value}")
        cursor.close()


def init_database(engine: Engine) -> None:
    """Create all tables registered on the SQLModel metadata."""

    from .. import models  # noqa: F401  # register tables

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Create a session factory yielding transactional sessions."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory
