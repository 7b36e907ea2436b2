"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import current_app
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelHabitRepository,
    SQLModelRecordRepository,
    SQLModelUserRepository,
)
from .models import FinanceRecord, Formula, JournalEntry, Mistake, SleepEntry, Todo
from .services.auth import AuthService, TokenService
from .services.mailer import Mailer, SMTPMailer
from .services.tracking import HabitTracker

EXTENSION_KEY = "gridbook"


@dataclass
class AppContext:
    """Everything a request handler needs, built once per application."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    users: SQLModelUserRepository
    habits: SQLModelHabitRepository
    formulas: SQLModelRecordRepository[Formula]
    finance: SQLModelRecordRepository[FinanceRecord]
    sleep: SQLModelRecordRepository[SleepEntry]
    journal: SQLModelRecordRepository[JournalEntry]
    mistakes: SQLModelRecordRepository[Mistake]
    todos: SQLModelRecordRepository[Todo]

    mailer: Mailer
    tokens: TokenService
    auth: AuthService
    tracker: HabitTracker


def create_app_context(config: BaseConfig, *, mailer: Optional[Mailer] = None) -> AppContext:
    """Create the engine, schema, repositories and services for ``config``."""

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    users = SQLModelUserRepository(session_factory)
    habits = SQLModelHabitRepository(session_factory)
    mailer = mailer or SMTPMailer.from_config(config)
    tokens = TokenService(
        config.JWT_SECRET,
        algorithm=config.JWT_ALGORITHM,
        expires_days=config.JWT_EXPIRES_DAYS,
    )

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        users=users,
        habits=habits,
        formulas=SQLModelRecordRepository(Formula, session_factory),
        finance=SQLModelRecordRepository(
            FinanceRecord, session_factory, order_by=("date", "created_at")
        ),
        sleep=SQLModelRecordRepository(SleepEntry, session_factory, order_by=("date",)),
        journal=SQLModelRecordRepository(
            JournalEntry, session_factory, order_by=("date", "created_at")
        ),
        mistakes=SQLModelRecordRepository(Mistake, session_factory),
        todos=SQLModelRecordRepository(Todo, session_factory, order_by=("date", "created_at")),
        mailer=mailer,
        tokens=tokens,
        auth=AuthService(users, mailer, tokens, otp_ttl_minutes=config.OTP_TTL_MINUTES),
        tracker=HabitTracker(habits),
    )


def get_context() -> AppContext:
    """Return the context of the application handling the current request."""

    return current_app.extensions[EXTENSION_KEY]
