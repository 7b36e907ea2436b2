"""Pytest configuration and shared fixtures for Gridbook tests.

This module provides database fixtures, test data factories, and a Flask
client wired to a throwaway SQLite file and an in-memory mailer.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from gridbook import create_app
from gridbook.config import TestConfig
from gridbook.context import EXTENSION_KEY
from gridbook.infra.database import create_session_factory
from gridbook.models import Habit, HabitTrackingEntry, User
from gridbook.services.mailer import MailResult


class RecordingMailer:
    """Mailer double that keeps every message instead of sending it."""

    def __init__(self) -> None:
        self.messages: list[dict[str, str]] = []
        self.fail_with: str | None = None

    def send(self, to_address: str, subject: str, html_body: str) -> MailResult:
        if self.fail_with:
            return MailResult(False, self.fail_with)
        self.messages.append({"to": to_address, "subject": subject, "html": html_body})
        return MailResult(True)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory, as the repositories expect."""

    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    """Factory for persisted users with unique emails."""

    counter = {"n": 0}

    def _create_user(email: str | None = None) -> User:
        counter["n"] += 1
        row = User(email=email or f"user{counter['n']}@example.com", is_verified=True)
        with session_factory() as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
        return row

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    return user_factory("tester@example.com")


@pytest.fixture
def habit_factory(session_factory, user):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Read",
        duration: str = "15day",
        start_date: date | datetime = datetime(2024, 1, 1, 9, 30),
        owner: User | None = None,
    ) -> Habit:
        if not isinstance(start_date, datetime):
            start_date = datetime.combine(start_date, datetime.min.time())
        row = Habit(
            user_id=(owner or user).id,
            name=name,
            reason="Stay sharp",
            duration=duration,
            reward="Coffee",
            start_date=start_date,
        )
        with session_factory() as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
        return row

    return _create_habit


@pytest.fixture
def entry_factory(session_factory):
    """Factory for tracking entries of an existing habit."""

    def _create_entry(habit: Habit, day: date, is_done: bool = True) -> HabitTrackingEntry:
        row = HabitTrackingEntry(
            user_id=habit.user_id, habit_id=habit.id, date=day, is_done=is_done
        )
        with session_factory() as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
        return row

    return _create_entry


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def app(tmp_path, monkeypatch, mailer):
    """Flask app backed by a per-test SQLite file."""

    monkeypatch.setenv("GRIDBOOK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("GRIDBOOK_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("GRIDBOOK_DEV_MODE", "true")
    monkeypatch.setenv("GRIDBOOK_SECRET_KEY", "test-secret")
    monkeypatch.delenv("GRIDBOOK_JWT_SECRET", raising=False)

    flask_app = create_app(config=TestConfig(), mailer=mailer)
    yield flask_app
    flask_app.extensions[EXTENSION_KEY].engine.dispose()


@pytest.fixture
def ctx(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def api_user(ctx) -> User:
    return ctx.users.create(User(email="tester@example.com", is_verified=True))


@pytest.fixture
def auth_headers(ctx, api_user) -> dict[str, str]:
    """Bearer header for ``api_user``."""

    return {"Authorization": f"Bearer {ctx.tokens.issue(api_user.id)}"}
