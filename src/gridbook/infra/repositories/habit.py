"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...errors import DuplicateEntryError
from ...models._time import utcnow
from ...models.habit import Habit, HabitTrackingEntry
from ..database import SessionFactory, is_unique_violation

# Start date is fixed when the habit is created.
_MUTABLE_HABIT_FIELDS = {"name", "reason", "duration", "reward"}


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, *, user_id: int) -> list[Habit]:
        """List a user's habits, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_at.desc(), Habit.id.desc())  # type: ignore[union-attr]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_all(self) -> list[Habit]:
        """Every habit of every user; used by the daily scheduler."""
        with self.session_factory() as session:
            rows = list(session.exec(select(Habit).order_by(Habit.user_id, Habit.id)).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit_id: int, changes: dict[str, Any], *, user_id: int) -> Optional[Habit]:
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return None
            for key, value in changes.items():
                if key in _MUTABLE_HABIT_FIELDS:
                    setattr(habit, key, value)
            habit.updated_at = utcnow()
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Delete a habit together with its tracking entries."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return None
            session.execute(
                sa_delete(HabitTrackingEntry).where(HabitTrackingEntry.habit_id == habit_id)
            )
            session.delete(habit)
            session.commit()
            return habit

    # Tracking entry operations
    def entries_for_habits(
        self, habit_ids: Sequence[int], start_date: date, end_date: date
    ) -> list[HabitTrackingEntry]:
        if not habit_ids:
            return []
        with self.session_factory() as session:
            statement = (
                select(HabitTrackingEntry)
                .where(HabitTrackingEntry.habit_id.in_(habit_ids))  # type: ignore[attr-defined]
                .where(HabitTrackingEntry.date >= start_date)
                .where(HabitTrackingEntry.date <= end_date)
                .order_by(HabitTrackingEntry.date)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def entries_for_day(self, *, habit_ids: Sequence[int], day: date) -> list[HabitTrackingEntry]:
        return self.entries_for_habits(habit_ids, day, day)

    def entries_for_user_on(self, day: date, *, user_id: int) -> list[HabitTrackingEntry]:
        """All of a user's entries for ``day`` in creation order."""
        with self.session_factory() as session:
            statement = (
                select(HabitTrackingEntry)
                .where(HabitTrackingEntry.user_id == user_id)
                .where(HabitTrackingEntry.date == day)
                .order_by(HabitTrackingEntry.created_at, HabitTrackingEntry.id)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create_entry(self, *, user_id: int, habit_id: int, day: date) -> HabitTrackingEntry:
        """Insert a not-done entry for ``day``.

        Raises:
            DuplicateEntryError: the (habit, day) pair already has an entry.
        """
        entry = HabitTrackingEntry(user_id=user_id, habit_id=habit_id, date=day, is_done=False)
        try:
            with self.session_factory() as session:
                session.add(entry)
                session.commit()
                session.refresh(entry)
                session.expunge(entry)
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise DuplicateEntryError(
                f"Habit {habit_id} already has an entry for {day.isoformat()}"
            ) from exc
        return entry

    def get_entry(self, entry_id: int, *, user_id: int) -> Optional[HabitTrackingEntry]:
        with self.session_factory() as session:
            obj = session.exec(
                select(HabitTrackingEntry).where(
                    HabitTrackingEntry.id == entry_id, HabitTrackingEntry.user_id == user_id
                )
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def set_entry_done(
        self, entry_id: int, is_done: bool, *, user_id: int
    ) -> Optional[HabitTrackingEntry]:
        with self.session_factory() as session:
            entry = session.exec(
                select(HabitTrackingEntry).where(
                    HabitTrackingEntry.id == entry_id, HabitTrackingEntry.user_id == user_id
                )
            ).first()
            if entry is None:
                return None
            entry.is_done = is_done
            entry.updated_at = utcnow()
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    def history(self, habit_id: int, *, user_id: int, limit: int = 30) -> list[HabitTrackingEntry]:
        with self.session_factory() as session:
            statement = (
                select(HabitTrackingEntry)
                .where(HabitTrackingEntry.user_id == user_id)
                .where(HabitTrackingEntry.habit_id == habit_id)
                .order_by(HabitTrackingEntry.date.desc())  # type: ignore[attr-defined]
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
