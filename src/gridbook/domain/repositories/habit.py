"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ...models.habit import Habit, HabitTrackingEntry


class HabitRepository(Protocol):
    """Repository for habits and their tracking entries, scoped per user."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit owned by ``user_id``."""
        ...

    def list_for_user(self, *, user_id: int) -> list[Habit]:
        """List a user's habits, newest first."""
        ...

    def list_all(self) -> list[Habit]:
        """Every habit of every user."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit_id: int, changes: dict[str, Any], *, user_id: int) -> Optional[Habit]:
        """Apply ``changes``; ``None`` when the habit does not exist."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Delete a habit and its tracking entries."""
        ...

    # Tracking entry operations
    def entries_for_habits(
        self, habit_ids: Sequence[int], start_date: date, end_date: date
    ) -> list[HabitTrackingEntry]:
        """Entries for any of ``habit_ids`` with ``start_date <= date <= end_date``."""
        ...

    def entries_for_day(self, *, habit_ids: Sequence[int], day: date) -> list[HabitTrackingEntry]:
        """Entries recorded on ``day`` for the given habits."""
        ...

    def entries_for_user_on(self, day: date, *, user_id: int) -> list[HabitTrackingEntry]:
        """All of a user's entries for ``day``."""
        ...

    def create_entry(self, *, user_id: int, habit_id: int, day: date) -> HabitTrackingEntry:
        """Insert a not-done entry, raising DuplicateEntryError on conflict."""
        ...

    def get_entry(self, entry_id: int, *, user_id: int) -> Optional[HabitTrackingEntry]:
        """Retrieve a tracking entry owned by ``user_id``."""
        ...

    def set_entry_done(
        self, entry_id: int, is_done: bool, *, user_id: int
    ) -> Optional[HabitTrackingEntry]:
        """Update the completion flag of an entry."""
        ...

    def history(self, habit_id: int, *, user_id: int, limit: int = 30) -> list[HabitTrackingEntry]:
        """Most recent entries for a habit, newest first."""
        ...
