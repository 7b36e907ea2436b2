"""Habit workflows combining the consistency engine with persistence."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Callable, Iterable, Optional

from ..domain.repositories import HabitRepository
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models._time import utctoday
from ..models.habit import Habit, HabitTrackingEntry
from ..serialization import to_json
from .habits import (
    LAST_DAYS_DEFAULT,
    DailyEntriesResult,
    as_day,
    compute_consistency,
    generate_daily_entries,
    render_last_n_days,
)

logger = get_logger(__name__)

HISTORY_LIMIT = 30


class HabitTracker:
    """Per-user habit views and daily entry bookkeeping."""

    def __init__(
        self,
        habits: HabitRepository,
        *,
        today: Callable[[], date] = utctoday,
        last_days: int = LAST_DAYS_DEFAULT,
    ) -> None:
        self.habits = habits
        self.today = today
        self.last_days = last_days

    def _entries_by_habit(
        self, habits: list[Habit], today: date
    ) -> dict[int, list[HabitTrackingEntry]]:
        habit_ids = [habit.id for habit in habits if habit.id is not None]
        grouped: dict[int, list[HabitTrackingEntry]] = {habit_id: [] for habit_id in habit_ids}
        if not habit_ids:
            return grouped
        since = min(
            [as_day(habit.start_date) for habit in habits]
            + [today - timedelta(days=self.last_days - 1)]
        )
        for entry in self.habits.entries_for_habits(habit_ids, since, today):
            grouped.setdefault(entry.habit_id, []).append(entry)
        return grouped

    def _describe(
        self, habit: Habit, entries: list[HabitTrackingEntry], today: date
    ) -> dict[str, Any]:
        report = compute_consistency(habit, entries, today)
        last_days = render_last_n_days(habit, entries, today, self.last_days)
        return to_json(
            habit,
            **report.to_dict(),
            last_5_days=[status.to_dict() for status in last_days],
        )

    def describe_many(
        self, habits: Iterable[Habit], *, today: Optional[date] = None
    ) -> list[dict[str, Any]]:
        today = today or self.today()
        habits = list(habits)
        grouped = self._entries_by_habit(habits, today)
        return [self._describe(habit, grouped.get(habit.id, []), today) for habit in habits]

    def describe(self, habit: Habit, *, today: Optional[date] = None) -> dict[str, Any]:
        return self.describe_many([habit], today=today)[0]

    def get_habit(self, habit_id: int, *, user_id: int) -> Habit:
        habit = self.habits.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise NotFoundError("Habit not found")
        return habit

    def generate_for_user(self, user_id: int, *, day: Optional[date] = None) -> DailyEntriesResult:
        """Create the user's missing entries for ``day`` (today by default)."""

        day = day or self.today()
        return generate_daily_entries(self.habits.list_for_user(user_id=user_id), day, self.habits)

    def generate_for_all(self, *, day: Optional[date] = None) -> DailyEntriesResult:
        """Create missing entries for every user's habits; used by the scheduler."""

        day = day or self.today()
        return generate_daily_entries(self.habits.list_all(), day, self.habits)

    def today_entries(self, user_id: int, *, today: Optional[date] = None) -> list[dict[str, Any]]:
        """Today's entries, each with its habit and the habit's consistency."""

        today = today or self.today()
        entries = self.habits.entries_for_user_on(today, user_id=user_id)
        habits = {habit.id: habit for habit in self.habits.list_for_user(user_id=user_id)}
        described = {
            item["id"]: item
            for item in self.describe_many(
                [habits[entry.habit_id] for entry in entries if entry.habit_id in habits],
                today=today,
            )
        }

        payload: list[dict[str, Any]] = []
        for entry in entries:
            habit_view = described.get(entry.habit_id)
            if habit_view is None:
                continue
            payload.append(
                to_json(
                    entry,
                    habit=habit_view,
                    consistency=habit_view["consistency"],
                    days_completed=habit_view["days_completed"],
                    days_elapsed=habit_view["days_elapsed"],
                )
            )
        return payload

    def mark(
        self, entry_id: int, is_done: bool, *, user_id: int, today: Optional[date] = None
    ) -> HabitTrackingEntry:
        """Set the completion flag; only today's entry may change."""

        today = today or self.today()
        entry = self.habits.get_entry(entry_id, user_id=user_id)
        if entry is None:
            raise NotFoundError("Tracking entry not found")
        if as_day(entry.date) != today:
            raise ValidationError("You can only update today's entries")
        updated = self.habits.set_entry_done(entry_id, is_done, user_id=user_id)
        if updated is None:  # pragma: no cover - deleted between read and write
            raise NotFoundError("Tracking entry not found")
        logger.info("Tracking entry updated", extra={"entry_id": entry_id, "is_done": is_done})
        return updated

    def history(self, habit_id: int, *, user_id: int) -> list[HabitTrackingEntry]:
        self.get_habit(habit_id, user_id=user_id)
        return self.habits.history(habit_id, user_id=user_id, limit=HISTORY_LIMIT)


__all__ = ["HISTORY_LIMIT", "HabitTracker"]
