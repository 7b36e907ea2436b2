"""Habit consistency engine.

Everything here works at calendar-day granularity: datetimes are truncated
to their date before any arithmetic. The functions are pure except
:func:`generate_daily_entries`, which writes through a tracking store.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Protocol, Sequence

from ..errors import DuplicateEntryError
from ..logging_config import get_logger
from ..models.habit import DURATION_DAYS, Habit, HabitTrackingEntry
from .numbers import round_half_up

logger = get_logger(__name__)

LAST_DAYS_DEFAULT = 5

SKIP_EXPIRED = "duration expired"
SKIP_EXISTS = "entry already exists"

STATUS_DONE = "done"
STATUS_NOT_DONE = "not done"
STATUS_NO_ENTRY = "no entry"
STATUS_FUTURE = "future"


class TrackingStore(Protocol):
    """Persistence needed by :func:`generate_daily_entries`."""

    def entries_for_day(
        self, *, habit_ids: Sequence[int], day: date
    ) -> list[HabitTrackingEntry]:  # pragma: no cover - interface
        ...

    def create_entry(
        self, *, user_id: int, habit_id: int, day: date
    ) -> HabitTrackingEntry:  # pragma: no cover - interface
        """Insert a not-done entry; raise DuplicateEntryError if one exists."""
        ...


@dataclass(frozen=True)
class TrackingWindow:
    window_start: date
    window_end: date
    effective_end: date
    days_elapsed: int


@dataclass(frozen=True)
class ConsistencyReport:
    consistency_percent: float
    days_completed: int
    days_elapsed: int

    def to_dict(self) -> dict:
        return {
            "consistency": self.consistency_percent,
            "days_completed": self.days_completed,
            "days_elapsed": self.days_elapsed,
        }


@dataclass(frozen=True)
class DayStatus:
    day: date
    status: str
    is_done: bool
    has_entry: bool

    @property
    def is_future(self) -> bool:
        return self.status == STATUS_FUTURE

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "status": self.status,
            "is_done": self.is_done,
            "has_entry": self.has_entry,
            "is_future": self.is_future,
        }


@dataclass(frozen=True)
class CreatedEntry:
    habit_id: int
    habit_name: str
    entry_id: Optional[int]


@dataclass(frozen=True)
class SkippedEntry:
    habit_id: int
    habit_name: str
    reason: str


@dataclass
class DailyEntriesResult:
    target_date: date
    created: list[CreatedEntry] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": self.target_date.isoformat(),
            "created": [asdict(item) for item in self.created],
            "skipped": [asdict(item) for item in self.skipped],
        }


def as_day(value: date | datetime) -> date:
    """Truncate a datetime to its calendar day; dates pass through."""

    if isinstance(value, datetime):
        return value.date()
    return value


def duration_days(duration: Optional[str]) -> int:
    """Return the tracked day-count for a duration category (0 if unknown)."""

    if duration is None:
        return 0
    key = getattr(duration, "value", duration)
    return DURATION_DAYS.get(key, 0)


def resolve_tracking_window(
    start_date: date | datetime, duration: Optional[str], as_of: date | datetime
) -> TrackingWindow:
    """Compute the window a habit's consistency is measured over.

    ``window_end`` is exclusive; ``effective_end`` is the inclusive last day
    counted so far, i.e. ``as_of`` capped at the day before ``window_end``.
    A 15 day habit therefore never counts more than 15 elapsed days.
    """

    window_start = as_day(start_date)
    window_end = window_start + timedelta(days=duration_days(duration))
    effective_end = min(as_day(as_of), window_end - timedelta(days=1))
    days_elapsed = (effective_end - window_start).days + 1
    if days_elapsed <= 0:
        days_elapsed = 0
    return TrackingWindow(
        window_start=window_start,
        window_end=window_end,
        effective_end=effective_end,
        days_elapsed=days_elapsed,
    )


def compute_consistency(
    habit: Habit, entries: Iterable[HabitTrackingEntry], as_of: date | datetime
) -> ConsistencyReport:
    """Return the share of elapsed days marked done, as a percentage."""

    window = resolve_tracking_window(habit.start_date, habit.duration, as_of)
    if window.days_elapsed == 0:
        return ConsistencyReport(consistency_percent=0.0, days_completed=0, days_elapsed=0)

    days_completed = sum(
        1
        for entry in entries
        if entry.is_done and window.window_start <= as_day(entry.date) <= window.effective_end
    )
    percent = round_half_up(days_completed / window.days_elapsed * 100)
    return ConsistencyReport(
        consistency_percent=percent,
        days_completed=days_completed,
        days_elapsed=window.days_elapsed,
    )


def is_within_validity_window(habit: Habit, candidate: date | datetime) -> bool:
    """True when ``candidate`` falls on one of the habit's tracked days."""

    days_diff = (as_day(candidate) - as_day(habit.start_date)).days
    return 0 <= days_diff < duration_days(habit.duration)


def generate_daily_entries(
    habits: Iterable[Habit], target_date: date | datetime, store: TrackingStore
) -> DailyEntriesResult:
    """Ensure every still-running habit has an entry for ``target_date``.

    Existing entries are read up front and only the gap is written. The
    store's uniqueness constraint still backs this up: a concurrent caller
    that wins the race shows up here as a skipped habit, not an error.
    """

    day = as_day(target_date)
    result = DailyEntriesResult(target_date=day)
    habits = [habit for habit in habits if habit.id is not None]

    candidates: list[Habit] = []
    for habit in habits:
        if is_within_validity_window(habit, day):
            candidates.append(habit)
        else:
            result.skipped.append(SkippedEntry(habit.id, habit.name, SKIP_EXPIRED))

    existing_ids: set[int] = set()
    if candidates:
        existing = store.entries_for_day(habit_ids=[habit.id for habit in candidates], day=day)
        existing_ids = {entry.habit_id for entry in existing}

    for habit in candidates:
        if habit.id in existing_ids:
            result.skipped.append(SkippedEntry(habit.id, habit.name, SKIP_EXISTS))
            continue
        try:
            entry = store.create_entry(user_id=habit.user_id, habit_id=habit.id, day=day)
        except DuplicateEntryError:
            logger.info("Entry for habit %s on %s created concurrently", habit.id, day)
            result.skipped.append(SkippedEntry(habit.id, habit.name, SKIP_EXISTS))
            continue
        result.created.append(CreatedEntry(habit.id, habit.name, entry.id))

    logger.info(
        "Daily entries generated",
        extra={
            "date": day.isoformat(),
            "created_count": len(result.created),
            "skipped_count": len(result.skipped),
        },
    )
    return result


def render_last_n_days(
    habit: Habit,
    entries: Iterable[HabitTrackingEntry],
    today: date | datetime,
    n: int = LAST_DAYS_DEFAULT,
) -> list[DayStatus]:
    """Status of the ``n`` days ending at ``today``, oldest first."""

    today = as_day(today)
    by_day = {as_day(entry.date): entry for entry in entries if entry.habit_id == habit.id}

    statuses: list[DayStatus] = []
    for offset in range(n - 1, -1, -1):
        day = today - timedelta(days=offset)
        entry = by_day.get(day)
        if entry is None:
            status = STATUS_FUTURE if day > today else STATUS_NO_ENTRY
            statuses.append(DayStatus(day=day, status=status, is_done=False, has_entry=False))
        else:
            status = STATUS_DONE if entry.is_done else STATUS_NOT_DONE
            statuses.append(DayStatus(day=day, status=status, is_done=entry.is_done, has_entry=True))
    return statuses


__all__ = [
    "ConsistencyReport",
    "CreatedEntry",
    "DailyEntriesResult",
    "DayStatus",
    "SkippedEntry",
    "TrackingStore",
    "TrackingWindow",
    "as_day",
    "compute_consistency",
    "duration_days",
    "generate_daily_entries",
    "is_within_validity_window",
    "render_last_n_days",
]
