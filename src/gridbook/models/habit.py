"""Habits and their per-day tracking entries."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class HabitDuration(str, Enum):
    """How long a habit is tracked after it starts."""

    FIFTEEN_DAYS = "15day"
    ONE_MONTH = "1month"
    THREE_MONTHS = "3month"
    SIX_MONTHS = "6month"
    ONE_YEAR = "1year"


DURATION_DAYS: dict[str, int] = {
    HabitDuration.FIFTEEN_DAYS.value: 15,
    HabitDuration.ONE_MONTH.value: 30,
    HabitDuration.THREE_MONTHS.value: 90,
    HabitDuration.SIX_MONTHS.value: 180,
    HabitDuration.ONE_YEAR.value: 365,
}


class Habit(SQLModel, table=True):
    """A habit the user commits to for a fixed number of days."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    reason: str = Field(nullable=False, max_length=500)
    duration: str = Field(nullable=False, max_length=16)
    reward: str = Field(nullable=False, max_length=200)
    start_date: dt.datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime
    )
    created_at: dt.datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=NaiveUTCDateTime
    )
    updated_at: dt.datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime
    )


class HabitTrackingEntry(SQLModel, table=True):
    """Completion flag for one habit on one calendar day."""

    __tablename__: ClassVar[str] = "habit_tracking"
    __table_args__ = (UniqueConstraint("habit_id", "date", name="uq_habit_tracking_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    date: dt.date = Field(nullable=False, index=True)
    is_done: bool = Field(default=False, nullable=False)
    created_at: dt.datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime
    )
    updated_at: dt.datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime
    )
