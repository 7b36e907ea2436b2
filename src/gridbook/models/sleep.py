"""Nightly sleep log."""

from __future__ import annotations

import datetime as dt
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class SleepEntry(SQLModel, table=True):
    """One night of sleep; at most one per user per day."""

    __tablename__: ClassVar[str] = "sleep_entry"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_sleep_user_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    date: dt.date = Field(nullable=False, index=True)
    sleep_time: str = Field(nullable=False, max_length=5)
    wake_time: str = Field(nullable=False, max_length=5)
    duration: float = Field(nullable=False, description="Hours slept, 0-24")
    quality: str = Field(default="good", max_length=16)
    notes: str = Field(default="", max_length=500)
    created_at: dt.datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime
    )
    updated_at: dt.datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime
    )
