"""Journal entries."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class JournalEntry(SQLModel, table=True):
    __tablename__: ClassVar[str] = "journal_entry"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    date: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=NaiveUTCDateTime
    )
    title: str = Field(nullable=False, max_length=200)
    content: str = Field(nullable=False, max_length=10000)
    mood: str = Field(default="neutral", max_length=16)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=NaiveUTCDateTime
    )
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
