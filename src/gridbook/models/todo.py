"""Todo items."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class Todo(SQLModel, table=True):
    __tablename__: ClassVar[str] = "todo"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=500)
    description: str = Field(default="", max_length=2000)
    date: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=NaiveUTCDateTime
    )
    completed: bool = Field(default=False, nullable=False, index=True)
    priority: str = Field(default="medium", max_length=8)
    due_date: Optional[datetime] = Field(default=None, sa_type=NaiveUTCDateTime)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
