"""Mistake log: what happened, why, and the fix."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class Mistake(SQLModel, table=True):
    __tablename__: ClassVar[str] = "mistake"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    mistake: str = Field(nullable=False, max_length=500)
    reason: str = Field(nullable=False, max_length=1000)
    solution: str = Field(nullable=False, max_length=1000)
    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=NaiveUTCDateTime
    )
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
