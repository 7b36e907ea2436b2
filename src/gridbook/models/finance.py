"""Income and expense records."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class FinanceRecord(SQLModel, table=True):
    """A single income or expense line."""

    __tablename__: ClassVar[str] = "finance_record"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    date: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=NaiveUTCDateTime
    )
    type: str = Field(nullable=False, max_length=16, index=True)
    category: str = Field(nullable=False, max_length=100)
    amount: float = Field(nullable=False, description="Always non-negative; type carries the sign")
    description: str = Field(default="", max_length=500)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
