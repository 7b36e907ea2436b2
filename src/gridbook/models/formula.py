"""User-authored arithmetic formulas."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class Formula(SQLModel, table=True):
    """Expression over single-letter variables plus their display names.

    ``result`` is a cache only; callers always recompute before display.
    """

    __tablename__: ClassVar[str] = "formula"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=200)
    formula: str = Field(nullable=False, max_length=500)
    variables: dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    result: Optional[float] = Field(default=None)
    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=NaiveUTCDateTime
    )
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
