"""User model supporting email one-time-password sign in."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._time import NaiveUTCDateTime, utcnow


class User(SQLModel, table=True):
    """Account identified by email; authenticated with emailed codes."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(nullable=False, unique=True, index=True, max_length=254)
    otp_hash: Optional[str] = Field(default=None, max_length=255)
    otp_expires_at: Optional[datetime] = Field(default=None, sa_type=NaiveUTCDateTime)
    is_verified: bool = Field(default=False, nullable=False)
    last_login: Optional[datetime] = Field(default=None, sa_type=NaiveUTCDateTime)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveUTCDateTime)
