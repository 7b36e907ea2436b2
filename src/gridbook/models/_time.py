"""Timestamp helpers shared by the table definitions."""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import DateTime

# Column type for every timestamp: naive values, always UTC.
NaiveUTCDateTime = DateTime(timezone=False)


def utcnow() -> datetime:
    """Return a naive UTC timestamp (SQLite drops tzinfo on round-trip)."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def utctoday() -> date:
    """Calendar day of :func:`utcnow`; "today" for every day-based rule."""

    return utcnow().date()
