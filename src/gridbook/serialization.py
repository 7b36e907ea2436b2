"""JSON rendering of SQLModel rows."""

from __future__ import annotations

from typing import Any, Iterable

from sqlmodel import SQLModel


def to_json(record: SQLModel, **extra: Any) -> dict[str, Any]:
    """Dump a row with ISO dates, merging ``extra`` keys on top."""

    payload = record.model_dump(mode="json")
    payload.update(extra)
    return payload


def to_json_list(records: Iterable[SQLModel]) -> list[dict[str, Any]]:
    return [to_json(record) for record in records]
