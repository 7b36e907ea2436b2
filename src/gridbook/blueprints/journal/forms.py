"""Journal form definitions."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common import DateTimeInput, require_fields

MAX_TAGS = 10


class Mood(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    ANXIOUS = "anxious"
    EXCITED = "excited"
    CALM = "calm"
    ANGRY = "angry"
    GRATEFUL = "grateful"
    NEUTRAL = "neutral"


class JournalForm(BaseModel):
    """Form model for creating or replacing a journal entry."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    date: DateTimeInput
    title: str = Field(max_length=200)
    content: str = Field(max_length=10000)
    mood: Mood = Mood.NEUTRAL
    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS)

    @model_validator(mode="before")
    @classmethod
    def ensure_required(cls, data: Any) -> Any:
        return require_fields(
            data, ("date", "title", "content"), "Date, title, and content are required"
        )

    @field_validator("mood", mode="before")
    @classmethod
    def default_mood(cls, value: Any) -> Any:
        return value or Mood.NEUTRAL.value

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: str | Iterable[str] | None) -> list[str] | Iterable[str]:
        """Convert comma-separated tag strings into a list."""

        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return [tag for tag in (str(part).strip() for part in value) if tag]
        return value


__all__ = ["JournalForm", "Mood"]
