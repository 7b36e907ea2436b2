"""Habit form definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    field_validator,
    model_validator,
)

from ...models.habit import DURATION_DAYS, HabitDuration
from ..common import DateTimeInput, require_fields

_REQUIRED = ("name", "reason", "duration", "reward")


class HabitForm(BaseModel):
    """Form model for creating or replacing a habit."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(max_length=100, description="Short label for the habit")
    reason: str = Field(max_length=500, description="Why the habit matters")
    duration: HabitDuration = Field(description="How long the habit is tracked")
    reward: str = Field(max_length=200, description="What completing it earns")
    start_date: Optional[DateTimeInput] = Field(
        default=None, description="Defaults to now; ignored on update"
    )

    @model_validator(mode="before")
    @classmethod
    def ensure_required(cls, data: Any) -> Any:
        return require_fields(data, _REQUIRED, "All fields are required")

    @field_validator("duration", mode="before")
    @classmethod
    def validate_duration(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() in DURATION_DAYS:
            return value.strip()
        if isinstance(value, HabitDuration):
            return value
        raise ValueError("Duration must be one of: " + ", ".join(DURATION_DAYS))

    def changes(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "reason": self.reason,
            "duration": self.duration.value,
            "reward": self.reward,
        }


class TrackingUpdateForm(BaseModel):
    """Completion flag for a tracking entry."""

    is_done: StrictBool = Field(validation_alias=AliasChoices("is_done", "isDone"))


__all__ = ["HabitForm", "TrackingUpdateForm"]
