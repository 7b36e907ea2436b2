"""Sleep form definitions."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from ..common import DayInput, require_fields

CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class SleepQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class SleepForm(BaseModel):
    """One night of sleep; times are 24-hour ``HH:MM``."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    date: DayInput
    sleep_time: str = Field(pattern=CLOCK_PATTERN)
    wake_time: str = Field(pattern=CLOCK_PATTERN)
    duration: float = Field(ge=0, le=24)
    quality: SleepQuality = SleepQuality.GOOD
    notes: str = Field(default="", max_length=500)

    @model_validator(mode="before")
    @classmethod
    def ensure_required(cls, data: Any) -> Any:
        return require_fields(
            data,
            ("date", "sleep_time", "wake_time", "duration"),
            "Date, sleep time, wake time, and duration are required",
        )

    @field_validator("quality", "notes", mode="before")
    @classmethod
    def drop_blank(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "":
            return SleepQuality.GOOD.value if info.field_name == "quality" else ""
        return value


__all__ = ["SleepForm", "SleepQuality"]
