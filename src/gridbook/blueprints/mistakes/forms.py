"""Mistake form definitions."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..common import require_fields


class MistakeForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    mistake: str = Field(max_length=500)
    reason: str = Field(max_length=1000)
    solution: str = Field(max_length=1000)

    @model_validator(mode="before")
    @classmethod
    def ensure_required(cls, data: Any) -> Any:
        return require_fields(data, ("mistake", "reason", "solution"), "All fields are required")


__all__ = ["MistakeForm"]
