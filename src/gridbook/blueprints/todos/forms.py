"""Todo form definitions."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator

from ..common import DateTimeInput, require_fields


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TodoForm(BaseModel):
    """Form model for creating a todo."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    title: str = Field(max_length=500)
    description: str = Field(default="", max_length=2000)
    date: Optional[DateTimeInput] = None
    completed: StrictBool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[DateTimeInput] = None

    @model_validator(mode="before")
    @classmethod
    def ensure_required(cls, data: Any) -> Any:
        return require_fields(data, ("title",), "Title is required")

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, value: Any) -> Any:
        return value or Priority.MEDIUM.value

    @field_validator("due_date", "date", mode="before")
    @classmethod
    def blank_date(cls, value: Any) -> Any:
        return None if value == "" else value

    def fields(self) -> dict[str, Any]:
        """Dumped fields, leaving ``date`` to the model default when absent."""

        data = self.model_dump()
        if data["date"] is None:
            del data["date"]
        return data


class TodoUpdateForm(BaseModel):
    """Partial update; omitted fields are left alone."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    title: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    date: Optional[DateTimeInput] = None
    completed: Optional[StrictBool] = None
    priority: Optional[Priority] = None
    due_date: Optional[DateTimeInput] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value:
            raise ValueError("Title cannot be empty")
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date(cls, value: Any) -> Any:
        return None if value == "" else value

    def changes(self) -> dict[str, Any]:
        """Set fields only; a null ``due_date`` clears it, other nulls are ignored."""

        changes = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in changes.items()
            if value is not None or key == "due_date"
        }


__all__ = ["Priority", "TodoForm", "TodoUpdateForm"]
