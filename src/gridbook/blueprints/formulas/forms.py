"""Formula form definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common import require_fields


def _display_names(value: Any) -> Any:
    """Keep non-blank display names, stringified and trimmed."""

    if value is None or not isinstance(value, dict):
        return {}
    names: dict[str, str] = {}
    for symbol, label in value.items():
        label = str(label).strip() if label is not None else ""
        if label:
            names[str(symbol)] = label
    return names


def _bindings(value: Any) -> Any:
    if value is None:
        return {}
    return value


class FormulaForm(BaseModel):
    """Form model for creating a formula."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(max_length=200)
    formula: str = Field(max_length=500)
    variables: dict[str, str] = Field(default_factory=dict, description="Symbol to display name")

    @model_validator(mode="before")
    @classmethod
    def ensure_required(cls, data: Any) -> Any:
        return require_fields(data, ("name", "formula"), "Name and formula are required")

    @field_validator("variables", mode="before")
    @classmethod
    def clean_variables(cls, value: Any) -> Any:
        return _display_names(value)


class FormulaUpdateForm(BaseModel):
    """Partial update; omitted fields are left alone."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, max_length=200)
    formula: Optional[str] = Field(default=None, max_length=500)
    variables: Optional[dict[str, str]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value:
            raise ValueError("Name cannot be empty")
        return value

    @field_validator("formula")
    @classmethod
    def validate_formula(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value:
            raise ValueError("Formula cannot be empty")
        return value

    @field_validator("variables", mode="before")
    @classmethod
    def clean_variables(cls, value: Any) -> Any:
        return _display_names(value)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ExecuteForm(BaseModel):
    """Numbers to bind for one evaluation."""

    values: dict[str, Any] = Field(default_factory=dict)

    @field_validator("values", mode="before")
    @classmethod
    def default_values(cls, value: Any) -> Any:
        return _bindings(value)


class EvaluateForm(ExecuteForm):
    model_config = ConfigDict(str_strip_whitespace=True)

    formula: str = Field(max_length=500)

    @model_validator(mode="before")
    @classmethod
    def ensure_formula(cls, data: Any) -> Any:
        return require_fields(data, ("formula",), "Formula is required")


__all__ = ["EvaluateForm", "ExecuteForm", "FormulaForm", "FormulaUpdateForm"]
