"""Finance form definitions."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common import DateTimeInput, require_fields


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class FinanceForm(BaseModel):
    """Form model for creating or replacing a transaction."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    date: DateTimeInput
    type: TransactionType
    category: str = Field(max_length=100)
    amount: float
    description: str = Field(default="", max_length=500)

    @model_validator(mode="before")
    @classmethod
    def ensure_required(cls, data: Any) -> Any:
        return require_fields(
            data,
            ("date", "type", "category", "amount"),
            "Date, type, category, and amount are required",
        )

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value: Any) -> Any:
        if value not in {item.value for item in TransactionType}:
            raise ValueError("Type must be either income or expense")
        return value

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Amount cannot be negative")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value: Any) -> Any:
        return "" if value is None else value


__all__ = ["FinanceForm", "TransactionType"]
