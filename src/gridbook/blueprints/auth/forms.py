"""Sign-in request payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SendOtpForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: Optional[str] = Field(default=None, max_length=254)


class VerifyOtpForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: Optional[str] = Field(default=None, max_length=254)
    otp: Optional[str] = Field(default=None, max_length=12)

    @field_validator("otp", mode="before")
    @classmethod
    def stringify_code(cls, value):
        """Clients sometimes send the code as a number."""

        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


__all__ = ["SendOtpForm", "VerifyOtpForm"]
