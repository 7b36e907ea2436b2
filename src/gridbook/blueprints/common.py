"""Request parsing helpers shared by the API blueprints."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated, Any, Iterable, Mapping, TypeVar

from flask import request
from pydantic import BaseModel, BeforeValidator

from ..errors import ValidationError

FormT = TypeVar("FormT", bound=BaseModel)


def json_body() -> dict[str, Any]:
    """Return the JSON object sent with the request (empty when absent)."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def load_form(form_cls: type[FormT], data: Mapping[str, Any] | None = None) -> FormT:
    """Validate ``data`` (the request body by default) into ``form_cls``.

    pydantic errors propagate and are rendered as 400 responses.
    """

    return form_cls.model_validate(json_body() if data is None else dict(data))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data: Any, fields: Iterable[str], message: str) -> Any:
    """Raise ``ValueError(message)`` unless every field is present and non-blank."""

    if not isinstance(data, Mapping):
        return data
    if any(_is_blank(data.get(name)) for name in fields):
        raise ValueError(message)
    return data


def _coerce_datetime(value: Any) -> Any:
    if isinstance(value, str):
        raw = value.strip()
        if len(raw) == 10:
            return datetime.strptime(raw, "%Y-%m-%d")
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _coerce_date(value: Any) -> Any:
    if isinstance(value, str) and len(value.strip()) > 10:
        value = _coerce_datetime(value)
    if isinstance(value, datetime):
        return value.date()
    return value


# Accepts "YYYY-MM-DD" or full ISO timestamps; stored naive UTC.
DateTimeInput = Annotated[datetime, BeforeValidator(_coerce_datetime)]
# Accepts "YYYY-MM-DD" or an ISO timestamp, keeping only its calendar day.
DayInput = Annotated[date, BeforeValidator(_coerce_date)]


def deleted(message: str, key: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"message": message, key: payload}
