"""Sleep routes."""

from __future__ import annotations

from datetime import date
from typing import Optional

from flask import jsonify

from ...context import get_context
from ...errors import DuplicateEntryError, NotFoundError, ValidationError
from ...models._time import utctoday
from ...models.sleep import SleepEntry
from ...security import current_user_id, login_required
from ...serialization import to_json, to_json_list
from ...services.sleep import week_bounds, weekly_stats
from ..common import deleted, load_form
from . import bp
from .forms import SleepForm

LIST_LIMIT = 30
DUPLICATE_DAY = "Sleep entry already exists for this date"


def _weekly_stats(user_id: int) -> dict:
    start, end = week_bounds(utctoday())
    return weekly_stats(get_context().sleep.list_between(start, end, user_id=user_id)).to_dict()


def _ensure_free_day(day: date, user_id: int, *, entry_id: Optional[int] = None) -> None:
    existing = get_context().sleep.find_one(user_id=user_id, date=day)
    if existing is not None and existing.id != entry_id:
        raise ValidationError(DUPLICATE_DAY)


@bp.get("/")
@login_required
def list_entries():
    user_id = current_user_id()
    entries = get_context().sleep.list_for_user(user_id=user_id, limit=LIST_LIMIT)
    return jsonify({"entries": to_json_list(entries), "weekly_stats": _weekly_stats(user_id)})


@bp.post("/")
@login_required
def create_entry():
    """Log a night; a day can only be logged once."""

    form = load_form(SleepForm)
    user_id = current_user_id()
    _ensure_free_day(form.date, user_id)
    try:
        entry = get_context().sleep.create(SleepEntry(**form.model_dump()), user_id=user_id)
    except DuplicateEntryError as exc:
        raise ValidationError(DUPLICATE_DAY) from exc
    return (
        jsonify(
            {
                "message": "Sleep entry created successfully",
                "entry": to_json(entry),
                "weekly_stats": _weekly_stats(user_id),
            }
        ),
        201,
    )


@bp.get("/<int:entry_id>")
@login_required
def get_entry(entry_id: int):
    entry = get_context().sleep.get(entry_id, user_id=current_user_id())
    if entry is None:
        raise NotFoundError("Sleep entry not found")
    return jsonify({"entry": to_json(entry)})


@bp.put("/<int:entry_id>")
@login_required
def update_entry(entry_id: int):
    form = load_form(SleepForm)
    user_id = current_user_id()
    _ensure_free_day(form.date, user_id, entry_id=entry_id)
    try:
        entry = get_context().sleep.update(entry_id, form.model_dump(), user_id=user_id)
    except DuplicateEntryError as exc:
        raise ValidationError(DUPLICATE_DAY) from exc
    if entry is None:
        raise NotFoundError("Sleep entry not found")
    return jsonify(
        {
            "message": "Sleep entry updated successfully",
            "entry": to_json(entry),
            "weekly_stats": _weekly_stats(user_id),
        }
    )


@bp.delete("/<int:entry_id>")
@login_required
def delete_entry(entry_id: int):
    user_id = current_user_id()
    entry = get_context().sleep.delete(entry_id, user_id=user_id)
    if entry is None:
        raise NotFoundError("Sleep entry not found")
    payload = deleted("Sleep entry deleted successfully", "entry", to_json(entry))
    payload["weekly_stats"] = _weekly_stats(user_id)
    return jsonify(payload)
