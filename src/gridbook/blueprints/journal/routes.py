"""Journal routes."""

from __future__ import annotations

from flask import jsonify

from ...context import get_context
from ...errors import NotFoundError
from ...models.journal import JournalEntry
from ...security import current_user_id, login_required
from ...serialization import to_json, to_json_list
from ..common import deleted, load_form
from . import bp
from .forms import JournalForm

LIST_LIMIT = 100


@bp.get("/")
@login_required
def list_entries():
    entries = get_context().journal.list_for_user(user_id=current_user_id(), limit=LIST_LIMIT)
    return jsonify({"entries": to_json_list(entries)})


@bp.post("/")
@login_required
def create_entry():
    form = load_form(JournalForm)
    entry = get_context().journal.create(JournalEntry(**form.model_dump()), user_id=current_user_id())
    return jsonify({"message": "Journal entry created successfully", "entry": to_json(entry)}), 201


@bp.get("/<int:entry_id>")
@login_required
def get_entry(entry_id: int):
    entry = get_context().journal.get(entry_id, user_id=current_user_id())
    if entry is None:
        raise NotFoundError("Journal entry not found")
    return jsonify({"entry": to_json(entry)})


@bp.put("/<int:entry_id>")
@login_required
def update_entry(entry_id: int):
    form = load_form(JournalForm)
    entry = get_context().journal.update(entry_id, form.model_dump(), user_id=current_user_id())
    if entry is None:
        raise NotFoundError("Journal entry not found")
    return jsonify({"message": "Journal entry updated successfully", "entry": to_json(entry)})


@bp.delete("/<int:entry_id>")
@login_required
def delete_entry(entry_id: int):
    entry = get_context().journal.delete(entry_id, user_id=current_user_id())
    if entry is None:
        raise NotFoundError("Journal entry not found")
    return jsonify(deleted("Journal entry deleted successfully", "entry", to_json(entry)))
