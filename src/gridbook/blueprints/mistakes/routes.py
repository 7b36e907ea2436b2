"""Mistake log routes."""

from __future__ import annotations

from flask import jsonify

from ...context import get_context
from ...errors import NotFoundError
from ...models.mistake import Mistake
from ...security import current_user_id, login_required
from ...serialization import to_json, to_json_list
from ..common import deleted, load_form
from . import bp
from .forms import MistakeForm


@bp.get("/")
@login_required
def list_mistakes():
    mistakes = get_context().mistakes.list_for_user(user_id=current_user_id())
    return jsonify({"mistakes": to_json_list(mistakes)})


@bp.post("/")
@login_required
def create_mistake():
    form = load_form(MistakeForm)
    mistake = get_context().mistakes.create(Mistake(**form.model_dump()), user_id=current_user_id())
    return jsonify({"message": "Mistake logged successfully", "mistake": to_json(mistake)}), 201


@bp.get("/<int:mistake_id>")
@login_required
def get_mistake(mistake_id: int):
    mistake = get_context().mistakes.get(mistake_id, user_id=current_user_id())
    if mistake is None:
        raise NotFoundError("Mistake not found")
    return jsonify({"mistake": to_json(mistake)})


@bp.put("/<int:mistake_id>")
@login_required
def update_mistake(mistake_id: int):
    form = load_form(MistakeForm)
    mistake = get_context().mistakes.update(mistake_id, form.model_dump(), user_id=current_user_id())
    if mistake is None:
        raise NotFoundError("Mistake not found")
    return jsonify({"message": "Mistake updated successfully", "mistake": to_json(mistake)})


@bp.delete("/<int:mistake_id>")
@login_required
def delete_mistake(mistake_id: int):
    mistake = get_context().mistakes.delete(mistake_id, user_id=current_user_id())
    if mistake is None:
        raise NotFoundError("Mistake not found")
    return jsonify(deleted("Mistake deleted successfully", "mistake", to_json(mistake)))
