"""Habit and daily tracking routes."""

from __future__ import annotations

from flask import jsonify

from ...context import get_context
from ...errors import NotFoundError
from ...models._time import utcnow
from ...models.habit import Habit
from ...security import current_user_id, login_required
from ...serialization import to_json, to_json_list
from ..common import deleted, load_form
from . import bp
from .forms import HabitForm, TrackingUpdateForm


@bp.get("/")
@login_required
def list_habits():
    """All habits with consistency and the last five days."""

    ctx = get_context()
    habits = ctx.habits.list_for_user(user_id=current_user_id())
    return jsonify({"habits": ctx.tracker.describe_many(habits)})


@bp.post("/")
@login_required
def create_habit():
    form = load_form(HabitForm)
    ctx = get_context()
    habit = Habit(**form.changes(), start_date=form.start_date or utcnow())
    habit = ctx.habits.create(habit, user_id=current_user_id())
    return (
        jsonify({"message": "Habit created successfully", "habit": ctx.tracker.describe(habit)}),
        201,
    )


@bp.get("/<int:habit_id>")
@login_required
def get_habit(habit_id: int):
    ctx = get_context()
    habit = ctx.tracker.get_habit(habit_id, user_id=current_user_id())
    return jsonify({"habit": ctx.tracker.describe(habit)})


@bp.put("/<int:habit_id>")
@login_required
def update_habit(habit_id: int):
    """Replace the editable fields; the start date never moves."""

    form = load_form(HabitForm)
    ctx = get_context()
    habit = ctx.habits.update(habit_id, form.changes(), user_id=current_user_id())
    if habit is None:
        raise NotFoundError("Habit not found")
    return jsonify({"message": "Habit updated successfully", "habit": ctx.tracker.describe(habit)})


@bp.delete("/<int:habit_id>")
@login_required
def delete_habit(habit_id: int):
    habit = get_context().habits.delete(habit_id, user_id=current_user_id())
    if habit is None:
        raise NotFoundError("Habit not found")
    return jsonify(deleted("Habit deleted successfully", "habit", to_json(habit)))


@bp.get("/<int:habit_id>/tracking")
@login_required
def habit_history(habit_id: int):
    entries = get_context().tracker.history(habit_id, user_id=current_user_id())
    return jsonify({"tracking": to_json_list(entries)})


@bp.get("/tracking")
@login_required
def today_tracking():
    """Today's entries, each with its habit's progress."""

    entries = get_context().tracker.today_entries(current_user_id())
    return jsonify({"tracking": entries})


@bp.post("/tracking")
@login_required
def create_daily_entries():
    """Create today's missing entries for the caller's running habits."""

    result = get_context().tracker.generate_for_user(current_user_id())
    return jsonify({"message": "Daily entries created", **result.to_dict()})


@bp.put("/tracking/<int:entry_id>")
@login_required
def update_tracking(entry_id: int):
    form = load_form(TrackingUpdateForm)
    entry = get_context().tracker.mark(entry_id, form.is_done, user_id=current_user_id())
    return jsonify({"message": "Tracking updated successfully", "tracking": to_json(entry)})
