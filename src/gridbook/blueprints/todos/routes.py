"""Todo routes."""

from __future__ import annotations

from flask import jsonify

from ...context import get_context
from ...errors import NotFoundError
from ...models.todo import Todo
from ...security import current_user_id, login_required
from ...serialization import to_json, to_json_list
from ..common import deleted, load_form
from . import bp
from .forms import TodoForm, TodoUpdateForm

LIST_LIMIT = 200


@bp.get("/")
@login_required
def list_todos():
    todos = get_context().todos.list_for_user(user_id=current_user_id(), limit=LIST_LIMIT)
    return jsonify({"todos": to_json_list(todos)})


@bp.post("/")
@login_required
def create_todo():
    form = load_form(TodoForm)
    todo = get_context().todos.create(Todo(**form.fields()), user_id=current_user_id())
    return jsonify({"message": "Todo created successfully", "todo": to_json(todo)}), 201


@bp.get("/<int:todo_id>")
@login_required
def get_todo(todo_id: int):
    todo = get_context().todos.get(todo_id, user_id=current_user_id())
    if todo is None:
        raise NotFoundError("Todo not found")
    return jsonify({"todo": to_json(todo)})


@bp.put("/<int:todo_id>")
@login_required
def update_todo(todo_id: int):
    form = load_form(TodoUpdateForm)
    todo = get_context().todos.update(todo_id, form.changes(), user_id=current_user_id())
    if todo is None:
        raise NotFoundError("Todo not found")
    return jsonify({"message": "Todo updated successfully", "todo": to_json(todo)})


@bp.delete("/<int:todo_id>")
@login_required
def delete_todo(todo_id: int):
    todo = get_context().todos.delete(todo_id, user_id=current_user_id())
    if todo is None:
        raise NotFoundError("Todo not found")
    return jsonify(deleted("Todo deleted successfully", "todo", to_json(todo)))
