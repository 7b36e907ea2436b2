"""Finance routes."""

from __future__ import annotations

from flask import jsonify

from ...context import get_context
from ...errors import NotFoundError
from ...models._time import utctoday
from ...models.finance import FinanceRecord
from ...security import current_user_id, login_required
from ...serialization import to_json, to_json_list
from ...services.finance import month_bounds, summarize
from ..common import deleted, load_form
from . import bp
from .forms import FinanceForm

LIST_LIMIT = 200


@bp.get("/")
@login_required
def list_transactions():
    """Recent transactions with this month's and all-time totals."""

    repo = get_context().finance
    user_id = current_user_id()
    start, end = month_bounds(utctoday())
    return jsonify(
        {
            "transactions": to_json_list(repo.list_for_user(user_id=user_id, limit=LIST_LIMIT)),
            "monthly_summary": summarize(repo.list_between(start, end, user_id=user_id)).to_dict(),
            "total_summary": summarize(repo.list_for_user(user_id=user_id)).to_dict(),
        }
    )


@bp.post("/")
@login_required
def create_transaction():
    form = load_form(FinanceForm)
    record = get_context().finance.create(
        FinanceRecord(**form.model_dump()), user_id=current_user_id()
    )
    return jsonify({"message": "Transaction created successfully", "transaction": to_json(record)}), 201


@bp.get("/<int:record_id>")
@login_required
def get_transaction(record_id: int):
    record = get_context().finance.get(record_id, user_id=current_user_id())
    if record is None:
        raise NotFoundError("Transaction not found")
    return jsonify({"transaction": to_json(record)})


@bp.put("/<int:record_id>")
@login_required
def update_transaction(record_id: int):
    form = load_form(FinanceForm)
    record = get_context().finance.update(record_id, form.model_dump(), user_id=current_user_id())
    if record is None:
        raise NotFoundError("Transaction not found")
    return jsonify({"message": "Transaction updated successfully", "transaction": to_json(record)})


@bp.delete("/<int:record_id>")
@login_required
def delete_transaction(record_id: int):
    record = get_context().finance.delete(record_id, user_id=current_user_id())
    if record is None:
        raise NotFoundError("Transaction not found")
    return jsonify(deleted("Transaction deleted successfully", "transaction", to_json(record)))
