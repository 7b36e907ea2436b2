"""Formula routes."""

from __future__ import annotations

from flask import jsonify

from ...context import get_context
from ...errors import NotFoundError
from ...logging_config import get_logger
from ...models.formula import Formula
from ...security import current_user_id, login_required
from ...serialization import to_json
from ...services.formulas import evaluate, extract_variables
from ..common import deleted, load_form
from . import bp
from .forms import EvaluateForm, ExecuteForm, FormulaForm, FormulaUpdateForm

logger = get_logger(__name__)

LIST_LIMIT = 100


def _formula_json(formula: Formula, **extra) -> dict:
    return to_json(formula, symbols=extract_variables(formula.formula), **extra)


def _get_formula(formula_id: int) -> Formula:
    formula = get_context().formulas.get(formula_id, user_id=current_user_id())
    if formula is None:
        raise NotFoundError("Formula not found")
    return formula


@bp.get("/")
@login_required
def list_formulas():
    formulas = get_context().formulas.list_for_user(user_id=current_user_id(), limit=LIST_LIMIT)
    return jsonify({"formulas": [_formula_json(formula) for formula in formulas]})


@bp.post("/")
@login_required
def create_formula():
    """Store a formula; its result is only computed on execute."""

    form = load_form(FormulaForm)
    formula = Formula(name=form.name, formula=form.formula, variables=form.variables, result=None)
    formula = get_context().formulas.create(formula, user_id=current_user_id())
    return jsonify({"message": "Formula created successfully", "formula": _formula_json(formula)}), 201


@bp.get("/<int:formula_id>")
@login_required
def get_formula(formula_id: int):
    return jsonify({"formula": _formula_json(_get_formula(formula_id))})


@bp.put("/<int:formula_id>")
@login_required
def update_formula(formula_id: int):
    """Apply a partial update and report how the stored bindings evaluate."""

    form = load_form(FormulaUpdateForm)
    changes = {**form.changes(), "result": None}
    formula = get_context().formulas.update(formula_id, changes, user_id=current_user_id())
    if formula is None:
        raise NotFoundError("Formula not found")
    calculation = evaluate(formula.formula, formula.variables)
    return jsonify(
        {
            "message": "Formula updated successfully",
            "formula": _formula_json(
                formula,
                calculated_result=calculation.result,
                calculation_error=calculation.error,
            ),
        }
    )


@bp.delete("/<int:formula_id>")
@login_required
def delete_formula(formula_id: int):
    formula = get_context().formulas.delete(formula_id, user_id=current_user_id())
    if formula is None:
        raise NotFoundError("Formula not found")
    return jsonify(deleted("Formula deleted successfully", "formula", to_json(formula)))


@bp.post("/<int:formula_id>/execute")
@login_required
def execute_formula(formula_id: int):
    """Evaluate a stored formula against the posted values.

    A successful run caches its result on the formula.
    """

    form = load_form(ExecuteForm)
    formula = _get_formula(formula_id)
    outcome = evaluate(formula.formula, form.values)
    if outcome.success:
        get_context().formulas.update(
            formula_id, {"result": outcome.result}, user_id=current_user_id()
        )
    logger.info(
        "Formula executed",
        extra={"formula_id": formula_id, "success": outcome.success},
    )
    return jsonify({"formula_id": formula_id, **outcome.to_dict()})


@bp.post("/evaluate")
@login_required
def evaluate_expression():
    """Evaluate an unsaved formula."""

    form = load_form(EvaluateForm)
    outcome = evaluate(form.formula, form.values)
    return jsonify({**outcome.to_dict(), "symbols": extract_variables(form.formula)})
