"""Tests for the restricted arithmetic formula evaluator."""

from __future__ import annotations

import pytest

from gridbook.services.formulas import (
    DIVISION_BY_ZERO,
    INVALID_CHARACTERS,
    NOT_FINITE,
    FormulaError,
    coerce_values,
    evaluate,
    evaluate_arithmetic,
    extract_variables,
    format_number,
    substitute,
)


class TestExtractVariables:
    def test_distinct_sorted(self):
        assert extract_variables("a*b-a-c") == ["a", "b", "c"]

    def test_multi_letter_words_are_not_variables(self):
        assert extract_variables("ab + x * total") == ["x"]

    def test_case_is_preserved(self):
        assert extract_variables("A + a") == ["A", "a"]

    def test_empty(self):
        assert extract_variables("") == []


class TestSubstitution:
    def test_whole_word_only(self):
        assert substitute("a + ab", {"a": 2.0}) == "2 + ab"

    def test_numbers_render_as_written(self):
        assert format_number(10.0) == "10"
        assert format_number(2.5) == "2.5"
        assert format_number(-3.0) == "-3"

    @pytest.mark.parametrize(
        ("value", "rendered"),
        [
            (0.00001, "0.00001"),
            (1e16, "10000000000000000"),
            (-0.25, "-0.25"),
            (1e-7, "0.0000001"),
        ],
    )
    def test_numbers_never_use_exponent_notation(self, value, rendered):
        assert format_number(value) == rendered

    def test_coercion_drops_non_numbers(self):
        values = coerce_values({"a": "4", "b": "abc", "c": True, "d": None, "e": 1.5})

        assert values == {"a": 4.0, "e": 1.5}

    def test_coercion_drops_non_finite(self):
        assert coerce_values({"a": float("inf"), "b": "nan"}) == {}

    def test_coercion_drops_integers_too_large_for_a_float(self):
        assert coerce_values({"a": 10**400, "b": 2}) == {"b": 2.0}


class TestEvaluate:
    def test_reference_formula(self):
        outcome = evaluate("a*b-a-c", {"a": 10, "b": 5, "c": 3})

        assert outcome.success is True
        assert outcome.expression == "10*5-10-3"
        assert outcome.result == 37
        assert outcome.error is None

    def test_injection_is_rejected_by_character_check(self):
        outcome = evaluate("a; DROP TABLE x", {"a": 1, "x": 2})

        assert outcome.success is False
        assert outcome.result is None
        assert outcome.error == INVALID_CHARACTERS

    def test_python_names_never_reach_an_interpreter(self):
        outcome = evaluate("__import__('os')", {})

        assert outcome.success is False
        assert outcome.error == INVALID_CHARACTERS

    def test_unbound_variable_fails_character_check(self):
        outcome = evaluate("a + b", {"a": 1, "b": "not a number"})

        assert outcome.error == INVALID_CHARACTERS

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("2+3*4", 14),
            ("(2+3)*4", 20),
            ("10/4", 2.5),
            ("10-4-3", 3),
            ("16/4/2", 2),
            ("-2+5", 3),
            ("2--3", 5),
            ("-(1+2)*3", -9),
            (" 1 + 2 ", 3),
            (".5*4", 2),
            ("0.1+0.2", 0.3),
            ("1/3", 0.33),
            ("2/3", 0.67),
        ],
    )
    def test_arithmetic(self, expression, expected):
        outcome = evaluate(expression, {})

        assert outcome.success is True
        assert outcome.result == expected

    def test_negative_binding(self):
        outcome = evaluate("2-a", {"a": -3})

        assert outcome.expression == "2--3"
        assert outcome.result == 5

    @pytest.mark.parametrize(
        ("expression", "values", "substituted", "expected"),
        [
            ("a*100000", {"a": 0.00001}, "0.00001*100000", 1.0),
            ("a/10", {"a": 10**16}, "10000000000000000/10", 1e15),
            ("a*2", {"a": -0.25}, "-0.25*2", -0.5),
            ("a*b", {"a": 1e20, "b": 1e20}, "100000000000000000000*100000000000000000000", 1e40),
        ],
    )
    def test_edge_bindings(self, expression, values, substituted, expected):
        outcome = evaluate(expression, values)

        assert outcome.expression == substituted
        assert outcome.success is True
        assert outcome.result == expected

    def test_unrepresentable_binding_is_dropped(self):
        outcome = evaluate("a+1", {"a": 10**400})

        assert outcome.success is False
        assert outcome.error == INVALID_CHARACTERS
        assert outcome.expression == "a+1"
        assert outcome.result is None

    def test_division_by_zero_is_an_error(self):
        outcome = evaluate("a/(b-b)", {"a": 1, "b": 2})

        assert outcome.success is False
        assert outcome.error == DIVISION_BY_ZERO

    def test_overflow_is_an_error(self):
        huge = "9" * 400

        outcome = evaluate(f"{huge}*2", {})

        assert outcome.success is False
        assert outcome.error == NOT_FINITE

    @pytest.mark.parametrize("expression", ["(1+2", "1+", "*2", "1 2", "()", "1+2)"])
    def test_malformed(self, expression):
        outcome = evaluate(expression, {})

        assert outcome.success is False
        assert outcome.error

    def test_blank_formula(self):
        assert evaluate("", {}).error == INVALID_CHARACTERS
        assert evaluate("   ", {}).error == "Formula is empty"

    def test_deep_nesting_is_refused(self):
        expression = "(" * 200 + "1" + ")" * 200

        outcome = evaluate(expression, {})

        assert outcome.success is False
        assert "nested" in outcome.error

    def test_to_dict(self):
        assert evaluate("1+1", {}).to_dict() == {
            "success": True,
            "result": 2,
            "error": None,
            "expression": "1+1",
        }


def test_evaluate_arithmetic_raises():
    with pytest.raises(FormulaError):
        evaluate_arithmetic("1/0")
