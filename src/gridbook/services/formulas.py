"""Formula evaluation over single-letter variables.

A formula such as ``"a*b-a-c"`` is evaluated by substituting each variable
with its number, checking that only arithmetic characters remain, and then
running the result through a small recursive-descent parser. The parser
understands numbers, ``+ - * /``, unary signs and parentheses; there is no
path from a stored formula to Python's ``eval``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..logging_config import get_logger
from .numbers import round_half_up

logger = get_logger(__name__)

VARIABLE_PATTERN = re.compile(r"\b[a-z]\b", re.IGNORECASE | re.ASCII)
ALLOWED_PATTERN = re.compile(r"^[0-9+\-*/().\s]+$")
TOKEN_PATTERN = re.compile(r"\s*(?:(\d+\.?\d*|\.\d+)|(.))")
MAX_NESTING = 100

INVALID_CHARACTERS = "Invalid characters in formula"
DIVISION_BY_ZERO = "Division by zero"
NOT_FINITE = "Result is not a finite number"


class FormulaError(ValueError):
    """Raised when a substituted formula cannot be evaluated."""


@dataclass(frozen=True)
class EvaluationResult:
    success: bool
    result: Optional[float]
    error: Optional[str]
    expression: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "result": self.result,
            "error": self.error,
            "expression": self.expression,
        }


def extract_variables(expression: str) -> list[str]:
    """Return the distinct single-letter variables in ``expression``, sorted.

    Matching ignores case but keeps the spelling found, so ``a`` and ``A``
    are two variables. Longer identifiers such as ``ab`` are not variables.
    """

    return sorted(set(VARIABLE_PATTERN.findall(expression or "")))


def coerce_values(variable_values: Mapping[str, Any]) -> dict[str, float]:
    """Keep only the bindings that hold a finite number.

    Numeric strings are accepted; anything else is dropped, which later
    surfaces as an invalid-character failure for formulas that use it.
    """

    context: dict[str, float] = {}
    for key, raw in (variable_values or {}).items():
        if not key or isinstance(raw, bool) or raw is None:
            continue
        try:
            value = float(raw.strip() if isinstance(raw, str) else raw)
        except (TypeError, ValueError, OverflowError):
            continue
        if math.isfinite(value):
            context[str(key)] = value
    return context


def format_number(value: float) -> str:
    """Render a float in plain decimal notation, never with an exponent."""

    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def substitute(expression: str, values: Mapping[str, float]) -> str:
    """Replace whole-word occurrences of each variable with its number."""

    for key, value in values.items():
        rendered = format_number(value)
        expression = re.sub(
            rf"\b{re.escape(key)}\b", lambda _match: rendered, expression, flags=re.ASCII
        )
    return expression


def _tokenize(source: str) -> list[str]:
    tokens: list[str] = []
    position = 0
    stripped_end = len(source.rstrip())
    while position < stripped_end:
        match = TOKEN_PATTERN.match(source, position)
        if match is None:  # pragma: no cover - the pattern matches any character
            raise FormulaError("Invalid formula")
        number, symbol = match.groups()
        if number is not None:
            tokens.append(number)
        elif symbol in "+-*/()":
            tokens.append(symbol)
        else:
            raise FormulaError(f"Unexpected character {symbol!r}")
        position = match.end()
    return tokens


class _Parser:
    """Recursive-descent evaluator for the arithmetic grammar.

    expr   := term (("+" | "-") term)*
    term   := unary (("*" | "/") unary)*
    unary  := ("+" | "-") unary | atom
    atom   := NUMBER | "(" expr ")"
    """

    def __init__(self, tokens: list[str]) -> None:
        self.tokens = tokens
        self.position = 0
        self.depth = 0

    def parse(self) -> float:
        if not self.tokens:
            raise FormulaError("Formula is empty")
        value = self._expr()
        if self.position != len(self.tokens):
            raise FormulaError(f"Unexpected token {self.tokens[self.position]!r}")
        return value

    def _peek(self) -> Optional[str]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _advance(self) -> str:
        token = self._peek()
        if token is None:
            raise FormulaError("Unexpected end of formula")
        self.position += 1
        return token

    def _expr(self) -> float:
        value = self._term()
        while self._peek() in ("+", "-"):
            operator = self._advance()
            right = self._term()
            value = value + right if operator == "+" else value - right
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._peek() in ("*", "/"):
            operator = self._advance()
            right = self._unary()
            if operator == "*":
                value = value * right
            elif right == 0:
                raise FormulaError(DIVISION_BY_ZERO)
            else:
                value = value / right
        return value

    def _unary(self) -> float:
        if self._peek() in ("+", "-"):
            operator = self._advance()
            self._enter()
            try:
                operand = self._unary()
            finally:
                self.depth -= 1
            return -operand if operator == "-" else operand
        return self._atom()

    def _atom(self) -> float:
        token = self._advance()
        if token == "(":
            self._enter()
            try:
                value = self._expr()
            finally:
                self.depth -= 1
            if self._advance() != ")":
                raise FormulaError("Missing closing parenthesis")
            return value
        if token in "+-*/)":
            raise FormulaError(f"Unexpected token {token!r}")
        return float(token)

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise FormulaError("Formula is nested too deeply")


def evaluate_arithmetic(source: str) -> float:
    """Evaluate a variable-free arithmetic string."""

    value = _Parser(_tokenize(source)).parse()
    if not math.isfinite(value):
        raise FormulaError(NOT_FINITE)
    return value


def evaluate(expression: str, variable_values: Mapping[str, Any]) -> EvaluationResult:
    """Substitute ``variable_values`` into ``expression`` and compute it.

    Failures never raise; they come back with ``success=False`` and a
    readable ``error``. Division by zero and results that overflow to
    infinity are failures rather than non-finite numbers.
    """

    substituted = substitute(expression or "", coerce_values(variable_values))
    if not ALLOWED_PATTERN.match(substituted):
        return EvaluationResult(False, None, INVALID_CHARACTERS, substituted)
    try:
        value = evaluate_arithmetic(substituted)
    except FormulaError as exc:
        logger.info("Formula evaluation failed: %s", exc, extra={"expression": substituted})
        return EvaluationResult(False, None, str(exc), substituted)
    return EvaluationResult(True, round_half_up(value), None, substituted)


__all__ = [
    "EvaluationResult",
    "FormulaError",
    "coerce_values",
    "evaluate",
    "evaluate_arithmetic",
    "extract_variables",
    "format_number",
    "substitute",
]
