"""Application error types and their JSON rendering."""

from __future__ import annotations

from typing import Any

from flask import Flask, jsonify
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger(__name__)


class GridbookError(Exception):
    """Base exception for all Gridbook errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(GridbookError):
    """Raised when user input fails validation."""

    status_code = 400

    def __init__(self, message: str, details: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.details:
            payload["details"] = self.details
        return payload


class AuthenticationError(GridbookError):
    """Raised when a request carries no usable credential."""

    status_code = 401


class NotFoundError(GridbookError):
    """Raised when an identifier does not resolve to a record the user owns."""

    status_code = 404


class DuplicateEntryError(GridbookError):
    """Raised by repositories when a uniqueness constraint rejects a write."""

    status_code = 409


class MailDeliveryError(GridbookError):
    """Raised when the outbound mail sender reports a failure."""

    status_code = 500


def pydantic_details(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into ``{field: [messages]}``."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        message = error.get("msg", "Invalid value")
        # Custom validators surface as "Value error, <text>".
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        structured.setdefault(key, []).append(message)
    return structured


def register_error_handlers(app: Flask) -> None:
    """Render application errors as ``{"error": ...}`` JSON bodies."""

    @app.errorhandler(GridbookError)
    def _handle_gridbook_error(exc: GridbookError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(PydanticValidationError)
    def _handle_form_error(exc: PydanticValidationError):
        details = pydantic_details(exc)
        message = ", ".join(msg for messages in details.values() for msg in messages)
        return jsonify({"error": message or "Invalid input", "details": details}), 400

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code or 500

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.error("Unhandled error: %s", exc, exc_info=True)
        return jsonify({"error": "Internal server error"}), 500
