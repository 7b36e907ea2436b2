"""Sleep blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("sleep", __name__, url_prefix="/api/sleep")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
