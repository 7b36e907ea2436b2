"""Blueprint exports."""

from . import auth, finance, formulas, habits, journal, mistakes, sleep, todos

__all__ = [
    "auth",
    "finance",
    "formulas",
    "habits",
    "journal",
    "mistakes",
    "sleep",
    "todos",
]
