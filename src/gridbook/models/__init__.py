"""SQLModel table exports."""

from .finance import FinanceRecord
from .formula import Formula
from .habit import DURATION_DAYS, Habit, HabitDuration, HabitTrackingEntry
from .journal import JournalEntry
from .mistake import Mistake
from .sleep import SleepEntry
from .todo import Todo
from .user import User

__all__ = [
    "DURATION_DAYS",
    "FinanceRecord",
    "Formula",
    "Habit",
    "HabitDuration",
    "HabitTrackingEntry",
    "JournalEntry",
    "Mistake",
    "SleepEntry",
    "Todo",
    "User",
]
