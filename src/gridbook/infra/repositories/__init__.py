"""SQLModel repository implementations."""

from .habit import SQLModelHabitRepository
from .record import SQLModelRecordRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelRecordRepository",
    "SQLModelUserRepository",
]
