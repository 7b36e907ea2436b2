"""Income/expense summaries."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable

from ..models.finance import FinanceRecord
from .numbers import round_half_up

INCOME = "income"
EXPENSE = "expense"


@dataclass(frozen=True)
class FinanceSummary:
    income: float
    expenses: float
    balance: float
    transaction_count: int

    def to_dict(self) -> dict:
        return {
            "income": self.income,
            "expenses": self.expenses,
            "balance": self.balance,
            "transaction_count": self.transaction_count,
        }


def summarize(records: Iterable[FinanceRecord]) -> FinanceSummary:
    """Total income and expenses, rounded to cents."""

    income = 0.0
    expenses = 0.0
    count = 0
    for record in records:
        count += 1
        if record.type == INCOME:
            income += record.amount
        elif record.type == EXPENSE:
            expenses += record.amount
    return FinanceSummary(
        income=round_half_up(income),
        expenses=round_half_up(expenses),
        balance=round_half_up(income - expenses),
        transaction_count=count,
    )


def month_bounds(today: date) -> tuple[datetime, datetime]:
    """First and last instant of the month containing ``today``."""

    last_day = calendar.monthrange(today.year, today.month)[1]
    start = datetime.combine(today.replace(day=1), time.min)
    end = datetime.combine(today.replace(day=last_day), time.max)
    return start, end


__all__ = ["EXPENSE", "INCOME", "FinanceSummary", "month_bounds", "summarize"]
