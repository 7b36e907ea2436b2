"""Tests for the finance and sleep summary helpers."""

from __future__ import annotations

from datetime import date, datetime

from gridbook.models import FinanceRecord, SleepEntry
from gridbook.services.finance import month_bounds, summarize
from gridbook.services.sleep import week_bounds, weekly_stats


def _record(kind: str, amount: float) -> FinanceRecord:
    return FinanceRecord(user_id=1, type=kind, category="x", amount=amount, date=datetime(2024, 2, 1))


def test_summarize_rounds_to_cents():
    summary = summarize([_record("income", 0.1), _record("income", 0.2), _record("expense", 0.05)])

    assert summary.income == 0.3
    assert summary.expenses == 0.05
    assert summary.balance == 0.25
    assert summary.transaction_count == 3


def test_summarize_empty():
    assert summarize([]).to_dict() == {
        "income": 0.0,
        "expenses": 0.0,
        "balance": 0.0,
        "transaction_count": 0,
    }


def test_month_bounds_leap_february():
    start, end = month_bounds(date(2024, 2, 14))

    assert start == datetime(2024, 2, 1)
    assert end.date() == date(2024, 2, 29)
    assert end.hour == 23


def test_week_bounds():
    assert week_bounds(date(2024, 3, 7)) == (date(2024, 3, 1), date(2024, 3, 7))


def _night(hours: float) -> SleepEntry:
    return SleepEntry(
        user_id=1, date=date(2024, 3, 1), sleep_time="23:00", wake_time="07:00", duration=hours
    )


def test_weekly_stats_green_at_target():
    stats = weekly_stats([_night(8), _night(8)])

    assert stats.average == 8
    assert stats.status == "green"


def test_weekly_stats_red_below_target():
    stats = weekly_stats([_night(7), _night(8), _night(8.5)])

    assert stats.average == 7.83
    assert stats.total_hours == 23.5
    assert stats.status == "red"


def test_weekly_stats_without_entries():
    assert weekly_stats([]).to_dict() == {
        "average": 0.0,
        "total_hours": 0.0,
        "days": 0,
        "status": "red",
    }
