"""Rolling sleep statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from ..models.sleep import SleepEntry
from .numbers import round_half_up

TARGET_HOURS = 8
WEEK_DAYS = 7


@dataclass(frozen=True)
class SleepStats:
    average: float
    total_hours: float
    days: int
    status: str

    def to_dict(self) -> dict:
        return {
            "average": self.average,
            "total_hours": self.total_hours,
            "days": self.days,
            "status": self.status,
        }


def week_bounds(today: date) -> tuple[date, date]:
    """The seven days ending at ``today``, inclusive."""

    return today - timedelta(days=WEEK_DAYS - 1), today


def weekly_stats(entries: Sequence[SleepEntry]) -> SleepStats:
    """Average hours over the logged nights; ``green`` at or above target."""

    if not entries:
        return SleepStats(average=0.0, total_hours=0.0, days=0, status="red")
    total = sum(entry.duration for entry in entries)
    average = total / len(entries)
    return SleepStats(
        average=round_half_up(average),
        total_hours=round_half_up(total),
        days=len(entries),
        status="green" if average >= TARGET_HOURS else "red",
    )


__all__ = ["SleepStats", "TARGET_HOURS", "week_bounds", "weekly_stats"]
