"""Background scheduler creating each day's habit tracking entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .logging_config import get_logger

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger(__name__)

DAILY_ENTRIES_JOB_ID = "daily_habit_entries"


class GridbookScheduler:
    """Runs daily entry generation for every user at a configured hour."""

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.scheduler: Optional[BackgroundScheduler] = None

    def start(self) -> None:
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler()
        hour = self.ctx.config.DAILY_ENTRIES_HOUR
        self.scheduler.add_job(
            func=self.run_daily_entries,
            trigger=CronTrigger(hour=hour, minute=0),
            id=DAILY_ENTRIES_JOB_ID,
            name="Create daily habit entries",
            replace_existing=True,
            # Catch up once if the process was down at the scheduled time.
            coalesce=True,
            misfire_grace_time=3600,
        )
        self.scheduler.start()
        logger.info("Scheduled daily habit entries at %02d:00", hour)

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def run_daily_entries(self) -> None:
        try:
            result = self.ctx.tracker.generate_for_all()
        except Exception as exc:
            logger.error("Daily entry generation failed: %s", exc, exc_info=True)
            return
        logger.info(
            "Daily entry generation finished",
            extra={"created_count": len(result.created), "skipped_count": len(result.skipped)},
        )
