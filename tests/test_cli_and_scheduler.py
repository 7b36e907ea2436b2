"""Tests for the Flask CLI commands and the daily scheduler."""

from __future__ import annotations

from datetime import datetime

from gridbook.models import Habit
from gridbook.models._time import utctoday
from gridbook.scheduler import DAILY_ENTRIES_JOB_ID, GridbookScheduler


def _add_habit(ctx, user, start: datetime) -> Habit:
    return ctx.habits.create(
        Habit(name="Walk", reason="Health", duration="1month", reward="Tea", start_date=start),
        user_id=user.id,
    )


def test_eval_command(app):
    result = app.test_cli_runner().invoke(args=["gridbook-eval", "a*b-a-c", "a=10", "b=5", "c=3"])

    assert result.exit_code == 0
    assert result.output.strip() == "37"


def test_eval_command_reports_errors(app):
    result = app.test_cli_runner().invoke(args=["gridbook-eval", "a/0", "a=1"])

    assert result.exit_code != 0
    assert "Division by zero" in result.output


def test_eval_command_rejects_bad_binding(app):
    result = app.test_cli_runner().invoke(args=["gridbook-eval", "a", "a"])

    assert result.exit_code != 0


def test_daily_entries_command(app, ctx, api_user):
    habit = _add_habit(ctx, api_user, datetime(2024, 1, 1))
    runner = app.test_cli_runner()

    first = runner.invoke(args=["gridbook-daily-entries", "--date", "2024-01-10"])
    second = runner.invoke(args=["gridbook-daily-entries", "--date", "2024-01-10"])

    assert first.exit_code == 0
    assert "created 1, skipped 0" in first.output
    assert "created 0, skipped 1" in second.output
    assert "entry already exists" in second.output
    assert len(ctx.habits.history(habit.id, user_id=api_user.id)) == 1


def test_scheduler_job_creates_todays_entries(ctx, api_user):
    habit = _add_habit(ctx, api_user, datetime.combine(utctoday(), datetime.min.time()))

    GridbookScheduler(ctx).run_daily_entries()

    entries = ctx.habits.entries_for_day(habit_ids=[habit.id], day=utctoday())
    assert len(entries) == 1
    assert entries[0].is_done is False


def test_scheduler_registers_cron_job(ctx):
    scheduler = GridbookScheduler(ctx)
    scheduler.start()
    try:
        job = scheduler.scheduler.get_job(DAILY_ENTRIES_JOB_ID)
        assert job is not None
        assert "hour='0'" in str(job.trigger)
    finally:
        scheduler.stop()
    assert scheduler.scheduler is None


def test_scheduler_logs_failures(ctx, monkeypatch, caplog):
    def _boom(**_kwargs):
        raise RuntimeError("database offline")

    monkeypatch.setattr(ctx.tracker, "generate_for_all", _boom)

    GridbookScheduler(ctx).run_daily_entries()

    assert "Daily entry generation failed" in caplog.text
