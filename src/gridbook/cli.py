"""Flask CLI commands for Gridbook."""

from __future__ import annotations

from datetime import date

import click

from .services.formulas import evaluate, format_number


def _parse_binding(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected NAME=VALUE, got {raw!r}")
    return name.strip(), value.strip()


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("gridbook-daily-entries")
    @click.option(
        "--date",
        "day",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        default=None,
        help="Day to create entries for (defaults to today).",
    )
    def gridbook_daily_entries(day) -> None:
        """Create missing habit tracking entries for every user."""

        from .context import get_context

        target: date | None = day.date() if day else None
        result = get_context().tracker.generate_for_all(day=target)
        click.echo(
            f"{result.target_date.isoformat()}: created {len(result.created)}, "
            f"skipped {len(result.skipped)}"
        )
        for item in result.skipped:
            click.echo(f"  skipped habit #{item.habit_id} ({item.habit_name}): {item.reason}")

    @app.cli.command("gridbook-eval")
    @click.argument("expression")
    @click.argument("bindings", nargs=-1)
    def gridbook_eval(expression: str, bindings: tuple[str, ...]) -> None:
        """Evaluate EXPRESSION with NAME=VALUE bindings, e.g. "a*b" a=2 b=3."""

        values = dict(_parse_binding(raw) for raw in bindings)
        outcome = evaluate(expression, values)
        if outcome.success:
            click.echo(format_number(outcome.result))
        else:
            raise click.ClickException(outcome.error or "Invalid formula")
