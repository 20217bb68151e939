"""finplan forecast — project account balances over the coming years."""

from __future__ import annotations

from datetime import date

import click
from rich.console import Console
from rich.table import Table

from finplan.core.exceptions import FinplanError


@click.command()
@click.argument("years", type=click.IntRange(min=1), required=False)
@click.option("--start-year", type=int, help="First checkpoint year (default: this year).")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Reference date for rules without a start date (default: today).",
)
@click.pass_context
def forecast(ctx: click.Context, years: int | None, start_year: int | None, today) -> None:
    """Calculate account values over <YEARS> years."""
    from finplan.core.cli.common import is_hidden, load_plan_or_fail, load_settings
    from finplan.plan import yearly_checkpoints

    settings = load_settings(ctx)
    plan = load_plan_or_fail(settings.forecast.input)

    reference = today.date() if today else date.today()
    years = years or settings.forecast.years
    checkpoints = yearly_checkpoints(start_year or reference.year, years)

    try:
        rows = [(checkpoint, snapshot.eval()) for checkpoint, snapshot in plan.history(checkpoints, reference)]
    except FinplanError as e:
        raise click.ClickException(f"simulation failed: {e}") from e

    columns: list[str] = []
    for _, balances in rows:
        for path in balances:
            if path not in columns and not is_hidden(path, settings.forecast.hidden_prefixes):
                columns.append(path)

    table = Table(title=f"Forecast over {years} years")
    table.add_column("Date", no_wrap=True)
    for path in columns:
        table.add_column(path, justify="right")
    for checkpoint, balances in rows:
        table.add_row(str(checkpoint), *(str(balances[p]) if p in balances else "" for p in columns))

    Console().print(table)
