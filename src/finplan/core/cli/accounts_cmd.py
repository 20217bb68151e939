"""finplan accounts — list the plan's accounts and their starting values."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from finplan.core.exceptions import FinplanError


@click.command()
@click.pass_context
def accounts(ctx: click.Context) -> None:
    """Show every account in the plan with its starting balance."""
    from finplan.core.cli.common import load_plan_or_fail, load_settings
    from finplan.ledger.accounts import DerivedAccount

    settings = load_settings(ctx)
    plan = load_plan_or_fail(settings.forecast.input)

    try:
        balances = plan.accounts.eval()
    except FinplanError as e:
        raise click.ClickException(str(e)) from e

    table = Table()
    table.add_column("Account")
    table.add_column("Balance", justify="right")
    table.add_column("Formula")
    for path, account in plan.accounts.items():
        formula = str(account.expression) if isinstance(account, DerivedAccount) else ""
        table.add_row(path, str(balances[path]), formula)

    Console().print(table)
