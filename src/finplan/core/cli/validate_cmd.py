"""finplan validate — check that a plan file loads cleanly."""

from __future__ import annotations

import click


@click.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Load the plan file and report what it contains."""
    from finplan.core.cli.common import load_plan_or_fail, load_settings

    settings = load_settings(ctx)
    plan = load_plan_or_fail(settings.forecast.input)

    click.echo(
        f"{settings.forecast.input}: {len(plan.accounts.paths())} accounts, "
        f"{len(plan.transfer_rules)} transfer rules, {len(plan.interest_rules)} interest rules"
    )
    for path, unknown in plan.unresolved_references().items():
        click.echo(f"  warning: {path} refers to missing accounts: {', '.join(unknown)}")
