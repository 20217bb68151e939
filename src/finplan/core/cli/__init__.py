"""Finplan CLI — entry point for forecast, validate and accounts commands."""

import click

from finplan import __version__


@click.group()
@click.version_option(version=__version__, package_name="finplan")
@click.option("-f", "--input", "input_file", type=click.Path(dir_okay=False), help="Sets the plan file to use.")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="Config file (YAML or JSON).")
@click.option("--log-level", help="Minimum log level (TRACE, DEBUG, INFO, WARNING, ERROR).")
@click.pass_context
def main(ctx: click.Context, input_file: str | None, config_file: str | None, log_level: str | None) -> None:
    """Finplan — helps you plan your financial future."""
    ctx.ensure_object(dict)
    ctx.obj.update(input_file=input_file, config_file=config_file, log_level=log_level)


# Register subcommands
from .accounts_cmd import accounts
from .forecast_cmd import forecast
from .validate_cmd import validate

main.add_command(forecast)
main.add_command(validate)
main.add_command(accounts)
