"""Shared setup logic for CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from finplan.core.exceptions import FinplanError

CONFIG_PATH = Path.home() / ".finplan" / "config.yaml"


def load_settings(ctx: click.Context):
    """Load config, apply CLI overrides, set up logging; return the validated settings."""
    from finplan.core.config import Config
    from finplan.core.utils.logging import setup_logging

    options = ctx.find_root().obj or {}
    config = Config(config_file=options.get("config_file") or str(CONFIG_PATH))
    if options.get("input_file"):
        config.set("forecast.input", options["input_file"])
    if options.get("log_level"):
        config.set("logging.level", options["log_level"])

    try:
        settings = config.validated()
    except FinplanError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(settings.logging.level, str(settings.logging.file) if settings.logging.file else None)
    return settings


def load_plan_or_fail(path: Path):
    """Load and validate the plan at *path*, turning failures into click errors."""
    from finplan.plan import load_plan

    try:
        plan = load_plan(path)
        plan.validate()
    except FinplanError as e:
        raise click.ClickException(str(e)) from e
    return plan


def is_hidden(path: str, hidden_prefixes: list[str]) -> bool:
    """True if the account path sits under one of the hidden top-level groups."""
    head = path.split(":", 1)[0]
    return head in hidden_prefixes
