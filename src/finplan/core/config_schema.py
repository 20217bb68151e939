"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``. Call
``Config.validated()`` to obtain a typed, validated ``FinplanConfig``
instance. Dict-based ``Config.get`` access keeps working unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ForecastConfig(BaseModel):
    """Defaults for the ``forecast`` command."""

    input: Path = Path("input.yaml")
    years: int = 25
    hidden_prefixes: list[str] = ["income", "equity"]

    @field_validator("input", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        return v

    @field_validator("years")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"years must be at least 1, got {v}")
        return v

    @field_validator("hidden_prefixes", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> Any:
        # env vars arrive as "income,equity"
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v


class LoggingConfig(BaseModel):
    """Log level and optional log file."""

    level: str = "WARNING"
    file: Path | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of {list(_LOG_LEVELS)}")
        return level


class FinplanConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    forecast: ForecastConfig = ForecastConfig()
    logging: LoggingConfig = LoggingConfig()
