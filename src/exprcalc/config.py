"""
CLI configuration.

Parses the [exprcalc] section from exprcalc.toml. The core pipeline takes
no configuration; these settings only shape how the command line formats
results and logs.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONFIG_FILE = "exprcalc.toml"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class CalcConfig(BaseModel):
    """Settings for the exprcalc command line."""

    model_config = ConfigDict(extra="forbid")

    precision: int | None = Field(
        default=None,
        ge=1,
        le=17,
        description="Significant digits in printed results; unset prints the shortest repr",
    )
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.upper()
        return v

    def format_result(self, value: float) -> str:
        """Render a result for display."""
        if self.precision is None:
            return repr(value)
        return f"{value:.{self.precision}g}"


def load_config(toml_path: Path) -> CalcConfig:
    """
    Load configuration from an exprcalc.toml file.

    Args:
        toml_path: Path to the TOML file

    Returns:
        CalcConfig with parsed values, or defaults if the file does not exist

    Raises:
        ConfigError: If the file is not valid TOML or a setting is invalid
    """
    if not toml_path.exists():
        return CalcConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{toml_path}: {e}") from e

    section = data.get("exprcalc", {})
    if not section:
        return CalcConfig()

    try:
        return CalcConfig.model_validate(section)
    except ValueError as e:
        raise ConfigError(f"{toml_path}: {e}") from e
