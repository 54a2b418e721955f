"""
Central configuration management using Pydantic settings.

Provides type-safe configuration with validation, environment variable
support, and YAML configuration file loading.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stock_indicators.core.data_types import UnsupportedMovingAveragePolicy
from stock_indicators.core.exceptions import ConfigParseError


# Base paths
CONFIG_DIR = Path(__file__).resolve().parent

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class IndicatorSettings(BaseModel):
    """Indicator computation settings."""

    unsupported_moving_average: UnsupportedMovingAveragePolicy = Field(
        default=UnsupportedMovingAveragePolicy.SILENT_EMPTY,
        description="Behaviour for smoothing kinds with no algorithm (silent_empty or raise)",
    )
    trace_series: bool = Field(
        default=False,
        description="Emit TRACE records with the tail of every computed series",
    )


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format (json or text)")
    file_path: Path | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10 * 1024 * 1024, description="Rotate the log file at this size")
    backup_count: int = Field(default=5, description="Number of rotated log files kept")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper().strip()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level {v!r}; expected one of {VALID_LOG_LEVELS}")
        return level


class Settings(BaseSettings):
    """Main library settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application settings
    app_name: str = "Stock Indicators"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", description="Environment (development, staging, production)")

    # Component settings
    indicators: IndicatorSettings = Field(default_factory=IndicatorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load_yaml_config(cls, config_path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML file.

        Returns:
            Parsed mapping, or an empty dict when the file does not exist.

        Raises:
            ConfigParseError: If the file is not valid YAML.
        """
        if not config_path.exists():
            return {}
        with open(config_path, "r") as f:
            try:
                return yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                raise ConfigParseError(
                    f"Failed to parse {config_path.name}: {e}",
                    config_file=str(config_path),
                    line_number=mark.line + 1 if mark is not None else None,
                ) from e

    def load_indicator_config(self, config_path: Path | None = None) -> IndicatorSettings:
        """Load indicator settings from YAML configuration.

        Values set explicitly (environment, constructor) take priority over
        the YAML file, which takes priority over defaults.
        """
        config = self.load_yaml_config(config_path or CONFIG_DIR / "indicators.yaml")
        if not config:
            return self.indicators
        merged = {**config, **self.indicators.model_dump(exclude_unset=True)}
        return IndicatorSettings(**merged)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance with all configurations loaded.

    Loads configurations in order:
    1. Base settings from environment and .env file
    2. Indicator settings overlaid from indicators.yaml
    """
    settings = Settings()
    settings.indicators = settings.load_indicator_config()
    return settings
