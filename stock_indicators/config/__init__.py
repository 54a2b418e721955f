"""
Configuration module for the indicator library.

Provides centralized configuration management using Pydantic settings
and YAML-based configuration files.
"""

from .settings import IndicatorSettings, LoggingSettings, Settings, get_settings

__all__ = ["IndicatorSettings", "LoggingSettings", "Settings", "get_settings"]
