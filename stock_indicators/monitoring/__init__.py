"""
Monitoring module for the indicator library.

Provides structured logging with categories, correlation IDs and a TRACE
level for series-level debugging.
"""

from .logger import (
    TRACE,
    ContextLogger,
    JsonFormatter,
    LogCategory,
    LogFormat,
    TextFormatter,
    get_logger,
    log_data,
    log_indicator,
    log_system,
    log_trace,
    setup_logging,
    setup_logging_from_settings,
    trace_series,
)

__all__ = [
    "TRACE",
    "ContextLogger",
    "JsonFormatter",
    "LogCategory",
    "LogFormat",
    "TextFormatter",
    "get_logger",
    "log_data",
    "log_indicator",
    "log_system",
    "log_trace",
    "setup_logging",
    "setup_logging_from_settings",
    "trace_series",
]
