"""
Structured logging for the indicator library.

Provides:
- JSON and human-readable log formats
- Contextual metadata (symbol, indicator) and correlation IDs
- Log categories for different components
- Rotating file handlers
- TRACE level logging for per-series debugging
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence
from uuid import uuid4

from stock_indicators.core.exceptions import InvalidConfigError

if TYPE_CHECKING:
    from stock_indicators.config.settings import LoggingSettings


# =============================================================================
# TRACE Level Logging (below DEBUG)
# =============================================================================

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    """Log a message at TRACE level.

    TRACE is for series-level detail such as the tail of every computed
    output.
    """
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


logging.Logger.trace = trace  # type: ignore[attr-defined]


class LogCategory(str, Enum):
    """Log categories for different components."""

    SYSTEM = "SYSTEM"
    DATA = "DATA"
    INDICATOR = "INDICATOR"
    SIGNAL = "SIGNAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


_CONTEXT_FIELDS = ("correlation_id", "symbol", "indicator")


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def __init__(self, category: LogCategory = LogCategory.SYSTEM) -> None:
        super().__init__()
        self.category = category

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a single JSON line."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "category": getattr(record, "category", self.category.value),
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                log_data[field] = value
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_data["extra_data"] = extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development."""

    def __init__(self, category: LogCategory = LogCategory.SYSTEM) -> None:
        super().__init__()
        self.category = category

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as one text line."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        category = getattr(record, "category", self.category.value)

        parts = [
            timestamp,
            f"[{record.levelname:8s}]",
            f"[{category:9s}]",
        ]

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            parts.append(f"[{correlation_id[:8]}]")
        for field in ("symbol", "indicator"):
            value = getattr(record, field, None)
            if value:
                parts.append(f"[{value}]")

        parts.append(record.getMessage())

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            parts.append(f"| {extra_data}")

        message = " ".join(parts)
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that stamps category, correlation ID and context."""

    def __init__(
        self,
        logger: logging.Logger,
        category: LogCategory = LogCategory.SYSTEM,
        correlation_id: str | None = None,
        symbol: str | None = None,
        indicator: str | None = None,
        extra_data: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the context logger.

        Args:
            logger: Base logger instance.
            category: Log category.
            correlation_id: Optional correlation ID; generated when omitted.
            symbol: Optional ticker the records refer to.
            indicator: Optional indicator the records refer to.
            extra_data: Context merged into every record's extra_data.
        """
        super().__init__(logger, {})
        self.category = category
        self.correlation_id = correlation_id or str(uuid4())
        self.symbol = symbol
        self.indicator = indicator
        self.context_data = dict(extra_data or {})

    def process(
        self,
        msg: str,
        kwargs: dict[str, Any],
    ) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        extra["category"] = self.category.value
        extra["correlation_id"] = self.correlation_id
        if self.symbol:
            extra["symbol"] = self.symbol
        if self.indicator:
            extra["indicator"] = self.indicator
        if self.context_data:
            extra["extra_data"] = {**self.context_data, **extra.get("extra_data", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(TRACE, msg, *args, **kwargs)

    def with_context(
        self,
        symbol: str | None = None,
        indicator: str | None = None,
        **extra_data: Any,
    ) -> "ContextLogger":
        """Create a new logger sharing the correlation ID with added context.

        Args:
            symbol: Ticker symbol.
            indicator: Indicator name.
            **extra_data: Additional context data.

        Returns:
            New ContextLogger with added context.
        """
        return ContextLogger(
            self.logger,
            self.category,
            self.correlation_id,
            symbol=symbol or self.symbol,
            indicator=indicator or self.indicator,
            extra_data={**self.context_data, **extra_data},
        )


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: str | int = "INFO",
    log_format: LogFormat | str = LogFormat.JSON,
    log_file: Path | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Set up logging for the application.

    Args:
        level: Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json or text).
        log_file: Optional log file path.
        max_bytes: Rotate the log file at this size.
        backup_count: Number of rotated files kept.

    Raises:
        InvalidConfigError: If the format is neither json nor text.
    """
    try:
        log_format = LogFormat(log_format)
    except ValueError as e:
        raise InvalidConfigError(
            f"Unknown log format: {log_format}",
            config_key="logging.format",
            value=log_format,
            expected="json or text",
        ) from e

    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(level))

    root_logger.handlers.clear()

    if log_format == LogFormat.JSON:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = TextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        except OSError as e:
            root_logger.warning(f"Failed to set up file logging: {e}")
        else:
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)


def setup_logging_from_settings(settings: "LoggingSettings | None" = None) -> None:
    """Set up logging from the library settings."""
    if settings is None:
        from stock_indicators.config.settings import get_settings

        settings = get_settings().logging
    setup_logging(
        level=settings.level,
        log_format=settings.format,
        log_file=settings.file_path,
        max_bytes=settings.max_bytes,
        backup_count=settings.backup_count,
    )


@lru_cache(maxsize=32)
def get_logger(
    name: str,
    category: LogCategory = LogCategory.SYSTEM,
    correlation_id: str | None = None,
) -> ContextLogger:
    """Get a context logger for a component.

    Args:
        name: Logger name.
        category: Log category.
        correlation_id: Optional correlation ID.

    Returns:
        ContextLogger instance.
    """
    base_logger = logging.getLogger(name)
    return ContextLogger(base_logger, category, correlation_id)


# Convenience functions for quick logging
def log_system(message: str, level: str = "INFO", **kwargs: Any) -> None:
    """Log a system message."""
    logger = get_logger("stock_indicators.system", LogCategory.SYSTEM)
    getattr(logger, level.lower())(message, extra={"extra_data": kwargs})


def log_data(message: str, level: str = "INFO", **kwargs: Any) -> None:
    """Log a data ingestion message."""
    logger = get_logger("stock_indicators.data", LogCategory.DATA)
    getattr(logger, level.lower())(message, extra={"extra_data": kwargs})


def log_indicator(message: str, indicator: str, level: str = "DEBUG", **kwargs: Any) -> None:
    """Log an indicator computation message."""
    logger = get_logger("stock_indicators.indicator", LogCategory.INDICATOR)
    getattr(logger, level.lower())(
        message,
        extra={"indicator": indicator, "extra_data": kwargs},
    )


# =============================================================================
# TRACE Level Convenience Functions
# =============================================================================


def log_trace(
    category: LogCategory,
    message: str,
    **kwargs: Any,
) -> None:
    """Log a trace-level message."""
    logger = get_logger(f"stock_indicators.{category.value.lower()}", category)
    logger.trace(message, extra={"extra_data": kwargs})


def trace_series(
    indicator: str,
    name: str,
    values: Sequence[float],
    tail: int = 5,
) -> None:
    """Trace-log the tail of a computed series.

    Args:
        indicator: Indicator that produced the series.
        name: Output key of the series.
        values: The series.
        tail: Number of trailing values to include.
    """
    recent = [float(v) for v in list(values)[-tail:]] if tail > 0 else []
    log_trace(
        LogCategory.INDICATOR,
        f"Series: {indicator}.{name} count={len(values)}",
        indicator=indicator,
        output=name,
        count=len(values),
        tail=recent,
    )
