"""
Custom exception hierarchy for the indicator library.

Provides a structured exception hierarchy for different error categories:
- Validation errors (bad parameters, malformed input)
- Data errors (misaligned or invalid series)
- Calculation errors (unresolvable input, unsupported smoothing)
- Configuration errors (invalid, missing, parsing)
"""

from __future__ import annotations

from typing import Any


class IndicatorSystemError(Exception):
    """Base exception for all indicator library errors.

    All custom exceptions in the library inherit from this class.
    Provides structured error information including error code, message,
    and additional context.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Optional error code for programmatic handling.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error string."""
        if self.details:
            return f"[{self.error_code}] {self.message} - Details: {self.details}"
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(IndicatorSystemError):
    """Raised when an indicator parameter fails validation.

    Examples:
        - Non-positive length
        - Fast length not shorter than slow length
    """

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        invalid_value: Any = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the validation error.

        Args:
            message: Human-readable error message.
            field_name: Name of the parameter that failed validation.
            invalid_value: The value that failed validation.
            **kwargs: Additional context passed to parent.
        """
        details = kwargs.pop("details", {})
        if field_name:
            details["field_name"] = field_name
        if invalid_value is not None:
            details["invalid_value"] = str(invalid_value)
        super().__init__(message, details=details, **kwargs)
        self.field_name = field_name
        self.invalid_value = invalid_value


# =============================================================================
# Data Errors
# =============================================================================


class DataError(IndicatorSystemError):
    """Base exception for data-related errors."""

    pass


class DataValidationError(DataError):
    """Raised when input series fail validation checks.

    Examples:
        - Frame missing a required OHLCV column
        - Non-numeric values in a price column
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if expected:
            details["expected"] = expected
        super().__init__(message, details=details, **kwargs)
        self.field = field
        self.value = value
        self.expected = expected


# =============================================================================
# Calculation Errors
# =============================================================================


class CalculationError(IndicatorSystemError):
    """Base exception for failures while computing an indicator."""

    pass


class ScalarInputRequiredError(CalculationError):
    """Raised when chaining onto an indicator without a single output series.

    Indicators with several natural outputs (Bollinger Bands, for example)
    leave the canonical series empty while still emitting signals. The next
    computation cannot know which output to consume, so resolution fails.
    """

    def __init__(
        self,
        indicator_name: Any = None,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        name = getattr(indicator_name, "value", indicator_name)
        if message is None:
            message = (
                f"Calculations based off of {name} can't be completed because "
                "this indicator doesn't have a single output."
            )
        details = kwargs.pop("details", {})
        if name:
            details["indicator_name"] = str(name)
        super().__init__(message, details=details, **kwargs)
        self.indicator_name = indicator_name


class UnsupportedMovingAverageError(CalculationError):
    """Raised when a smoothing kind has no registered algorithm.

    Only raised when the dispatcher runs with the ``raise`` policy; the
    default policy logs a warning and returns an empty series instead.
    """

    def __init__(
        self,
        message: str,
        kind: Any = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if kind is not None:
            details["kind"] = str(getattr(kind, "value", kind))
        super().__init__(message, details=details, **kwargs)
        self.kind = kind


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(IndicatorSystemError):
    """Base exception for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration is invalid.

    Examples:
        - Unknown unsupported-average policy
        - Indicator defaults with a non-positive length
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        value: Any = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if value is not None:
            details["value"] = str(value)
        if expected:
            details["expected"] = expected
        super().__init__(message, details=details, **kwargs)
        self.config_key = config_key
        self.value = value
        self.expected = expected


class ConfigParseError(ConfigurationError):
    """Raised when a YAML configuration file cannot be parsed."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        line_number: int | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if config_file:
            details["config_file"] = config_file
        if line_number is not None:
            details["line_number"] = line_number
        super().__init__(message, details=details, **kwargs)
        self.config_file = config_file
        self.line_number = line_number
