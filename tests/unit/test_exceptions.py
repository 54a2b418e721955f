"""
Unit tests for core/exceptions.py
"""

import pytest

from stock_indicators.core.data_types import IndicatorName, MovingAvgType
from stock_indicators.core.exceptions import (
    CalculationError,
    ConfigParseError,
    ConfigurationError,
    DataError,
    DataValidationError,
    IndicatorSystemError,
    InvalidConfigError,
    ScalarInputRequiredError,
    UnsupportedMovingAverageError,
    ValidationError,
)


class TestIndicatorSystemError:
    """Tests for base IndicatorSystemError."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = IndicatorSystemError("Something went wrong")
        assert str(error) == "[IndicatorSystemError] Something went wrong"
        assert error.message == "Something went wrong"
        assert error.error_code == "IndicatorSystemError"

    def test_error_with_code(self):
        """Test error with custom error code."""
        error = IndicatorSystemError("Failed", error_code="ERR001")
        assert error.error_code == "ERR001"
        assert "[ERR001]" in str(error)

    def test_error_with_details(self):
        """Test details are rendered and serialized."""
        error = IndicatorSystemError("Failed", details={"bars": 3})
        assert "Details: {'bars': 3}" in str(error)
        payload = error.to_dict()
        assert payload["error_type"] == "IndicatorSystemError"
        assert payload["details"] == {"bars": 3}


class TestValidationErrors:
    """Tests for parameter and data validation errors."""

    def test_validation_error(self):
        """Test field name and value are recorded."""
        error = ValidationError("length must be positive", field_name="length", invalid_value=0)
        assert isinstance(error, IndicatorSystemError)
        assert error.details["field_name"] == "length"
        assert error.details["invalid_value"] == "0"

    def test_data_validation_error(self):
        """Test data validation error context."""
        error = DataValidationError("bad column", field="close", value=None, expected="float")
        assert isinstance(error, DataError)
        assert error.details["field"] == "close"
        assert error.details["expected"] == "float"


class TestCalculationErrors:
    """Tests for calculation errors."""

    def test_scalar_input_required_default_message(self):
        """Test the message names the indicator without a single output."""
        error = ScalarInputRequiredError(IndicatorName.BOLLINGER_BANDS)
        assert isinstance(error, CalculationError)
        assert "BOLLINGER_BANDS" in error.message
        assert "doesn't have a single output" in error.message
        assert error.details["indicator_name"] == "BOLLINGER_BANDS"
        assert error.indicator_name == IndicatorName.BOLLINGER_BANDS

    def test_scalar_input_required_custom_message(self):
        """Test a caller-supplied message wins."""
        error = ScalarInputRequiredError(message="pick an output")
        assert error.message == "pick an output"
        assert "indicator_name" not in error.details

    def test_unsupported_moving_average(self):
        """Test the kind is recorded by value."""
        error = UnsupportedMovingAverageError("nope", kind=MovingAvgType.HULL)
        assert error.details["kind"] == "HULL"
        assert error.kind == MovingAvgType.HULL

    def test_catch_as_base(self):
        """Test every library error can be caught as the base class."""
        with pytest.raises(IndicatorSystemError):
            raise ScalarInputRequiredError("X")


class TestConfigurationErrors:
    """Tests for configuration errors."""

    def test_invalid_config_error(self):
        """Test invalid config context."""
        error = InvalidConfigError(
            "bad format", config_key="logging.format", value="xml", expected="json or text"
        )
        assert isinstance(error, ConfigurationError)
        assert error.details == {
            "config_key": "logging.format",
            "value": "xml",
            "expected": "json or text",
        }

    def test_config_parse_error(self):
        """Test parse error records file and line."""
        error = ConfigParseError("broken", config_file="indicators.yaml", line_number=3)
        assert error.details["config_file"] == "indicators.yaml"
        assert error.details["line_number"] == 3
