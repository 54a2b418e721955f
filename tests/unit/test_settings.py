"""
Unit tests for config/settings.py
"""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from stock_indicators.config.settings import (
    CONFIG_DIR,
    IndicatorSettings,
    LoggingSettings,
    Settings,
    get_settings,
)
from stock_indicators.core.data_types import UnsupportedMovingAveragePolicy
from stock_indicators.core.exceptions import ConfigParseError


class TestIndicatorSettings:
    """Tests for IndicatorSettings model."""

    def test_default_values(self):
        """Test default indicator settings."""
        settings = IndicatorSettings()
        assert settings.unsupported_moving_average == UnsupportedMovingAveragePolicy.SILENT_EMPTY
        assert settings.trace_series is False

    def test_policy_from_string(self):
        """Test the policy accepts its configuration string."""
        settings = IndicatorSettings(unsupported_moving_average="raise")
        assert settings.unsupported_moving_average == UnsupportedMovingAveragePolicy.RAISE

    def test_invalid_policy(self):
        """Test unknown policies are rejected."""
        with pytest.raises(ValueError):
            IndicatorSettings(unsupported_moving_average="explode")


class TestLoggingSettings:
    """Tests for LoggingSettings model."""

    def test_default_values(self):
        """Test default logging settings."""
        settings = LoggingSettings()
        assert settings.level == "INFO"
        assert settings.format == "json"
        assert settings.file_path is None

    def test_custom_level(self):
        """Test level names are normalized."""
        settings = LoggingSettings(level="trace")
        assert settings.level == "TRACE"

    def test_invalid_level(self):
        """Test unknown level names are rejected."""
        with pytest.raises(ValueError):
            LoggingSettings(level="LOUD")


class TestSettings:
    """Tests for main Settings class."""

    @patch.dict("os.environ", {"DEBUG": "false"}, clear=False)
    def test_default_values(self):
        """Test default settings."""
        settings = Settings(_env_file=None)  # Ignore .env file for test
        assert settings.app_name == "Stock Indicators"
        assert settings.debug is False
        assert settings.environment == "development"

    def test_nested_settings(self):
        """Test nested settings models."""
        settings = Settings(_env_file=None)
        assert isinstance(settings.indicators, IndicatorSettings)
        assert isinstance(settings.logging, LoggingSettings)

    @patch.dict(
        "os.environ",
        {"INDICATORS__UNSUPPORTED_MOVING_AVERAGE": "raise", "LOGGING__LEVEL": "debug"},
        clear=False,
    )
    def test_nested_environment_override(self):
        """Test nested values come from double-underscore variables."""
        settings = Settings(_env_file=None)
        assert settings.indicators.unsupported_moving_average == UnsupportedMovingAveragePolicy.RAISE
        assert settings.logging.level == "DEBUG"

    def test_load_yaml_config_nonexistent(self):
        """Test loading non-existent YAML config."""
        config = Settings.load_yaml_config(Path("/nonexistent/config.yaml"))
        assert config == {}

    def test_load_yaml_config_valid(self):
        """Test loading valid YAML config."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump({"test_key": "test_value"}, f)
            f.flush()
            config = Settings.load_yaml_config(Path(f.name))
            assert config["test_key"] == "test_value"

    def test_load_yaml_config_invalid(self):
        """Test malformed YAML raises a parse error with its location."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("trace_series: [unclosed\n")
            f.flush()
            with pytest.raises(ConfigParseError) as exc_info:
                Settings.load_yaml_config(Path(f.name))
        assert exc_info.value.config_file == f.name

    def test_bundled_indicator_config(self):
        """Test the packaged indicators.yaml loads."""
        config = Settings.load_yaml_config(CONFIG_DIR / "indicators.yaml")
        assert config["unsupported_moving_average"] == "silent_empty"

    def test_load_indicator_config_overlay(self):
        """Test YAML values fill in what was not set explicitly."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump({"unsupported_moving_average": "raise", "trace_series": True}, f)
            f.flush()
            path = Path(f.name)

            settings = Settings(_env_file=None)
            indicators = settings.load_indicator_config(path)
            assert indicators.unsupported_moving_average == UnsupportedMovingAveragePolicy.RAISE
            assert indicators.trace_series is True

            explicit = Settings(_env_file=None, indicators=IndicatorSettings(trace_series=False))
            assert explicit.load_indicator_config(path).trace_series is False


class TestGetSettings:
    """Tests for get_settings function."""

    def test_returns_settings_instance(self):
        """Test that get_settings returns Settings instance."""
        # Clear cache
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_caching(self):
        """Test that get_settings is cached."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
