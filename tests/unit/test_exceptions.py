"""Unit tests for custom exception hierarchy"""
import json
import pytest
from datetime import datetime
from pydantic import BaseModel, ValidationError

from hapien.exceptions import (
    ConfigurationError,
    EconomyConfigError,
    HapienError,
    wrap_external_exception,
)


class TestHapienError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        error = HapienError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        """Test exception with full context"""
        error = HapienError(
            message="Failed to apply hangout completion",
            user_id="123456",
            operation="apply_hangout_completion",
            context={"hangout_id": "abc-123"},
        )
        assert error.user_id == "123456"
        assert error.operation == "apply_hangout_completion"
        assert error.context["hangout_id"] == "abc-123"

    def test_to_dict(self):
        """Test exception serialization"""
        error_dict = HapienError(message="Test error").to_dict()
        assert error_dict["error"] == "HapienError"
        assert error_dict["message"] == "Test error"
        assert "request_id" in error_dict
        assert "timestamp" in error_dict

    def test_error_is_logged(self, caplog):
        """Test errors log themselves on creation"""
        HapienError("Logged error")
        assert "HapienError: Logged error" in caplog.text


class TestConfigurationErrors:
    """Test configuration errors"""

    def test_configuration_error(self):
        """Test config key is kept"""
        error = ConfigurationError("Missing value", config_key="LOG_LEVEL")
        assert error.config_key == "LOG_LEVEL"
        assert error.context["config_key"] == "LOG_LEVEL"
        assert "not properly configured" in error.user_message

    def test_economy_config_error(self):
        """Test economy errors point at the economy file and table"""
        error = EconomyConfigError("Thresholds out of order", table="levels")
        assert isinstance(error, ConfigurationError)
        assert error.config_key == "GAMIFICATION_ECONOMY_FILE"
        assert error.context["table"] == "levels"


class _Sample(BaseModel):
    value: int


class TestWrapExternalException:
    """Test mapping of third-party errors"""

    def test_wrap_pydantic_error(self):
        """Test pydantic validation errors become economy errors"""
        with pytest.raises(ValidationError) as exc_info:
            _Sample(value="not a number")

        wrapped = wrap_external_exception(exc_info.value, operation="load_economy")

        assert isinstance(wrapped, EconomyConfigError)
        assert wrapped.cause is exc_info.value
        assert "1 error(s)" in wrapped.message
        assert wrapped.context["table"] == "value"

    def test_wrap_json_error(self):
        """Test JSON decode errors become economy errors"""
        with pytest.raises(json.JSONDecodeError) as exc_info:
            json.loads("{broken")

        wrapped = wrap_external_exception(exc_info.value, operation="load_economy")

        assert isinstance(wrapped, EconomyConfigError)
        assert "line 1" in wrapped.message

    def test_wrap_os_error(self):
        """Test file errors become configuration errors"""
        wrapped = wrap_external_exception(FileNotFoundError("economy.json"), operation="load_economy")

        assert type(wrapped) is ConfigurationError

    def test_wrap_generic_exception(self):
        """Test unknown errors fall back to the base class"""
        wrapped = wrap_external_exception(RuntimeError("boom"), operation="apply", user_id="42")

        assert type(wrapped) is HapienError
        assert wrapped.user_id == "42"
        assert "boom" in wrapped.message
