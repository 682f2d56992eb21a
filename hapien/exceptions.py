"""
Standardized exception hierarchy for the Hapien gamification engine

The engine computations never raise in their normal contract; these
exceptions cover broken configuration (environment, economy tables).
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import json
import logging

import pydantic

logger = logging.getLogger(__name__)


class HapienError(Exception):
    """
    Base exception for all Hapien errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - Structured context
    - Automatic logging

    Example:
        raise HapienError(
            message="Failed to apply hangout completion",
            user_id="123456",
            operation="apply_hangout_completion",
            context={"hangout_id": "abc-123"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(HapienError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


class EconomyConfigError(ConfigurationError):
    """
    Game economy tables are inconsistent

    Examples:
    - Level thresholds not strictly ascending
    - Achievement with tiers and the one-time flag
    - Multiplier weights not matching the multipliers
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        **kwargs
    ):
        self.table = table
        super().__init__(
            message=message,
            config_key="GAMIFICATION_ECONOMY_FILE",
            **kwargs
        )
        self.context["table"] = table


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> HapienError:
    """
    Wrap external exceptions (pydantic, json, OS) into our exception hierarchy

    Example:
        try:
            economy = GameEconomy.model_validate(data)
        except pydantic.ValidationError as e:
            raise wrap_external_exception(e, operation="load_economy")
    """
    if isinstance(error, pydantic.ValidationError):
        # First field location names the failing section, e.g. ("levels", "thresholds")
        locations = [e["loc"] for e in error.errors() if e["loc"]]
        return EconomyConfigError(
            message=f"Invalid economy configuration: {error.error_count()} error(s)",
            table=str(locations[0][0]) if locations else None,
            operation=operation,
            user_id=user_id,
            cause=error,
        )

    if isinstance(error, json.JSONDecodeError):
        return EconomyConfigError(
            message=f"Economy file is not valid JSON: {error.msg} (line {error.lineno})",
            operation=operation,
            user_id=user_id,
            cause=error,
        )

    if isinstance(error, OSError):
        return ConfigurationError(
            message=f"Could not read configuration: {str(error)}",
            operation=operation,
            user_id=user_id,
            cause=error,
        )

    return HapienError(
        message=f"Unexpected error during {operation}: {str(error)}",
        operation=operation,
        user_id=user_id,
        context=context,
        cause=error
    )
