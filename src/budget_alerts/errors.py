"""
Budget Alerts — Core Error Types

Defines the exception hierarchy for budget derivation and provisioning.
All exceptions inherit from BudgetAlertsError for consistent error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes attached to serialized errors."""

    INVALID_INPUT = "INVALID_INPUT"
    SCOPE_UNRESOLVED = "SCOPE_UNRESOLVED"
    PROVISIONING_FAILED = "PROVISIONING_FAILED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BudgetAlertsError(Exception):
    """Base exception for all budget alerts errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logs."""
        return {
            "error": self.__class__.__name__,
            "error_code": extract_error_code(self).value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(BudgetAlertsError):
    """Raised when a budget amount, endpoint or override is invalid."""


class ScopeResolutionError(BudgetAlertsError):
    """Raised when a budget cannot be attached to (or resolved from) its owning scope."""


class ProvisioningError(BudgetAlertsError):
    """Raised when the provisioning collaborator fails. The cause is chained, not interpreted."""

    def __init__(self, message: str, logical_id: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if logical_id is not None:
            error_details["logical_id"] = logical_id
        super().__init__(message, error_details)
        self.logical_id = logical_id


class ConfigurationError(BudgetAlertsError):
    """Raised when settings are invalid or missing."""


def require_positive_int(value: Any, field: str) -> int:
    """
    Check that a currency amount is a strictly positive whole number.

    Args:
        value: Candidate amount
        field: Field name used in the error message

    Returns:
        The value, unchanged

    Raises:
        ValidationError: If value is not an int, is a bool, or is <= 0
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"{field} must be a positive integer, got {value!r}",
            details={"field": field, "value": repr(value)},
        )
    return value


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract the ErrorCode for an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, ValidationError):
        return ErrorCode.INVALID_INPUT

    if isinstance(error, ScopeResolutionError):
        return ErrorCode.SCOPE_UNRESOLVED

    if isinstance(error, ProvisioningError):
        return ErrorCode.PROVISIONING_FAILED

    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    return ErrorCode.INTERNAL_ERROR
