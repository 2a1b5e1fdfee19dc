"""
Custom exceptions for the SDK bootstrap service.

This module defines all custom exceptions used throughout the application,
providing clear error hierarchies and detailed error information for debugging.
"""

from typing import Optional, Dict, Any


class SDKBootError(Exception):
    """Base exception for all SDK bootstrap errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code


class ConfigurationError(SDKBootError):
    """Raised when there are configuration or setup issues."""
    pass


class ValidationError(SDKBootError):
    """Raised when data validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class SDKError(SDKBootError):
    """Raised when a third-party SDK call fails."""

    def __init__(self, message: str, sdk: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.sdk = sdk


class StepInitializationError(SDKBootError):
    """Raised when a required initialization step fails."""

    def __init__(self, step: str, reason: Optional[str] = None, **kwargs):
        message = f"{step} initialization failed"
        if reason:
            message += f": {reason}"
        kwargs.setdefault("details", {"step": step})
        kwargs.setdefault("error_code", "step_failed")
        super().__init__(message, **kwargs)
        self.step = step
        self.reason = reason


class IdentifierUnavailableError(SDKBootError):
    """Raised when an identifier could not be obtained within its retry budget."""

    def __init__(self, identifier: str, attempts: Optional[int] = None, **kwargs):
        message = f"Identifier not available: {identifier}"
        if attempts:
            message += f" (after {attempts} attempts)"
        super().__init__(message, **kwargs)
        self.identifier = identifier
        self.attempts = attempts


# Exception mapping for HTTP status codes
EXCEPTION_STATUS_MAP = {
    ValidationError: 400,
    ConfigurationError: 500,
    SDKError: 502,
    StepInitializationError: 502,
    IdentifierUnavailableError: 503,
}


def get_http_status_code(exception: Exception) -> int:
    """Get appropriate HTTP status code for an exception."""
    exception_type = type(exception)
    return EXCEPTION_STATUS_MAP.get(exception_type, 500)


def should_log_error(exception: Exception) -> bool:
    """Determine if an error should be logged."""
    # Validation problems are caller errors, and a missing identifier is expected
    low_priority_exceptions = (
        ValidationError,
        IdentifierUnavailableError,
    )

    return not isinstance(exception, low_priority_exceptions)
