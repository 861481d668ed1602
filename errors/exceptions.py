"""
Exception classes for the dummy OpenTelemetry generator.

This module provides the AppException base class, the InitializationError
raised by the provider initializers, and factory functions for the other
fatal conditions.
"""

from typing import Any, Optional

from errors.codes import COMPONENT_ERROR_CODES, ErrorCode, get_default_exit_code


class AppException(Exception):
    """
    Base exception class for all generator errors.

    This exception provides structured error information including:
    - error_code: A standardized error code from the ErrorCode enum
    - message: A human-readable error message
    - exit_code: The process exit status to terminate with
    - details: Optional additional context

    Example:
        raise AppException(
            error_code=ErrorCode.CONFIGURATION_ERROR,
            message="emit_interval_seconds must be positive",
            details={"field": "emit_interval_seconds"}
        )
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        exit_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None
    ):
        """
        Initialize an AppException.

        Args:
            error_code: The error code from the ErrorCode enum
            message: A human-readable error message
            exit_code: The exit status (defaults to the error code's default)
            details: Optional dictionary with additional error context
        """
        self.error_code = error_code
        self.message = message
        self.exit_code = exit_code or get_default_exit_code(error_code)
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the exception to a dictionary for JSON serialization.

        Returns:
            Dictionary containing error_code, message, and details
        """
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error_code={self.error_code.value!r}, "
            f"message={self.message!r}, exit_code={self.exit_code}, "
            f"details={self.details!r})"
        )


class InitializationError(AppException):
    """
    Raised when a tracer, meter or logger provider cannot be constructed.

    The message names the failing component, e.g.
    ``failed to initialize meter: Invalid port``.
    """

    def __init__(self, component: str, cause: BaseException):
        self.component = component
        self.cause = cause
        super().__init__(
            error_code=COMPONENT_ERROR_CODES.get(component, ErrorCode.INTERNAL_ERROR),
            message=f"failed to initialize {component}: {cause}",
            details={"component": component, "cause": type(cause).__name__},
        )


def configuration_error(
    message: str,
    details: Optional[dict[str, Any]] = None
) -> AppException:
    """Create a configuration error exception."""
    return AppException(
        error_code=ErrorCode.CONFIGURATION_ERROR,
        message=message,
        details=details
    )
