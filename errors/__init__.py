"""
Error handling module for the dummy OpenTelemetry generator.

This module provides structured error handling with:
- ErrorCode enum for standardized error codes and exit statuses
- AppException and InitializationError exception classes
- Handlers that log fatal errors and map them to an exit status
"""

from errors.codes import ErrorCode
from errors.exceptions import AppException, InitializationError
from errors.handlers import handle_app_exception, handle_unexpected_exception

__all__ = [
    "ErrorCode",
    "AppException",
    "InitializationError",
    "handle_app_exception",
    "handle_unexpected_exception",
]
