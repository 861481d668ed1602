"""
Fatal error handlers for the dummy OpenTelemetry generator.

These handlers turn exceptions that escape startup or the emission loop
into a structured JSON log line and a process exit status. Nothing is
retried: every error that reaches a handler terminates the process.
"""

import logging
import traceback

from errors.codes import ErrorCode
from errors.exceptions import AppException

logger = logging.getLogger(__name__)


def handle_app_exception(exc: AppException) -> int:
    """
    Log a known generator error and return its exit status.

    Args:
        exc: The AppException that was raised

    Returns:
        The process exit status for the exception
    """
    logger.error(
        exc.message,
        extra={"extra_data": {**exc.to_dict(), "exit_code": exc.exit_code}}
    )
    return exc.exit_code


def handle_unexpected_exception(exc: BaseException) -> int:
    """
    Log an unexpected exception with its stack trace and return exit status 1.

    Args:
        exc: The unexpected exception that was raised

    Returns:
        Exit status 1
    """
    logger.error(
        "Unexpected error occurred",
        extra={
            "extra_data": {
                "error_code": ErrorCode.INTERNAL_ERROR.value,
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "stack_trace": "".join(
                    traceback.format_exception(type(exc), exc, exc.__traceback__)
                ),
            }
        },
    )
    return 1
