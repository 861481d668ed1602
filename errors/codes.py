"""
Error code catalog for the dummy OpenTelemetry generator.

This module defines every error code the generator can terminate with and
the process exit status each one maps to.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """
    Enumeration of all error codes used by the generator.

    Every code currently exits with status 1. A missing endpoint never
    reaches this catalog: argparse exits with status 2 on its own.
    """

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Settings failed validation (exit 1)"""

    TRACER_INIT_FAILED = "TRACER_INIT_FAILED"
    """Span exporter or tracer provider construction failed (exit 1)"""

    METER_INIT_FAILED = "METER_INIT_FAILED"
    """Metric exporter or meter provider construction failed (exit 1)"""

    LOGGER_INIT_FAILED = "LOGGER_INIT_FAILED"
    """Log exporter or logger provider construction failed (exit 1)"""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Unexpected error (exit 1)"""


# Mapping of error codes to their process exit status
ERROR_CODE_EXIT_MAP: dict[ErrorCode, int] = {
    ErrorCode.CONFIGURATION_ERROR: 1,
    ErrorCode.TRACER_INIT_FAILED: 1,
    ErrorCode.METER_INIT_FAILED: 1,
    ErrorCode.LOGGER_INIT_FAILED: 1,
    ErrorCode.INTERNAL_ERROR: 1,
}

# Initializer component name -> error code
COMPONENT_ERROR_CODES: dict[str, ErrorCode] = {
    "tracer": ErrorCode.TRACER_INIT_FAILED,
    "meter": ErrorCode.METER_INIT_FAILED,
    "logger": ErrorCode.LOGGER_INIT_FAILED,
}


def get_default_exit_code(error_code: ErrorCode) -> int:
    """
    Get the default process exit status for an error code.

    Args:
        error_code: The error code to look up

    Returns:
        The exit status, 1 for unknown codes
    """
    return ERROR_CODE_EXIT_MAP.get(error_code, 1)
