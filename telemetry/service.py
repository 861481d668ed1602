"""
Local structured logging for the dummy OpenTelemetry generator.

Everything the generator says about itself (startup, shutdown, fatal
errors, the per-tick "Info: Counter incremented" line) is written to
stdout as one JSON object per line. These lines never carry trace
context; the correlated copy of each tick's log goes through the
OpenTelemetry logger provider instead (see telemetry.providers).
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    """
    Log formatter that outputs one JSON object per record.

    Each log entry contains:
    - timestamp: ISO 8601 formatted UTC timestamp
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - message: The log message
    - logger: Name of the logger that produced the entry

    Additional fields can be included via the 'extra_data' attribute
    on the log record.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as a JSON string.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted string containing the log entry
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.module:
            log_data["module"] = record.module
        if record.funcName and record.funcName != "<module>":
            log_data["function"] = record.funcName
        if record.lineno:
            log_data["line"] = record.lineno

        if hasattr(record, "extra_data") and record.extra_data:
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_data["stack_trace"] = record.stack_info

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure the root logger to write JSON lines to stdout.

    Existing root handlers are replaced so repeated calls do not duplicate
    output.

    Args:
        log_level: Name of the minimum level to emit

    Returns:
        The generator's own logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(stdout_handler)

    logger = logging.getLogger("generator")
    logger.debug("Local logging configured", extra={
        "extra_data": {"log_level": logging.getLevelName(level)}
    })
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger that writes through the JSON formatter.

    Args:
        name: Name for the logger (typically module name)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
