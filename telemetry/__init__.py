"""
Telemetry module for local logging and OpenTelemetry providers.

This module provides:
- JSONFormatter and setup_logging for structured local JSON log output
- Initializers for the OTLP/HTTP tracer, meter and logger providers
- telemetry_providers, a scope that shuts the providers down in reverse order
"""

from telemetry.service import JSONFormatter, get_logger, setup_logging
from telemetry.providers import (
    TelemetryProviders,
    bind_otel_logger,
    build_resource,
    init_logger,
    init_meter,
    init_tracer,
    signal_url,
    telemetry_providers,
)

__all__ = [
    "JSONFormatter",
    "get_logger",
    "setup_logging",
    "TelemetryProviders",
    "bind_otel_logger",
    "build_resource",
    "init_logger",
    "init_meter",
    "init_tracer",
    "signal_url",
    "telemetry_providers",
]
