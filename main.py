"""
Command-line entry point of the dummy OpenTelemetry generator.

Usage: otel-app <endpoint>

Every interval the generator emits one "IncrementCounter" span, one
increment of "my_custom_counter" and one "Counter incremented" log record
to the OTLP/HTTP collector at <endpoint>. It runs until SIGINT or SIGTERM,
then flushes and shuts down the providers.
"""

import argparse
import asyncio
import signal
import sys
from typing import Optional, Sequence

from config.settings import ConfigurationError, Settings, get_settings
from errors.exceptions import AppException, configuration_error
from errors.handlers import handle_app_exception, handle_unexpected_exception
from generator.emitter import TelemetryEmitter
from generator.loop import run_emission_loop
from telemetry.providers import (
    GENERATOR_SERVICE_NAME,
    GENERATOR_SERVICE_VERSION,
    telemetry_providers,
)
from telemetry.service import get_logger, setup_logging

logger = get_logger("generator")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse the command line.

    Exits with status 2 and a usage message when the endpoint is missing.
    """
    parser = argparse.ArgumentParser(
        prog="otel-app",
        description="Periodically emit a span, a counter increment and a log "
                    "record to an OTLP/HTTP collector.",
    )
    parser.add_argument(
        "endpoint",
        help="collector endpoint, host:port or URL",
    )
    return parser.parse_args(argv)


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event) -> list:
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # not supported on this platform or outside the main thread
            continue
        installed.append(sig)
    return installed


async def run(
    settings: Settings,
    endpoint: str,
    stop_event: Optional[asyncio.Event] = None,
    max_ticks: Optional[int] = None,
    **exporter_overrides,
) -> int:
    """
    Acquire the providers, run the emission loop and release the providers.

    Args:
        settings: Generator settings
        endpoint: Collector endpoint from the command line
        stop_event: Ends the loop when set; SIGINT and SIGTERM set it
        max_ticks: Optional tick budget
        **exporter_overrides: span_exporter, metric_reader or log_exporter
            passed through to telemetry_providers

    Returns:
        The number of ticks emitted

    Raises:
        InitializationError: If a provider cannot be built.
    """
    if stop_event is None:
        stop_event = asyncio.Event()

    with telemetry_providers(settings, endpoint, **exporter_overrides) as providers:
        emitter = TelemetryEmitter.from_providers(providers, settings)

        loop = asyncio.get_running_loop()
        installed = _install_signal_handlers(loop, stop_event)
        try:
            return await run_emission_loop(
                emitter,
                settings.emit_interval_seconds,
                stop_event=stop_event,
                max_ticks=max_ticks,
            )
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the generator and return the process exit status."""
    args = parse_args(argv)

    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        return handle_app_exception(configuration_error(str(e)))

    setup_logging(settings.log_level)
    logger.info("Starting generator", extra={
        "extra_data": {
            "endpoint": args.endpoint,
            "service_name": GENERATOR_SERVICE_NAME,
            "service_version": GENERATOR_SERVICE_VERSION,
            "interval_seconds": settings.emit_interval_seconds,
        }
    })

    try:
        ticks = asyncio.run(run(settings, args.endpoint))
    except AppException as e:
        return handle_app_exception(e)
    except Exception as e:
        return handle_unexpected_exception(e)

    logger.info("Generator stopped", extra={"extra_data": {"ticks": ticks}})
    return 0


if __name__ == "__main__":
    sys.exit(main())
