"""
Emission of one correlated span, counter increment and log record.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace import TracerProvider

from config.settings import Settings
from telemetry.providers import TelemetryProviders

SPAN_NAME = "IncrementCounter"
COUNTER_NAME = "my_custom_counter"
LOG_MESSAGE = "Counter incremented"
LOCAL_LOG_MESSAGE = "Info: Counter incremented"


@dataclass(frozen=True)
class TickResult:
    """What one tick emitted: its 1-based number and the span's ids."""
    tick: int
    trace_id: int
    span_id: int


class TelemetryEmitter:
    """
    Emits one span + counter increment + log record per call to emit().

    The tracer and meter come from the injected providers rather than from
    the process-wide registry, so an emitter works the same whether or not
    the providers were registered globally.
    """

    def __init__(
        self,
        tracer_provider: TracerProvider,
        meter_provider: MeterProvider,
        otel_logger: logging.Logger,
        instrumentation_name: str = "dummy-otel-app",
        local_logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            tracer_provider: Source of the tracer that opens each tick's span
            meter_provider: Source of the meter owning the counter
            otel_logger: Logger bound to the OpenTelemetry logger provider
            instrumentation_name: Name of the tracer and meter
            local_logger: Uncorrelated local logger (defaults to this module's)
        """
        self._tracer = tracer_provider.get_tracer(instrumentation_name)
        self._counter = meter_provider.get_meter(instrumentation_name).create_counter(
            COUNTER_NAME,
            unit="1",
            description="Number of emitted ticks",
        )
        self._otel_logger = otel_logger
        self._local_logger = local_logger or logging.getLogger(__name__)
        self._ticks = 0

    @classmethod
    def from_providers(cls, providers: TelemetryProviders, settings: Settings) -> "TelemetryEmitter":
        """Build an emitter from an acquired provider bundle."""
        return cls(
            tracer_provider=providers.tracer_provider,
            meter_provider=providers.meter_provider,
            otel_logger=providers.otel_logger,
            instrumentation_name=settings.instrumentation_name,
        )

    @property
    def ticks(self) -> int:
        """Number of ticks emitted so far."""
        return self._ticks

    def emit(self) -> TickResult:
        """
        Emit one tick.

        Inside a new current span the counter is incremented by one, the
        uncorrelated local line is written, then the correlated line is
        written to the OpenTelemetry logger; the span ends last.

        Returns:
            The tick number and the ids of the span that was emitted
        """
        with self._tracer.start_as_current_span(SPAN_NAME) as span:
            self._counter.add(1)
            self._local_logger.info(LOCAL_LOG_MESSAGE)
            self._otel_logger.info(LOG_MESSAGE)
            span_context = span.get_span_context()

        self._ticks += 1
        return TickResult(
            tick=self._ticks,
            trace_id=span_context.trace_id,
            span_id=span_context.span_id,
        )
