"""
OpenTelemetry provider construction for the dummy OpenTelemetry generator.

Three initializers share one shape: build an OTLP/HTTP exporter bound to
the collector endpoint, wrap it in the signal's provider tagged with the
shared resource, and (for traces and metrics) register the provider
process-wide. The logger provider is never registered globally; it is
bound to one named stdlib logger through a LoggingHandler.

telemetry_providers() acquires all three in order and guarantees that
each acquired provider is shut down exactly once, in reverse order, on
every exit path.
"""

import logging
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from opentelemetry import metrics, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, LogExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from config.settings import Settings
from errors.exceptions import InitializationError

logger = logging.getLogger(__name__)

TRACES_PATH = "/v1/traces"
METRICS_PATH = "/v1/metrics"
LOGS_PATH = "/v1/logs"

GENERATOR_SERVICE_NAME = "dummy-otel-generator"
GENERATOR_SERVICE_VERSION = "0.0.1"
# semantic conventions the resource attributes follow
RESOURCE_SCHEMA_URL = "https://opentelemetry.io/schemas/1.9.0"


@dataclass(frozen=True)
class TelemetryProviders:
    """The providers acquired for one run, plus the resource they share."""
    resource: Resource
    tracer_provider: TracerProvider
    meter_provider: MeterProvider
    logger_provider: LoggerProvider
    otel_logger: logging.Logger


def build_resource() -> Resource:
    """
    Build the resource shared by all signals.

    It carries exactly service.name and service.version. Unlike
    Resource.create(), nothing is merged in from the environment
    (OTEL_SERVICE_NAME, OTEL_RESOURCE_ATTRIBUTES) or from SDK defaults.
    """
    return Resource(
        {
            SERVICE_NAME: GENERATOR_SERVICE_NAME,
            SERVICE_VERSION: GENERATOR_SERVICE_VERSION,
        },
        schema_url=RESOURCE_SCHEMA_URL,
    )


def signal_url(endpoint: str, signal_path: str, insecure: bool = False) -> str:
    """
    Turn the command-line endpoint into the URL of one OTLP/HTTP signal.

    A bare ``host:port`` gets ``https://`` (or ``http://`` when insecure).
    An endpoint without a path gets the standard signal path appended; an
    explicit path is used as given.

    Raises:
        ValueError: If no URL can be formed from the endpoint.
    """
    raw = endpoint.strip()
    if not raw or any(ch.isspace() for ch in raw):
        raise ValueError(f"invalid endpoint {endpoint!r}")
    if "://" not in raw:
        raw = f"{'http' if insecure else 'https'}://{raw}"

    parts = urlsplit(raw)
    if parts.scheme not in ("http", "https"):
        raise ValueError(f"unsupported scheme {parts.scheme!r} in endpoint {endpoint!r}")
    if not parts.hostname:
        raise ValueError(f"no host in endpoint {endpoint!r}")
    # raises ValueError for a non-numeric or out-of-range port
    parts.port

    path = parts.path if parts.path not in ("", "/") else signal_path
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def init_tracer(
    settings: Settings,
    endpoint: str,
    resource: Resource,
    exporter: Optional[SpanExporter] = None,
) -> TracerProvider:
    """
    Build the batching tracer provider.

    When global registration is enabled the provider becomes the
    process-wide tracer provider, and a composite W3C trace-context +
    baggage propagator is installed as the global text-map propagator.

    Raises:
        InitializationError: If the exporter or provider cannot be built.
    """
    try:
        if exporter is None:
            exporter = OTLPSpanExporter(
                endpoint=signal_url(endpoint, TRACES_PATH, settings.otlp_insecure),
                timeout=settings.otlp_timeout_seconds,
            )
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    except Exception as e:
        raise InitializationError("tracer", e) from e

    if settings.register_global_providers:
        trace.set_tracer_provider(provider)
        set_global_textmap(
            CompositePropagator([
                TraceContextTextMapPropagator(),
                W3CBaggagePropagator(),
            ])
        )

    logger.info("Tracer provider initialized", extra={
        "extra_data": {"exporter": type(exporter).__name__}
    })
    return provider


def init_meter(
    settings: Settings,
    endpoint: str,
    resource: Resource,
    reader: Optional[MetricReader] = None,
) -> MeterProvider:
    """
    Build the meter provider backed by a periodic exporting reader.

    Raises:
        InitializationError: If the exporter, reader or provider cannot be built.
    """
    try:
        if reader is None:
            reader = PeriodicExportingMetricReader(
                OTLPMetricExporter(
                    endpoint=signal_url(endpoint, METRICS_PATH, settings.otlp_insecure),
                    timeout=settings.otlp_timeout_seconds,
                ),
                export_interval_millis=settings.metric_export_interval_millis,
            )
        provider = MeterProvider(resource=resource, metric_readers=[reader])
    except Exception as e:
        raise InitializationError("meter", e) from e

    if settings.register_global_providers:
        metrics.set_meter_provider(provider)

    logger.info("Meter provider initialized", extra={
        "extra_data": {"reader": type(reader).__name__}
    })
    return provider


def init_logger(
    settings: Settings,
    endpoint: str,
    resource: Resource,
    exporter: Optional[LogExporter] = None,
) -> LoggerProvider:
    """
    Build the batch-processed logger provider.

    The provider is returned to the caller and not installed process-wide.

    Raises:
        InitializationError: If the exporter or provider cannot be built.
    """
    try:
        if exporter is None:
            exporter = OTLPLogExporter(
                endpoint=signal_url(endpoint, LOGS_PATH, settings.otlp_insecure),
                timeout=settings.otlp_timeout_seconds,
            )
        provider = LoggerProvider(resource=resource)
        provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
    except Exception as e:
        raise InitializationError("logger", e) from e

    logger.info("Logger provider initialized", extra={
        "extra_data": {"exporter": type(exporter).__name__}
    })
    return provider


def bind_otel_logger(
    logger_provider: LoggerProvider,
    name: str,
) -> Tuple[logging.Logger, LoggingHandler]:
    """
    Attach a LoggingHandler for ``logger_provider`` to the stdlib logger ``name``.

    The logger does not propagate, so its records reach the collector only
    and never the local JSON output. Handlers left over from a previous
    binding are replaced.

    Returns:
        The bound logger and the handler attached to it
    """
    otel_logger = logging.getLogger(name)
    otel_logger.setLevel(logging.INFO)
    otel_logger.propagate = False

    for handler in otel_logger.handlers[:]:
        if isinstance(handler, LoggingHandler):
            otel_logger.removeHandler(handler)

    handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
    otel_logger.addHandler(handler)
    return otel_logger, handler


def _shutdown(component: str, provider) -> None:
    logger.info("Shutting down provider", extra={"extra_data": {"component": component}})
    provider.shutdown()


@contextmanager
def telemetry_providers(
    settings: Settings,
    endpoint: str,
    span_exporter: Optional[SpanExporter] = None,
    metric_reader: Optional[MetricReader] = None,
    log_exporter: Optional[LogExporter] = None,
) -> Iterator[TelemetryProviders]:
    """
    Acquire the tracer, meter and logger providers for the duration of a block.

    Each provider's shutdown is registered as soon as it is built, so a
    failure in a later initializer still shuts down the earlier ones.
    On exit the logger handler is detached, then the logger, meter and
    tracer providers are shut down, in that order.

    Raises:
        InitializationError: If any of the three initializers fails.
    """
    resource = build_resource()

    with ExitStack() as stack:
        tracer_provider = init_tracer(settings, endpoint, resource, exporter=span_exporter)
        stack.callback(_shutdown, "tracer", tracer_provider)

        meter_provider = init_meter(settings, endpoint, resource, reader=metric_reader)
        stack.callback(_shutdown, "meter", meter_provider)

        logger_provider = init_logger(settings, endpoint, resource, exporter=log_exporter)
        stack.callback(_shutdown, "logger", logger_provider)

        otel_logger, handler = bind_otel_logger(logger_provider, settings.instrumentation_name)
        stack.callback(otel_logger.removeHandler, handler)

        yield TelemetryProviders(
            resource=resource,
            tracer_provider=tracer_provider,
            meter_provider=meter_provider,
            logger_provider=logger_provider,
            otel_logger=otel_logger,
        )
