"""
Shared pytest fixtures and configuration for all tests.
"""
import os

import pytest
from hypothesis import settings, Verbosity, Phase
from opentelemetry.sdk._logs.export import InMemoryLogExporter
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from config.settings import Settings, clear_settings_cache
from generator.emitter import COUNTER_NAME
from telemetry.providers import TelemetryProviders, telemetry_providers

# Default profile: balanced for local development
settings.register_profile(
    "default",
    max_examples=100,
    verbosity=Verbosity.normal,
    deadline=None,
    print_blob=True,
)

# CI profile: more thorough testing for continuous integration
settings.register_profile(
    "ci",
    max_examples=200,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    derandomize=True,
)

# Debug profile: minimal examples for quick debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Every test starts and ends with an empty settings cache."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def generator_settings() -> Settings:
    """Settings with a short interval and no process-wide registration."""
    return Settings(
        emit_interval_seconds=0.01,
        otlp_insecure=True,
        register_global_providers=False,
    )


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def metric_reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture
def log_exporter() -> InMemoryLogExporter:
    return InMemoryLogExporter()


@pytest.fixture
def providers(generator_settings, span_exporter, metric_reader, log_exporter):
    """Providers wired to in-memory exporters, shut down after the test."""
    with telemetry_providers(
        generator_settings,
        "localhost:4318",
        span_exporter=span_exporter,
        metric_reader=metric_reader,
        log_exporter=log_exporter,
    ) as bundle:
        yield bundle


def _flush(bundle: TelemetryProviders) -> None:
    bundle.tracer_provider.force_flush()
    bundle.logger_provider.force_flush()


def _counter_points(reader: InMemoryMetricReader, name: str = COUNTER_NAME) -> list:
    data = reader.get_metrics_data()
    if data is None:
        return []
    points = []
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                if metric.name == name:
                    points.extend(metric.data.data_points)
    return points


@pytest.fixture
def flush_telemetry():
    """Push everything the batch processors hold to the in-memory exporters."""
    return _flush


@pytest.fixture
def counter_points():
    """Collect the data points of one metric from an in-memory reader."""
    return _counter_points
