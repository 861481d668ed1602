"""
Integration test fixtures: a mock OTLP/HTTP collector.

The collector listens on 127.0.0.1 on a free port, accepts protobuf
POSTs on /v1/traces, /v1/metrics and /v1/logs, answers 200 and keeps the
decoded export requests for inspection.
"""

import gzip
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List

import pytest
from opentelemetry.proto.collector.logs.v1.logs_service_pb2 import ExportLogsServiceRequest
from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2 import ExportMetricsServiceRequest
from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import ExportTraceServiceRequest

from config.settings import Settings

REQUEST_TYPES = {
    "/v1/traces": ExportTraceServiceRequest,
    "/v1/metrics": ExportMetricsServiceRequest,
    "/v1/logs": ExportLogsServiceRequest,
}


class MockCollector:
    """Thread-safe store of the export requests received per signal path."""

    def __init__(self):
        self._lock = threading.Lock()
        self._requests: Dict[str, list] = {path: [] for path in REQUEST_TYPES}
        self.unexpected_paths: List[str] = []
        self.endpoint = ""

    def record(self, path: str, body: bytes) -> bool:
        request_type = REQUEST_TYPES.get(path)
        if request_type is None:
            with self._lock:
                self.unexpected_paths.append(path)
            return False
        message = request_type.FromString(body)
        with self._lock:
            self._requests[path].append(message)
        return True

    def _received(self, path: str) -> list:
        with self._lock:
            return list(self._requests[path])

    def spans(self) -> list:
        return [
            span
            for request in self._received("/v1/traces")
            for resource_spans in request.resource_spans
            for scope_spans in resource_spans.scope_spans
            for span in scope_spans.spans
        ]

    def log_records(self) -> list:
        return [
            record
            for request in self._received("/v1/logs")
            for resource_logs in request.resource_logs
            for scope_logs in resource_logs.scope_logs
            for record in scope_logs.log_records
        ]

    def counter_values(self, name: str) -> list:
        return [
            point.as_int
            for request in self._received("/v1/metrics")
            for resource_metrics in request.resource_metrics
            for scope_metrics in resource_metrics.scope_metrics
            for metric in scope_metrics.metrics
            if metric.name == name
            for point in metric.sum.data_points
        ]

    def resources(self) -> list:
        """Resource attributes of every export, as plain dicts."""
        resources = []
        for request in self._received("/v1/traces"):
            resources.extend(rs.resource for rs in request.resource_spans)
        for request in self._received("/v1/metrics"):
            resources.extend(rm.resource for rm in request.resource_metrics)
        for request in self._received("/v1/logs"):
            resources.extend(rl.resource for rl in request.resource_logs)
        return [
            {attr.key: attr.value.string_value for attr in resource.attributes}
            for resource in resources
        ]


class _CollectorHandler(BaseHTTPRequestHandler):

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        if self.headers.get("Content-Encoding") == "gzip":
            body = gzip.decompress(body)

        accepted = self.server.collector.record(self.path, body)

        self.send_response(200 if accepted else 404)
        self.send_header("Content-Type", "application/x-protobuf")
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def mock_collector(monkeypatch):
    """Run a mock OTLP/HTTP collector for the duration of a test."""
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy", "ALL_PROXY", "all_proxy"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")

    collector = MockCollector()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _CollectorHandler)
    server.collector = collector
    collector.endpoint = f"127.0.0.1:{server.server_address[1]}"

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield collector
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def integration_settings() -> Settings:
    """Settings for fast ticks over plain HTTP."""
    return Settings(
        emit_interval_seconds=0.05,
        otlp_insecure=True,
        register_global_providers=False,
    )
