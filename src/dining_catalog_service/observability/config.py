"""Telemetry and log setup for the catalog service.

Everything here is driven by environment variables so the same code runs in
Lambda, under uvicorn and in tests:

- ``OTEL_SERVICE_NAME``, ``ENVIRONMENT`` and ``DINING_TIMEZONE`` describe the
  service on every span and metric.
- ``OTEL_EXPORTER_OTLP_ENDPOINT`` is the collector base URL, with per-signal
  ``/v1/traces`` and ``/v1/metrics`` paths appended.
- ``OTEL_METRIC_EXPORT_INTERVAL`` is the metric push period in milliseconds.
- ``LOG_LEVEL`` overrides the level passed to :func:`configure_logging`.
"""

import logging
import os
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "dining-catalog-service"
DEFAULT_COLLECTOR = "http://localhost:4318"
DEFAULT_EXPORT_INTERVAL_MS = 60000

# Chatty at INFO; one line per feed request or DynamoDB call.
QUIET_LOGGERS = ("httpx", "httpcore", "botocore", "boto3", "urllib3")


@dataclass
class TelemetrySettings:
    """Telemetry options resolved from the environment."""

    service_name: str
    environment: str
    collector: str
    export_interval_ms: int

    @property
    def exporters_enabled(self) -> bool:
        return self.environment != "test"

    def signal_endpoint(self, signal: str) -> str:
        """OTLP/HTTP URL of one signal (``traces`` or ``metrics``)."""
        return f"{self.collector.rstrip('/')}/v1/{signal}"


def load_settings() -> TelemetrySettings:
    raw_interval = os.getenv("OTEL_METRIC_EXPORT_INTERVAL", "")
    try:
        interval = int(raw_interval) if raw_interval else DEFAULT_EXPORT_INTERVAL_MS
    except ValueError:
        logger.warning(f"Ignoring invalid OTEL_METRIC_EXPORT_INTERVAL '{raw_interval}'")
        interval = DEFAULT_EXPORT_INTERVAL_MS

    return TelemetrySettings(
        service_name=os.getenv("OTEL_SERVICE_NAME", "dining-catalog"),
        environment=os.getenv("ENVIRONMENT", "development"),
        collector=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_COLLECTOR),
        export_interval_ms=max(interval, 1000),
    )


def _service_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "unknown"


def get_service_resource(settings: TelemetrySettings | None = None) -> Resource:
    """Describe the catalog service on every span and metric.

    Args:
        settings: Resolved telemetry settings, loaded from the environment when omitted

    Returns:
        Resource with service name, version, deployment environment and the
        timezone used for day keys
    """
    settings = settings or load_settings()
    return Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": _service_version(),
            "deployment.environment": settings.environment,
            "dining.timezone": os.getenv("DINING_TIMEZONE", "America/New_York"),
        }
    )


def setup_tracing(resource: Resource, settings: TelemetrySettings) -> None:
    """Install a tracer provider that batches spans to the collector."""
    endpoint = settings.signal_endpoint("traces")
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)

    logger.info(f"Span export to {endpoint}")


def setup_metrics(resource: Resource, settings: TelemetrySettings) -> None:
    """Install a meter provider that pushes refresh and cache metrics periodically."""
    endpoint = settings.signal_endpoint("metrics")
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=endpoint),
        export_interval_millis=settings.export_interval_ms,
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))

    logger.info(f"Metric export to {endpoint} every {settings.export_interval_ms}ms")


def setup_observability(app: Any = None, enable_exporters: bool = True) -> bool:
    """Set up telemetry for feed requests and, optionally, the catalog API.

    Args:
        app: FastAPI application whose routes should be traced
        enable_exporters: Push spans and metrics to the collector; never done
            when ENVIRONMENT=test

    Returns:
        bool: True if OTLP exporters were installed
    """
    settings = load_settings()
    resource = get_service_resource(settings)
    exporting = enable_exporters and settings.exporters_enabled

    if exporting:
        setup_tracing(resource, settings)
        setup_metrics(resource, settings)
    else:
        trace.set_tracer_provider(TracerProvider(resource=resource))
        metrics.set_meter_provider(MeterProvider(resource=resource))

    httpx_instrumentor = HTTPXClientInstrumentor()
    if not httpx_instrumentor.is_instrumented_by_opentelemetry:
        httpx_instrumentor.instrument()

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls="health")
        logger.info("Catalog API routes instrumented")

    logger.info(f"Telemetry for {settings.service_name} ready (exporting={exporting})")
    return exporting


def configure_logging(log_level: str = "INFO") -> None:
    """Send JSON log lines to stderr through the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            overridden by the LOG_LEVEL environment variable
    """
    level_name = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
            timestamp=True,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # Library debug output only when the service itself runs at DEBUG.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    logger.info(f"JSON logging at {level_name}")
