"""Unit tests for tracing decorators and logging configuration."""

import logging
import os
from unittest.mock import Mock, patch

import pytest
from pythonjsonlogger import jsonlogger

from dining_catalog_service.observability import configure_logging, setup_observability, traced
from dining_catalog_service.observability.config import (
    DEFAULT_EXPORT_INTERVAL_MS,
    QUIET_LOGGERS,
    get_service_resource,
    load_settings,
)


@traced("double")
def double(value: int) -> int:
    return value * 2


@traced()
async def fail_async() -> None:
    raise RuntimeError("boom")


@pytest.mark.unit
class TestTraced:
    """Tests for the traced decorator."""

    def test_sync_function_result_passes_through(self) -> None:
        """Test that a traced function returns its result unchanged."""
        assert double(21) == 42
        assert double.__name__ == "double"

    @pytest.mark.asyncio
    async def test_async_exception_is_reraised(self) -> None:
        """Test that errors from traced coroutines propagate."""
        with pytest.raises(RuntimeError, match="boom"):
            await fail_async()


@pytest.mark.unit
def test_configure_logging_honours_log_level_env() -> None:
    """Test that LOG_LEVEL overrides the argument and output is JSON."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            configure_logging("INFO")

        assert root.level == logging.DEBUG
        assert any(isinstance(h.formatter, jsonlogger.JsonFormatter) for h in root.handlers)
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


@pytest.mark.unit
class TestTelemetrySettings:
    """Tests for environment-driven telemetry settings."""

    def test_resource_describes_service(self) -> None:
        """Test that the resource carries name, environment and timezone."""
        env = {
            "OTEL_SERVICE_NAME": "dining-catalog-staging",
            "ENVIRONMENT": "staging",
            "DINING_TIMEZONE": "America/Chicago",
        }
        with patch.dict(os.environ, env):
            attributes = get_service_resource().attributes

        assert attributes["service.name"] == "dining-catalog-staging"
        assert attributes["deployment.environment"] == "staging"
        assert attributes["dining.timezone"] == "America/Chicago"
        assert attributes["service.version"]

    def test_signal_endpoints_and_interval(self) -> None:
        """Test per-signal OTLP URLs and the metric export interval."""
        env = {
            "OTEL_EXPORTER_OTLP_ENDPOINT": "http://collector:4318/",
            "OTEL_METRIC_EXPORT_INTERVAL": "15000",
            "ENVIRONMENT": "production",
        }
        with patch.dict(os.environ, env):
            settings = load_settings()

        assert settings.signal_endpoint("traces") == "http://collector:4318/v1/traces"
        assert settings.signal_endpoint("metrics") == "http://collector:4318/v1/metrics"
        assert settings.export_interval_ms == 15000
        assert settings.exporters_enabled is True

    def test_invalid_interval_falls_back_to_default(self) -> None:
        """Test that a malformed export interval is ignored."""
        with patch.dict(os.environ, {"OTEL_METRIC_EXPORT_INTERVAL": "soon"}):
            settings = load_settings()

        assert settings.export_interval_ms == DEFAULT_EXPORT_INTERVAL_MS

    @patch("dining_catalog_service.observability.config.HTTPXClientInstrumentor")
    @patch("dining_catalog_service.observability.config.setup_metrics")
    @patch("dining_catalog_service.observability.config.setup_tracing")
    def test_test_environment_never_exports(
        self, mock_tracing: Mock, mock_metrics: Mock, mock_instrumentor: Mock
    ) -> None:
        """Test that ENVIRONMENT=test keeps OTLP exporters off."""
        mock_instrumentor.return_value.is_instrumented_by_opentelemetry = True

        with patch.dict(os.environ, {"ENVIRONMENT": "test"}):
            exporting = setup_observability(enable_exporters=True)

        assert exporting is False
        mock_tracing.assert_not_called()
        mock_metrics.assert_not_called()
        mock_instrumentor.return_value.instrument.assert_not_called()


@pytest.mark.unit
def test_configure_logging_quiets_client_libraries() -> None:
    """Test that HTTP and AWS client loggers stay at WARNING unless debugging."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        with patch.dict(os.environ, {"LOG_LEVEL": "INFO"}):
            configure_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("botocore").level == logging.WARNING
        assert len(root.handlers) == 1
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)
