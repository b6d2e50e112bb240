import logging
from unittest.mock import MagicMock, patch

import pytest

from nist_pubid.infrastructure import telemetry
from nist_pubid.infrastructure.logging import get_log_level, setup_logger


class TestLogging:
    """Test the logging setup."""

    @pytest.mark.unit
    def test_level_from_argument(self) -> None:
        assert get_log_level("debug") == logging.DEBUG
        assert get_log_level(" WARNING ") == logging.WARNING

    @pytest.mark.unit
    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == logging.ERROR

    @pytest.mark.unit
    def test_invalid_level_defaults_to_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        assert get_log_level() == logging.INFO
        monkeypatch.delenv("LOG_LEVEL")
        assert get_log_level() == logging.INFO

    @pytest.mark.unit
    @patch("nist_pubid.infrastructure.logging.coloredlogs")
    def test_setup_logger_installs_coloredlogs(self, mock_coloredlogs: MagicMock) -> None:
        level = setup_logger("debug")

        assert level == logging.DEBUG
        mock_coloredlogs.install.assert_called_once()
        assert mock_coloredlogs.install.call_args.kwargs["level"] == logging.DEBUG


class TestTelemetry:
    """Test the OpenTelemetry setup."""

    @pytest.mark.unit
    def test_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OTEL_TRACES_ENABLED", "false")
        assert telemetry.traces_enabled() is False
        assert telemetry.setup_opentelemetry() is False

    @pytest.mark.unit
    @patch("nist_pubid.infrastructure.telemetry.LoggingInstrumentor")
    @patch("nist_pubid.infrastructure.telemetry.trace")
    @patch("nist_pubid.infrastructure.telemetry.OTLPSpanExporter")
    def test_enabled(
        self,
        mock_exporter: MagicMock,
        mock_trace: MagicMock,
        mock_instrumentor: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("OTEL_TRACES_ENABLED", "true")
        monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4318/")

        assert telemetry.setup_opentelemetry("pubid-tests") is True
        mock_exporter.assert_called_once_with(endpoint="http://collector:4318/v1/traces")
        mock_trace.set_tracer_provider.assert_called_once()
        mock_instrumentor.return_value.instrument.assert_called_once_with(set_logging_format=False)

    @pytest.mark.unit
    @patch("nist_pubid.infrastructure.telemetry.trace")
    @patch("nist_pubid.infrastructure.telemetry.OTLPSpanExporter")
    def test_exporter_failure(
        self,
        mock_exporter: MagicMock,
        mock_trace: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        monkeypatch.setenv("OTEL_TRACES_ENABLED", "1")
        mock_exporter.side_effect = RuntimeError("no collector")

        assert telemetry.setup_opentelemetry() is False
        mock_trace.set_tracer_provider.assert_not_called()
        assert "no collector" in caplog.text
