"""Tests for telemetry clients."""

import json
from io import StringIO

import pytest
import structlog
from prometheus_client import REGISTRY

from parley.observability.telemetry import (
    BotTelemetryClient,
    LoggingTelemetryClient,
    NullBotTelemetryClient,
    Severity,
)


@pytest.fixture
def log_output() -> StringIO:
    """Route structlog output to a buffer as JSON lines."""
    output = StringIO()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(output),
        cache_logger_on_first_use=False,
    )
    return output


def _lines(output: StringIO) -> list[dict]:
    return [json.loads(line) for line in output.getvalue().splitlines() if line.strip()]


class TestBotTelemetryClient:
    """Tests for the abstract client."""

    def test_cannot_instantiate(self) -> None:
        """Should require the track_* methods to be implemented."""
        with pytest.raises(TypeError):
            BotTelemetryClient()  # type: ignore[abstract]


class TestNullBotTelemetryClient:
    """Tests for NullBotTelemetryClient."""

    def test_discards_everything(self) -> None:
        """Should accept every call without side effects."""
        client = NullBotTelemetryClient()
        client.track_event("WaterfallStart", {"DialogId": "test"})
        client.track_dialog_view("test")
        client.track_trace("message", Severity.WARNING)
        client.track_exception(ValueError("boom"))
        client.flush()


class TestLoggingTelemetryClient:
    """Tests for LoggingTelemetryClient."""

    def test_track_event_logs_properties(self, log_output: StringIO) -> None:
        """Should log the event name and its properties."""
        client = LoggingTelemetryClient(record_metrics=False)
        client.track_event("WaterfallStep", {"DialogId": "test", "StepName": "Step1of3"})

        (line,) = _lines(log_output)
        assert line["event"] == "telemetry_event"
        assert line["telemetry_event"] == "WaterfallStep"
        assert line["properties"] == {"DialogId": "test", "StepName": "Step1of3"}

    def test_track_event_counts_metric(self, log_output: StringIO) -> None:
        """Should increment the telemetry events counter when enabled."""
        labels = {"event": "WaterfallComplete"}
        before = REGISTRY.get_sample_value("parley_telemetry_events_total", labels) or 0.0

        LoggingTelemetryClient().track_event("WaterfallComplete")

        after = REGISTRY.get_sample_value("parley_telemetry_events_total", labels)
        assert after == before + 1

    def test_warning_trace_logged_at_warning(self, log_output: StringIO) -> None:
        """Should log warning and above traces at warning level."""
        client = LoggingTelemetryClient(record_metrics=False)
        client.track_trace("Unhandled dialog event: versionChanged", Severity.WARNING)
        client.track_trace("details", Severity.VERBOSE)

        warning, verbose = _lines(log_output)
        assert warning["level"] == "warning"
        assert warning["severity"] == "warning"
        assert verbose["level"] == "debug"

    def test_track_exception(self, log_output: StringIO) -> None:
        """Should log the exception type and message."""
        LoggingTelemetryClient(record_metrics=False).track_exception(KeyError("missing"))

        (line,) = _lines(log_output)
        assert line["level"] == "error"
        assert line["error_type"] == "KeyError"
