"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from parley.observability.metrics import (
    DIALOG_TURN_DURATION,
    DIALOG_TURNS,
    MEMORY_SCOPE_FAILURES,
    TELEMETRY_EVENTS,
)


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestDialogTurns:
    """Tests for DIALOG_TURNS counter."""

    def test_counter_increment(self) -> None:
        """Should increment counter by status label."""
        before = _sample("parley_dialog_turns_total", {"status": "waiting"})
        DIALOG_TURNS.labels(status="waiting").inc()
        assert _sample("parley_dialog_turns_total", {"status": "waiting"}) == before + 1


class TestDialogTurnDuration:
    """Tests for DIALOG_TURN_DURATION histogram."""

    def test_histogram_observe(self) -> None:
        """Should count observed durations."""
        before = _sample("parley_dialog_turn_duration_seconds_count")
        DIALOG_TURN_DURATION.observe(0.02)
        assert _sample("parley_dialog_turn_duration_seconds_count") == before + 1


class TestTelemetryEvents:
    """Tests for TELEMETRY_EVENTS counter."""

    def test_counter_with_event_label(self) -> None:
        """Should accept the event label."""
        labels = {"event": "WaterfallStart"}
        before = _sample("parley_telemetry_events_total", labels)
        TELEMETRY_EVENTS.labels(**labels).inc()
        assert _sample("parley_telemetry_events_total", labels) == before + 1


class TestMemoryScopeFailures:
    """Tests for MEMORY_SCOPE_FAILURES counter."""

    def test_counter_with_scope_and_operation(self) -> None:
        """Should accept scope and operation labels."""
        labels = {"scope": "conversation", "operation": "save"}
        before = _sample("parley_memory_scope_failures_total", labels)
        MEMORY_SCOPE_FAILURES.labels(**labels).inc()
        assert _sample("parley_memory_scope_failures_total", labels) == before + 1
