"""Prometheus metrics for Parley."""

from prometheus_client import Counter, Histogram

# Turn metrics
DIALOG_TURNS = Counter(
    "parley_dialog_turns_total",
    "Dialog manager turns by resulting stack status",
    labelnames=["status"],
)

DIALOG_TURN_DURATION = Histogram(
    "parley_dialog_turn_duration_seconds",
    "Time spent running the dialog stack for one turn",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

# Telemetry metrics
TELEMETRY_EVENTS = Counter(
    "parley_telemetry_events_total",
    "Telemetry events emitted by dialogs",
    labelnames=["event"],
)

# Memory metrics
MEMORY_SCOPE_FAILURES = Counter(
    "parley_memory_scope_failures_total",
    "Best-effort memory scope load/save/delete failures",
    labelnames=["scope", "operation"],
)
