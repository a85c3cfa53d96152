"""Observability: structured logging, prometheus metrics and dialog telemetry."""
