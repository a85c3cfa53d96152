"""Telemetry observer interface for the dialog stack.

Dialogs never talk to a telemetry sink directly: each dialog holds a
BotTelemetryClient, defaulting to NullBotTelemetryClient, which DialogSet
and ComponentDialog propagate to the dialogs they own.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from parley.observability.logging import get_logger
from parley.observability.metrics import TELEMETRY_EVENTS


class Severity(str, Enum):
    """Trace severity levels."""

    VERBOSE = "verbose"
    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class BotTelemetryClient(ABC):
    """Sink for telemetry emitted while dialogs run."""

    @abstractmethod
    def track_event(
        self,
        name: str,
        properties: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> None:
        """Record a named custom event."""
        pass

    @abstractmethod
    def track_dialog_view(
        self,
        dialog_name: str,
        properties: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> None:
        """Record that a dialog was started."""
        pass

    @abstractmethod
    def track_trace(
        self,
        message: str,
        severity: Severity = Severity.INFORMATION,
        properties: dict[str, str] | None = None,
    ) -> None:
        """Record a free-form trace message."""
        pass

    @abstractmethod
    def track_exception(
        self,
        exception: BaseException,
        properties: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> None:
        """Record an exception raised while a turn was processed."""
        pass

    def flush(self) -> None:
        """Flush buffered telemetry. No-op unless the sink buffers."""
        return None


class NullBotTelemetryClient(BotTelemetryClient):
    """Telemetry client that discards everything."""

    def track_event(self, name, properties=None, metrics=None) -> None:
        pass

    def track_dialog_view(self, dialog_name, properties=None, metrics=None) -> None:
        pass

    def track_trace(self, message, severity=Severity.INFORMATION, properties=None) -> None:
        pass

    def track_exception(self, exception, properties=None, metrics=None) -> None:
        pass


class LoggingTelemetryClient(BotTelemetryClient):
    """Telemetry client backed by structlog and prometheus counters."""

    def __init__(self, logger_name: str = "parley.telemetry", record_metrics: bool = True) -> None:
        self._logger = get_logger(logger_name)
        self._record_metrics = record_metrics

    def track_event(
        self,
        name: str,
        properties: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> None:
        if self._record_metrics:
            TELEMETRY_EVENTS.labels(event=name).inc()
        self._logger.info(
            "telemetry_event",
            telemetry_event=name,
            properties=properties or {},
            metrics=metrics or {},
        )

    def track_dialog_view(
        self,
        dialog_name: str,
        properties: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> None:
        self._logger.info(
            "dialog_view",
            dialog_name=dialog_name,
            properties=properties or {},
            metrics=metrics or {},
        )

    def track_trace(
        self,
        message: str,
        severity: Severity = Severity.INFORMATION,
        properties: dict[str, str] | None = None,
    ) -> None:
        log = self._logger.warning if severity in (
            Severity.WARNING,
            Severity.ERROR,
            Severity.CRITICAL,
        ) else self._logger.debug
        log("telemetry_trace", message=message, severity=severity.value, properties=properties or {})

    def track_exception(
        self,
        exception: BaseException,
        properties: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> None:
        self._logger.error(
            "telemetry_exception",
            error=str(exception),
            error_type=type(exception).__name__,
            properties=properties or {},
            metrics=metrics or {},
        )
