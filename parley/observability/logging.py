"""Structured logging for Parley built on structlog.

Turns are logged as key/value events. Adapters bind ``conversation_id``,
``channel_id`` and ``activity_id`` to structlog contextvars for the duration
of a turn, so every event emitted while a dialog runs carries them.

Dialog state snapshots contain whatever users typed into memory, which is why
`setup_logging` installs `PIIRedactor` unless told otherwise.
"""

import re
import sys
from collections.abc import Iterable, Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED = "[REDACTED]"

# Property names whose values are never logged
CREDENTIAL_KEYS = ("password", "passwd", "secret", "token", "access_token", "refresh_token",
                   "api_key", "apikey", "authorization", "credential", "credentials", "pin")
PERSONAL_KEYS = ("email", "phone", "ssn", "credit_card", "card_number", "cvv")

# Applied in order to every string value
VALUE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
    (re.compile(r"\d{3}-\d{2}-\d{4}"), "[SSN]"),
    (re.compile(r"\+?[\d\s\-\(\)]{10,}"), "[PHONE]"),
)

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}


class PIIRedactor:
    """structlog processor masking personal data in events.

    Keys named in `keys` (compared case-insensitively) have their values
    replaced with ``[REDACTED]``. Other string values are scrubbed with
    `VALUE_PATTERNS`. Mappings, lists and tuples are walked, so a logged
    memory snapshot is redacted at every depth.
    """

    def __init__(self, keys: Iterable[str] | None = None) -> None:
        names = keys if keys is not None else (*CREDENTIAL_KEYS, *PERSONAL_KEYS)
        self.keys = frozenset(name.lower() for name in names)

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._scrub_mapping(event_dict))

    def _scrub_mapping(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            key: REDACTED if str(key).lower() in self.keys else self._scrub(value)
            for key, value in data.items()
        }

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            for pattern, label in VALUE_PATTERNS:
                value = pattern.sub(label, value)
            return value
        if isinstance(value, Mapping):
            return self._scrub_mapping(value)
        if isinstance(value, list | tuple):
            return [self._scrub(item) for item in value]
        return value


def _renderer(format: str) -> Processor:
    if format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name; unknown names fall back to INFO
        format: "json" for production, anything else renders for a console
        redact_pii: Whether to install `PIIRedactor` before rendering
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if redact_pii:
        processors.append(PIIRedactor())
    processors.append(_renderer(format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            LEVELS.get(level.upper(), LEVELS["INFO"])
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a logger named after the calling module."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
