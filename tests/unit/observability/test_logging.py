"""Tests for structlog configuration and PII redaction."""

import json
from collections.abc import Iterator

import pytest
import structlog

from parley.observability.logging import (
    LEVELS,
    REDACTED,
    PIIRedactor,
    get_logger,
    setup_logging,
)


def _events(stderr: str) -> list[dict]:
    return [json.loads(line) for line in stderr.splitlines() if line.strip()]


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Drop logging configuration bound to the captured stream."""
    yield
    structlog.reset_defaults()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should write one JSON object per event with level and timestamp."""
        setup_logging(level="INFO", format="json", redact_pii=False)

        get_logger("parley.dialogs.manager").info("dialog_turn_completed", stack_depth=1)

        (event,) = _events(capsys.readouterr().err)
        assert event["event"] == "dialog_turn_completed"
        assert event["stack_depth"] == 1
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_filters_below_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should drop events below the configured level."""
        setup_logging(level="warning", format="json", redact_pii=False)
        logger = get_logger("test")

        logger.info("hidden")
        logger.warning("shown")

        assert [e["event"] for e in _events(capsys.readouterr().err)] == ["shown"]

    def test_unknown_level_means_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should treat an unknown level name as INFO."""
        setup_logging(level="verbose", format="json", redact_pii=False)
        logger = get_logger("test")

        logger.debug("hidden")
        logger.info("shown")

        assert LEVELS["INFO"] == 20
        assert [e["event"] for e in _events(capsys.readouterr().err)] == ["shown"]

    def test_redaction_enabled(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should redact logged values when redact_pii is on."""
        setup_logging(level="INFO", format="json", redact_pii=True)

        get_logger("test").info("profile_saved", email="user@example.com")

        (event,) = _events(capsys.readouterr().err)
        assert event["email"] == REDACTED

    def test_console_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should render human-readable lines for development."""
        setup_logging(level="DEBUG", format="console", redact_pii=False)

        get_logger("test").debug("dialog_started", dialog_id="root")

        err = capsys.readouterr().err
        assert "dialog_started" in err
        assert "dialog_id" in err

    def test_merges_bound_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should include contextvars bound around the call."""
        setup_logging(level="INFO", format="json", redact_pii=False)

        with structlog.contextvars.bound_contextvars(conversation_id="Convo1"):
            get_logger("test").info("turn_started")

        (event,) = _events(capsys.readouterr().err)
        assert event["conversation_id"] == "Convo1"


class TestPIIRedactor:
    """Tests for PIIRedactor."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    @pytest.mark.parametrize("key", ["password", "Token", "API_KEY", "email", "Authorization"])
    def test_masks_sensitive_keys(self, redactor: PIIRedactor, key: str) -> None:
        """Should mask sensitive keys regardless of casing."""
        result = redactor(None, None, {key: "value", "data": "ok"})  # type: ignore[arg-type]
        assert result == {key: REDACTED, "data": "ok"}

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Contact user@example.com for help", "Contact [EMAIL] for help"),
            ("Call me at +1-555-123-4567", "Call me at [PHONE]"),
            ("my ssn is 123-45-6789", "my ssn is [SSN]"),
            ("order 42 shipped", "order 42 shipped"),
        ],
    )
    def test_scrubs_string_values(self, redactor: PIIRedactor, text: str, expected: str) -> None:
        """Should replace personal data found inside free text."""
        result = redactor(None, None, {"message": text})  # type: ignore[arg-type]
        assert result["message"] == expected

    def test_walks_memory_snapshot(self, redactor: PIIRedactor) -> None:
        """Should redact nested snapshot mappings and their lists."""
        event_dict = {
            "event": "dialog_state_snapshot",
            "snapshot": {
                "user": {"email": "user@example.com", "name": "John"},
                "conversation": {"notes": ["reach me at jo@example.org"]},
            },
        }

        result = redactor(None, None, event_dict)  # type: ignore[arg-type]

        snapshot = result["snapshot"]
        assert snapshot["user"] == {"email": REDACTED, "name": "John"}
        assert snapshot["conversation"]["notes"] == ["reach me at [EMAIL]"]
        assert event_dict["snapshot"]["user"]["email"] == "user@example.com"

    def test_leaves_dialog_fields(self, redactor: PIIRedactor) -> None:
        """Should pass through ordinary dialog events unchanged."""
        event_dict = {"event": "dialog_turn_completed", "stack_depth": 2, "status": "waiting"}
        assert redactor(None, None, dict(event_dict)) == event_dict  # type: ignore[arg-type]

    def test_custom_keys(self) -> None:
        """Should mask only the keys it was given."""
        redactor = PIIRedactor(keys=["Nickname"])
        event_dict = {"nickname": "jo", "password": "pw"}

        result = redactor(None, None, event_dict)  # type: ignore[arg-type]

        assert result == {"nickname": REDACTED, "password": "pw"}
