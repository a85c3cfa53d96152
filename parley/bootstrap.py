"""Wire logging and a DialogManager from configuration.

Example usage:

    from parley.bootstrap import bootstrap

    manager = bootstrap(root_dialog=MyDialog())
    adapter = InMemoryAdapter()
    replies = await adapter.send("hi", manager.on_turn)
"""

from parley.config import Settings, get_settings
from parley.dialogs.dialog import Dialog
from parley.dialogs.manager import DialogManager
from parley.observability.logging import get_logger, setup_logging
from parley.observability.telemetry import LoggingTelemetryClient
from parley.state.states import ConversationState, UserState
from parley.state.storage import Storage
from parley.state.stores.inmemory import InMemoryStorage

logger = get_logger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure structlog from the log level and observability settings."""
    logging_config = settings.observability.logging
    setup_logging(
        level=settings.effective_log_level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
    )


def bootstrap(
    root_dialog: Dialog,
    storage: Storage | None = None,
    settings: Settings | None = None,
) -> DialogManager:
    """Create a DialogManager with conversation/user state over storage.

    Args:
        root_dialog: Dialog to run for every conversation
        storage: State storage (default: InMemoryStorage)
        settings: Settings (default: get_settings())
    """
    settings = settings or get_settings()
    configure_logging(settings)

    storage = storage or InMemoryStorage()
    metrics_enabled = settings.observability.metrics.enabled

    manager = DialogManager(
        root_dialog=root_dialog,
        conversation_state=ConversationState(storage),
        user_state=UserState(storage),
        config=settings.dialogs,
        configuration=settings,
        record_metrics=metrics_enabled,
    )
    manager.dialogs.telemetry_client = LoggingTelemetryClient(record_metrics=metrics_enabled)
    logger.info(
        "dialog_manager_bootstrapped",
        app_name=settings.app_name,
        root_dialog_id=root_dialog.id,
        storage=type(storage).__name__,
    )
    return manager
