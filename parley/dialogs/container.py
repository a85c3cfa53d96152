"""DialogContainer: a dialog that hosts its own set of child dialogs."""

from abc import abstractmethod
from typing import TYPE_CHECKING

from parley.dialogs.dialog import Dialog
from parley.dialogs.dialog_set import DialogSet
from parley.dialogs.enums import DialogEvents
from parley.dialogs.models import DialogEvent
from parley.observability.logging import get_logger
from parley.observability.telemetry import BotTelemetryClient, Severity

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext

logger = get_logger(__name__)


class DialogContainer(Dialog):
    """A dialog with an inner DialogSet and a child DialogContext."""

    def __init__(self, dialog_id: str | None = None) -> None:
        super().__init__(dialog_id)
        self.dialogs = DialogSet()

    @Dialog.telemetry_client.setter
    def telemetry_client(self, value: BotTelemetryClient | None) -> None:
        Dialog.telemetry_client.fset(self, value)
        self.dialogs.telemetry_client = self.telemetry_client

    @abstractmethod
    def create_child_context(self, dialog_context: "DialogContext") -> "DialogContext | None":
        """Context over this container's inner stack, parented to dialog_context."""
        pass

    def find_dialog(self, dialog_id: str) -> Dialog | None:
        return self.dialogs.find(dialog_id)

    def get_internal_version(self) -> str:
        return self.dialogs.get_version()

    async def on_dialog_event(self, dialog_context: "DialogContext", dialog_event: DialogEvent) -> bool:
        handled = await super().on_dialog_event(dialog_context, dialog_event)

        if not handled and dialog_event.name == DialogEvents.VERSION_CHANGED.value:
            message = (
                f"Unhandled dialog event: {dialog_event.name}. Active Dialog: "
                f"{dialog_context.active_dialog.id if dialog_context.active_dialog else None}"
            )
            logger.warning("dialog_version_changed_unhandled", dialog_id=self.id)
            self.telemetry_client.track_trace(message, Severity.WARNING)

        return handled

    async def check_for_version_change(self, dialog_context: "DialogContext") -> bool:
        """Record the inner version on the active frame; emit versionChanged if it moved."""
        instance = dialog_context.active_dialog
        if instance is None:
            return False

        current = instance.version
        instance.version = self.get_internal_version()
        if current is not None and current != instance.version:
            logger.info("dialog_version_changed", dialog_id=self.id)
            return await dialog_context.emit_event(
                DialogEvents.VERSION_CHANGED.value, self.id, True, False
            )
        return False
