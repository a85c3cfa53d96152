"""Dialog: the unit of conversational logic pushed onto the dialog stack."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from parley.dialogs.enums import DialogReason, DialogTurnStatus
from parley.dialogs.models import DialogEvent, DialogInstance, DialogTurnResult
from parley.observability.telemetry import BotTelemetryClient, NullBotTelemetryClient

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext
    from parley.turn.context import TurnContext


class Dialog(ABC):
    """Base class for dialogs.

    A dialog is started with `begin_dialog`, receives later user turns in
    `continue_dialog`, is resumed with `resume_dialog` when a dialog it
    started ends, and is told why it is being popped in `end_dialog`.
    Returning `Dialog.END_OF_TURN` keeps the dialog on the stack until the
    next turn.
    """

    END_OF_TURN = DialogTurnResult(status=DialogTurnStatus.WAITING)

    def __init__(self, dialog_id: str | None = None) -> None:
        self._id = dialog_id
        self._telemetry_client: BotTelemetryClient = NullBotTelemetryClient()

    @property
    def id(self) -> str:
        if not self._id:
            self._id = self.on_compute_id()
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        self._id = value

    @property
    def telemetry_client(self) -> BotTelemetryClient:
        return self._telemetry_client

    @telemetry_client.setter
    def telemetry_client(self, value: BotTelemetryClient | None) -> None:
        self._telemetry_client = value if value is not None else NullBotTelemetryClient()

    def get_version(self) -> str:
        """Version string used to detect definition changes between turns."""
        return self.id

    @abstractmethod
    async def begin_dialog(
        self, dialog_context: "DialogContext", options: Any = None
    ) -> DialogTurnResult:
        """Called when the dialog is pushed onto the stack."""
        pass

    async def continue_dialog(self, dialog_context: "DialogContext") -> DialogTurnResult:
        """Called on each later turn while the dialog is active. Ends the dialog by default."""
        return await dialog_context.end_dialog(None)

    async def resume_dialog(
        self,
        dialog_context: "DialogContext",
        reason: DialogReason,
        result: Any = None,
    ) -> DialogTurnResult:
        """Called when a child dialog ended. Ends this dialog with the child's result by default."""
        return await dialog_context.end_dialog(result)

    async def reprompt_dialog(self, turn_context: "TurnContext", instance: DialogInstance) -> None:
        """Called when the dialog should re-send its last prompt."""
        return None

    async def end_dialog(
        self,
        turn_context: "TurnContext",
        instance: DialogInstance,
        reason: DialogReason,
    ) -> None:
        """Called just before the dialog's frame is popped."""
        return None

    async def on_dialog_event(self, dialog_context: "DialogContext", dialog_event: DialogEvent) -> bool:
        """Handle an event raised through the stack; returns True if handled.

        The pre-bubble hook runs first, then the event bubbles to the parent
        context (if allowed), then the post-bubble hook runs.
        """
        handled = await self.on_pre_bubble_event(dialog_context, dialog_event)

        if not handled and dialog_event.bubble and dialog_context.parent is not None:
            handled = await dialog_context.parent.emit_event(
                dialog_event.name, dialog_event.value, True, False
            )

        if not handled:
            handled = await self.on_post_bubble_event(dialog_context, dialog_event)

        return handled

    async def on_pre_bubble_event(
        self, dialog_context: "DialogContext", dialog_event: DialogEvent
    ) -> bool:
        return False

    async def on_post_bubble_event(
        self, dialog_context: "DialogContext", dialog_event: DialogEvent
    ) -> bool:
        return False

    def on_compute_id(self) -> str:
        return type(self).__qualname__

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
