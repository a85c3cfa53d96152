"""DialogContext: the dialog stack state machine for one turn."""

from typing import Any

from parley.dialogs import object_path
from parley.dialogs.container import DialogContainer
from parley.dialogs.dialog import Dialog
from parley.dialogs.dialog_set import DialogSet
from parley.dialogs.enums import DialogEvents, DialogReason, DialogTurnStatus
from parley.dialogs.memory.scopes.turn import turn_memory
from parley.dialogs.memory.state_manager import DialogStateManager
from parley.dialogs.models import DialogEvent, DialogInstance, DialogState, DialogTurnResult
from parley.dialogs.paths import TurnPath
from parley.exceptions import (
    DialogNotFoundError,
    InvalidArgumentError,
    InvalidDialogStateError,
)
from parley.observability.logging import get_logger
from parley.turn.context import TurnContext

logger = get_logger(__name__)

# Turn state flag set once activityReceived has been raised this turn
ACTIVITY_RECEIVED_EMITTED = "activityReceivedEmitted"


class DialogContext:
    """Owns the live dialog stack for the current turn.

    The stack is the `dialog_stack` list of the DialogState it was created
    with, so pushes and pops are persisted when that state is saved. The
    last element is the active dialog.
    """

    def __init__(
        self,
        dialogs: DialogSet,
        turn_context: TurnContext,
        state: DialogState,
        parent: "DialogContext | None" = None,
    ) -> None:
        if dialogs is None:
            raise InvalidArgumentError("dialogs is required")
        if turn_context is None:
            raise InvalidArgumentError("turn_context is required")
        if state is None:
            raise InvalidArgumentError("state is required")

        self.dialogs = dialogs
        self.context = turn_context
        self.parent = parent
        self.stack: list[DialogInstance] = state.dialog_stack
        self.services: dict[str, Any] = dict(parent.services) if parent is not None else {}
        self._state: DialogStateManager | None = None

        # set directly; not version tracked
        memory = turn_memory(turn_context.turn_state)
        object_path.set_path_value(memory, TurnPath.ACTIVITY.removeprefix("turn."), turn_context.activity)

    @property
    def active_dialog(self) -> DialogInstance | None:
        return self.stack[-1] if self.stack else None

    @property
    def child(self) -> "DialogContext | None":
        """Context of the active dialog's inner stack, if it is a container."""
        instance = self.active_dialog
        if instance is not None:
            dialog = self.find_dialog(instance.id)
            if isinstance(dialog, DialogContainer):
                return dialog.create_child_context(self)
        return None

    @property
    def state(self) -> DialogStateManager:
        if self._state is None:
            self._state = DialogStateManager(self)
        return self._state

    def find_dialog(self, dialog_id: str) -> Dialog | None:
        """Find a dialog in this context's set, then in the parents' sets."""
        dialog = self.dialogs.find(dialog_id)
        if dialog is None and self.parent is not None:
            dialog = self.parent.find_dialog(dialog_id)
        return dialog

    async def begin_dialog(self, dialog_id: str, options: Any = None) -> DialogTurnResult:
        """Push a new frame for dialog_id and start that dialog.

        Raises:
            InvalidArgumentError: If dialog_id is empty
            DialogNotFoundError: If no current or parent set registers dialog_id
        """
        if not dialog_id:
            raise InvalidArgumentError("dialog_id is required")

        dialog = self.find_dialog(dialog_id)
        if dialog is None:
            raise DialogNotFoundError(dialog_id)

        self.stack.append(DialogInstance(id=dialog_id, state={}))
        logger.debug("dialog_started", dialog_id=dialog_id, depth=len(self.stack))
        return await dialog.begin_dialog(self, options)

    async def continue_dialog(self) -> DialogTurnResult:
        """Resume the active dialog with this turn's input, or report EMPTY."""
        turn_state = self.context.turn_state
        if ACTIVITY_RECEIVED_EMITTED not in turn_state:
            turn_state[ACTIVITY_RECEIVED_EMITTED] = True
            await self.emit_event(
                DialogEvents.ACTIVITY_RECEIVED.value, self.context.activity, True, True
            )

        instance = self.active_dialog
        if instance is None:
            return DialogTurnResult(status=DialogTurnStatus.EMPTY)

        dialog = self.find_dialog(instance.id)
        if dialog is None:
            raise InvalidDialogStateError(
                f"Failed to continue dialog. A dialog with id {instance.id} could not be found."
            )
        return await dialog.continue_dialog(self)

    async def end_dialog(self, result: Any = None) -> DialogTurnResult:
        """End the active dialog and resume its parent frame with result."""
        await self.end_active_dialog(DialogReason.END_CALLED, result)

        instance = self.active_dialog
        if instance is None:
            return DialogTurnResult(status=DialogTurnStatus.COMPLETE, result=result)

        dialog = self.find_dialog(instance.id)
        if dialog is None:
            raise InvalidDialogStateError(
                f"DialogContext.end_dialog(): Can't resume previous dialog. "
                f"A dialog with an id of '{instance.id}' wasn't found."
            )
        return await dialog.resume_dialog(self, DialogReason.END_CALLED, result)

    async def end_active_dialog(self, reason: DialogReason, result: Any = None) -> None:
        """Notify the active dialog it is ending, then pop its frame."""
        instance = self.active_dialog
        if instance is None:
            return

        dialog = self.find_dialog(instance.id)
        if dialog is not None:
            await dialog.end_dialog(self.context, instance, reason)

        self.stack.pop()
        self.state.set_value(TurnPath.LAST_RESULT, result)
        logger.debug("dialog_ended", dialog_id=instance.id, reason=reason.value)

    async def cancel_all_dialogs(
        self,
        cancel_parents: bool = False,
        event_name: str | None = None,
        event_value: Any = None,
    ) -> DialogTurnResult:
        """Pop every frame top-down with CANCEL_CALLED.

        Every frame after the first is offered the cancel event first and can
        stop the cancellation by handling it. With cancel_parents, parent
        contexts are cancelled as well.
        """
        event_name = event_name or DialogEvents.CANCEL_DIALOG.value
        if not self.stack and self.parent is None:
            return DialogTurnResult(status=DialogTurnStatus.EMPTY)

        notify = False
        dialog_context: DialogContext | None = self
        while dialog_context is not None:
            if dialog_context.stack:
                if notify:
                    handled = await dialog_context.emit_event(event_name, event_value, False, False)
                    if handled:
                        logger.debug("dialog_cancel_intercepted", event_name=event_name)
                        break
                await dialog_context.end_active_dialog(DialogReason.CANCEL_CALLED)
            else:
                dialog_context = dialog_context.parent if cancel_parents else None
            notify = True

        return DialogTurnResult(status=DialogTurnStatus.CANCELLED)

    async def replace_dialog(self, dialog_id: str, options: Any = None) -> DialogTurnResult:
        """End the active dialog and start dialog_id in its place on the same turn."""
        instance = self.active_dialog
        if instance is not None:
            self.state.set_value(TurnPath.REPEAT_DIALOG_ID, instance.id)

        await self.end_active_dialog(DialogReason.REPLACE_CALLED)
        return await self.begin_dialog(dialog_id, options)

    async def reprompt_dialog(self) -> None:
        """Ask the active dialog to re-send its prompt, unless an event handler does."""
        instance = self.active_dialog
        if instance is None:
            return

        handled = await self.emit_event(DialogEvents.REPROMPT_DIALOG.value, None, False, False)
        if not handled:
            dialog = self.find_dialog(instance.id)
            if dialog is None:
                raise InvalidDialogStateError(
                    f"DialogContext.reprompt_dialog(): Can't find a dialog with an id of '{instance.id}'."
                )
            await dialog.reprompt_dialog(self.context, instance)

    async def emit_event(
        self,
        name: str,
        value: Any = None,
        bubble: bool = True,
        from_leaf: bool = False,
    ) -> bool:
        """Raise an event on the active dialog (or the deepest child's).

        Returns True if a dialog handled it.
        """
        dialog_event = DialogEvent(bubble=bubble, name=name, value=value)

        dialog_context: DialogContext = self
        if from_leaf:
            while (child := dialog_context.child) is not None:
                dialog_context = child

        dialog_context.state.set_value(TurnPath.DIALOG_EVENT, dialog_event)

        instance = dialog_context.active_dialog
        if instance is None:
            return False
        dialog = dialog_context.find_dialog(instance.id)
        if dialog is None:
            return False
        return await dialog.on_dialog_event(dialog_context, dialog_event)

    def __repr__(self) -> str:
        return f"DialogContext(stack={[instance.id for instance in self.stack]!r})"
