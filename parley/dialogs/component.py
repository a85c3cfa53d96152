"""ComponentDialog: a reusable dialog built from an inner set of dialogs."""

from typing import Any

from parley.dialogs.container import DialogContainer
from parley.dialogs.context import DialogContext
from parley.dialogs.dialog import Dialog
from parley.dialogs.enums import DialogReason, DialogTurnStatus
from parley.dialogs.models import DialogInstance, DialogTurnResult, as_dialog_state
from parley.exceptions import InvalidArgumentError
from parley.turn.context import TurnContext

PERSISTED_DIALOG_STATE = "dialogs"


class ComponentDialog(DialogContainer):
    """Runs an inner dialog stack inside one frame of the outer stack.

    The inner stack is stored in the component's frame state under
    ``"dialogs"``. The component ends, returning the inner result, once the
    inner stack is no longer waiting.
    """

    def __init__(self, dialog_id: str | None = None) -> None:
        super().__init__(dialog_id)
        self.initial_dialog_id: str | None = None

    def add_dialog(self, dialog: Dialog) -> "ComponentDialog":
        """Add an inner dialog; the first one added becomes the initial dialog."""
        self.dialogs.add(dialog)
        if self.initial_dialog_id is None:
            self.initial_dialog_id = dialog.id
        return self

    async def begin_dialog(self, dialog_context: DialogContext, options: Any = None) -> DialogTurnResult:
        if dialog_context is None:
            raise InvalidArgumentError("dialog_context is required")

        await self.check_for_version_change(dialog_context)
        inner_dc = self.create_child_context(dialog_context)
        turn_result = await self.on_begin_dialog(inner_dc, options)

        if turn_result.status != DialogTurnStatus.WAITING:
            return await self.end_component(dialog_context, turn_result.result)

        self.telemetry_client.track_dialog_view(self.id)
        return Dialog.END_OF_TURN

    async def continue_dialog(self, dialog_context: DialogContext) -> DialogTurnResult:
        if dialog_context is None:
            raise InvalidArgumentError("dialog_context is required")

        await self.check_for_version_change(dialog_context)
        inner_dc = self.create_child_context(dialog_context)
        turn_result = await self.on_continue_dialog(inner_dc)

        if turn_result.status != DialogTurnStatus.WAITING:
            return await self.end_component(dialog_context, turn_result.result)

        return Dialog.END_OF_TURN

    async def resume_dialog(
        self,
        dialog_context: DialogContext,
        reason: DialogReason,
        result: Any = None,
    ) -> DialogTurnResult:
        # The inner stack is still waiting, so a child ending in the outer
        # stack just re-prompts whatever the inner stack is waiting on.
        await self.reprompt_dialog(dialog_context.context, dialog_context.active_dialog)
        return Dialog.END_OF_TURN

    async def reprompt_dialog(self, turn_context: TurnContext, instance: DialogInstance) -> None:
        inner_dc = self._inner_context(turn_context, instance)
        await inner_dc.reprompt_dialog()
        await self.on_reprompt_dialog(turn_context, instance)

    async def end_dialog(
        self,
        turn_context: TurnContext,
        instance: DialogInstance,
        reason: DialogReason,
    ) -> None:
        if reason == DialogReason.CANCEL_CALLED:
            inner_dc = self._inner_context(turn_context, instance)
            await inner_dc.cancel_all_dialogs()
        await self.on_end_dialog(turn_context, instance, reason)

    def create_child_context(self, dialog_context: DialogContext) -> DialogContext:
        return self._inner_context(dialog_context.context, dialog_context.active_dialog, dialog_context)

    async def on_begin_dialog(self, inner_dc: DialogContext, options: Any) -> DialogTurnResult:
        return await inner_dc.begin_dialog(self.initial_dialog_id, options)

    async def on_continue_dialog(self, inner_dc: DialogContext) -> DialogTurnResult:
        return await inner_dc.continue_dialog()

    async def on_end_dialog(
        self,
        turn_context: TurnContext,
        instance: DialogInstance,
        reason: DialogReason,
    ) -> None:
        return None

    async def on_reprompt_dialog(self, turn_context: TurnContext, instance: DialogInstance) -> None:
        return None

    async def end_component(self, outer_dc: DialogContext, result: Any) -> DialogTurnResult:
        return await outer_dc.end_dialog(result)

    def _inner_context(
        self,
        turn_context: TurnContext,
        instance: DialogInstance,
        parent: DialogContext | None = None,
    ) -> DialogContext:
        state = as_dialog_state(instance.state.get(PERSISTED_DIALOG_STATE))
        instance.state[PERSISTED_DIALOG_STATE] = state
        return DialogContext(self.dialogs, turn_context, state, parent=parent)
