"""WaterfallDialog: a dialog that runs an ordered list of steps."""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any
from uuid import uuid4

from parley.dialogs.context import DialogContext
from parley.dialogs.dialog import Dialog
from parley.dialogs.enums import DialogReason
from parley.dialogs.models import DialogInstance, DialogState, DialogTurnResult
from parley.exceptions import InvalidArgumentError, InvalidDialogStateError
from parley.turn.activity import ActivityTypes
from parley.turn.context import TurnContext

WaterfallStep = Callable[["WaterfallStepContext"], Awaitable[DialogTurnResult]]

PERSISTED_OPTIONS = "options"
PERSISTED_VALUES = "values"
PERSISTED_INSTANCE_ID = "instanceId"
STEP_INDEX = "stepIndex"


class WaterfallStepContext(DialogContext):
    """Context passed to a waterfall step.

    Shares the stack of the context the waterfall runs in, so ending or
    cancelling from a step acts on the real stack.
    """

    def __init__(
        self,
        parent_waterfall: "WaterfallDialog",
        dialog_context: DialogContext,
        options: Any,
        values: dict[str, Any],
        index: int,
        reason: DialogReason,
        result: Any = None,
    ) -> None:
        super().__init__(
            dialog_context.dialogs,
            dialog_context.context,
            DialogState.model_construct(dialog_stack=dialog_context.stack),
            parent=dialog_context.parent,
        )
        self.services = dialog_context.services
        self._parent_waterfall = parent_waterfall
        self._next_called = False
        self.index = index
        self.options = options
        self.values = values
        self.reason = reason
        self.result = result

    async def next(self, result: Any = None) -> DialogTurnResult:
        """Skip to the next step without waiting for user input.

        Raises:
            InvalidDialogStateError: If called more than once for this step
        """
        if self._next_called:
            raise InvalidDialogStateError(
                f"WaterfallStepContext.next(): method already called for dialog and step "
                f"'{self._parent_waterfall.id}[{self.index}]'."
            )
        self._next_called = True
        return await self._parent_waterfall.resume_dialog(self, DialogReason.NEXT_CALLED, result)


class WaterfallDialog(Dialog):
    """Runs its steps in order, one step per applicable turn.

    The step index, options, values and a per-run instance id live in the
    dialog's frame state. A step returning `Dialog.END_OF_TURN` suspends the
    waterfall until the next message; `step.next()` runs the following step
    immediately; running past the last step ends the dialog with the last
    result.

    Telemetry: ``WaterfallStart`` on begin, ``WaterfallStep`` per step,
    ``WaterfallComplete`` when it ends and ``WaterfallCancel`` when it is
    cancelled.
    """

    def __init__(self, dialog_id: str, steps: Sequence[WaterfallStep] | None = ()) -> None:
        super().__init__(dialog_id)
        if steps is None:
            raise InvalidArgumentError("steps cannot be None")
        self._steps: list[WaterfallStep] = []
        for step in steps:
            self.add_step(step)

    @property
    def steps(self) -> list[WaterfallStep]:
        return list(self._steps)

    def add_step(self, step: WaterfallStep) -> "WaterfallDialog":
        if step is None:
            raise InvalidArgumentError("step cannot be None")
        if not callable(step):
            raise InvalidArgumentError(f"step must be callable, got {type(step).__name__}")
        self._steps.append(step)
        return self

    def get_version(self) -> str:
        return f"{self.id}:{len(self._steps)}"

    async def begin_dialog(self, dialog_context: DialogContext, options: Any = None) -> DialogTurnResult:
        if dialog_context is None:
            raise InvalidArgumentError("dialog_context is required")

        state = dialog_context.active_dialog.state
        instance_id = str(uuid4())
        state[PERSISTED_OPTIONS] = options
        state[PERSISTED_VALUES] = {}
        state[PERSISTED_INSTANCE_ID] = instance_id

        self.telemetry_client.track_event(
            "WaterfallStart", {"DialogId": self.id, "InstanceId": instance_id}
        )
        self.telemetry_client.track_dialog_view(self.id)

        return await self.run_step(dialog_context, 0, DialogReason.BEGIN_CALLED, None)

    async def continue_dialog(self, dialog_context: DialogContext) -> DialogTurnResult:
        if dialog_context is None:
            raise InvalidArgumentError("dialog_context is required")

        activity = dialog_context.context.activity
        if activity.type != ActivityTypes.MESSAGE.value:
            return Dialog.END_OF_TURN

        return await self.resume_dialog(dialog_context, DialogReason.CONTINUE_CALLED, activity.text)

    async def resume_dialog(
        self,
        dialog_context: DialogContext,
        reason: DialogReason,
        result: Any = None,
    ) -> DialogTurnResult:
        if dialog_context is None:
            raise InvalidArgumentError("dialog_context is required")

        index = dialog_context.active_dialog.state[STEP_INDEX]
        return await self.run_step(dialog_context, index + 1, reason, result)

    async def end_dialog(
        self,
        turn_context: TurnContext,
        instance: DialogInstance,
        reason: DialogReason,
    ) -> None:
        instance_id = instance.state.get(PERSISTED_INSTANCE_ID)
        if reason == DialogReason.CANCEL_CALLED:
            self.telemetry_client.track_event(
                "WaterfallCancel",
                {
                    "DialogId": self.id,
                    "StepName": self.get_step_name(instance.state.get(STEP_INDEX, 0)),
                    "InstanceId": instance_id,
                },
            )
        elif reason == DialogReason.END_CALLED:
            self.telemetry_client.track_event(
                "WaterfallComplete", {"DialogId": self.id, "InstanceId": instance_id}
            )

    async def on_step(self, step_context: WaterfallStepContext) -> DialogTurnResult:
        """Run the step at step_context.index."""
        self.telemetry_client.track_event(
            "WaterfallStep",
            {
                "DialogId": self.id,
                "StepName": self.get_step_name(step_context.index),
                "InstanceId": step_context.active_dialog.state[PERSISTED_INSTANCE_ID],
            },
        )
        return await self._steps[step_context.index](step_context)

    async def run_step(
        self,
        dialog_context: DialogContext,
        index: int,
        reason: DialogReason,
        result: Any,
    ) -> DialogTurnResult:
        if dialog_context is None:
            raise InvalidArgumentError("dialog_context is required")

        if index >= len(self._steps):
            return await dialog_context.end_dialog(result)

        state = dialog_context.active_dialog.state
        state[STEP_INDEX] = index
        step_context = WaterfallStepContext(
            self,
            dialog_context,
            state[PERSISTED_OPTIONS],
            state[PERSISTED_VALUES],
            index,
            reason,
            result,
        )
        return await self.on_step(step_context)

    def get_step_name(self, index: int) -> str:
        return f"Step{index + 1}of{len(self._steps)}"
