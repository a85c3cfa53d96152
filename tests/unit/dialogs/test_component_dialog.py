"""Unit tests for ComponentDialog."""

import pytest

from parley.dialogs import (
    ComponentDialog,
    Dialog,
    DialogContext,
    DialogReason,
    DialogTurnStatus,
    WaterfallDialog,
    WaterfallStepContext,
)
from parley.dialogs.models import DialogInstance, DialogTurnResult
from parley.observability.telemetry import Severity
from parley.turn import InMemoryAdapter, TurnContext


class AskDialog(Dialog):
    async def begin_dialog(self, dialog_context: DialogContext, options=None) -> DialogTurnResult:
        await dialog_context.context.send_activity("ask")
        return Dialog.END_OF_TURN

    async def continue_dialog(self, dialog_context: DialogContext) -> DialogTurnResult:
        return await dialog_context.end_dialog(dialog_context.context.activity.text)

    async def reprompt_dialog(self, turn_context: TurnContext, instance: DialogInstance) -> None:
        await turn_context.send_activity("ask again")


class ProfileDialog(ComponentDialog):
    """Component asking for a name, storing it in dialog memory."""

    def __init__(self) -> None:
        super().__init__("profile")
        self.end_reasons: list[DialogReason] = []
        self.add_dialog(WaterfallDialog("steps", [self.ask_name, self.store_name]))
        self.add_dialog(AskDialog("ask"))

    async def ask_name(self, step_context: WaterfallStepContext) -> DialogTurnResult:
        return await step_context.begin_dialog("ask")

    async def store_name(self, step_context: WaterfallStepContext) -> DialogTurnResult:
        step_context.state.set_value("dialog.name", step_context.result)
        return await step_context.end_dialog(f"hello {step_context.result}")

    async def on_end_dialog(
        self, turn_context: TurnContext, instance: DialogInstance, reason: DialogReason
    ) -> None:
        self.end_reasons.append(reason)


@pytest.fixture
def profile() -> ProfileDialog:
    return ProfileDialog()


@pytest.fixture
def outer(dialog_context: DialogContext, profile: ProfileDialog) -> DialogContext:
    dialog_context.dialogs.add(profile)
    return dialog_context


class TestComponentDialog:
    """Tests for running an inner stack inside a component."""

    def test_first_dialog_is_initial(self, profile: ProfileDialog) -> None:
        """Should start the first dialog added."""
        assert profile.initial_dialog_id == "steps"
        assert profile.find_dialog("ask") is not None

    @pytest.mark.asyncio
    async def test_begin_waits_on_inner_stack(
        self, outer: DialogContext, adapter: InMemoryAdapter
    ) -> None:
        """Should wait while the inner stack waits and persist it in frame state."""
        result = await outer.begin_dialog("profile")

        assert result.status == DialogTurnStatus.WAITING
        assert [i.id for i in outer.stack] == ["profile"]
        inner_stack = outer.active_dialog.state["dialogs"].dialog_stack
        assert [i.id for i in inner_stack] == ["steps", "ask"]
        assert [a.text for a in adapter.replies] == ["ask"]

    @pytest.mark.asyncio
    async def test_child_context(self, outer: DialogContext) -> None:
        """Should expose the inner stack through child."""
        await outer.begin_dialog("profile")

        child = outer.child

        assert child is not None
        assert child.parent is outer
        assert child.active_dialog.id == "ask"
        assert child.child is None

    @pytest.mark.asyncio
    async def test_ends_with_inner_result(
        self, outer: DialogContext, turn_context: TurnContext, adapter: InMemoryAdapter
    ) -> None:
        """Should end when the inner stack completes, returning its result."""
        await outer.begin_dialog("profile")
        turn_context.activity = adapter.make_activity("Joe")

        result = await outer.continue_dialog()

        assert result.status == DialogTurnStatus.COMPLETE
        assert result.result == "hello Joe"
        assert outer.stack == []

    @pytest.mark.asyncio
    async def test_dialog_scope_binds_to_component(
        self, outer: DialogContext, profile: ProfileDialog
    ) -> None:
        """Should write dialog.* from inner steps into the component's frame."""
        await outer.begin_dialog("profile")
        frame = outer.active_dialog
        inner = outer.child

        inner.state.set_value("dialog.name", "Joe")
        inner.state.set_value("this.note", "inner")

        assert frame.state["name"] == "Joe"
        assert inner.active_dialog.state["note"] == "inner"
        assert inner.state.get_value("dialogclass.id") == "profile"

    @pytest.mark.asyncio
    async def test_cancel_cancels_inner_stack(
        self, outer: DialogContext, profile: ProfileDialog, telemetry
    ) -> None:
        """Should cancel the inner stack when the component is cancelled."""
        outer.dialogs.telemetry_client = telemetry
        await outer.begin_dialog("profile")

        await outer.cancel_all_dialogs()

        assert outer.stack == []
        assert profile.end_reasons == [DialogReason.CANCEL_CALLED]
        assert "WaterfallCancel" in telemetry.event_names
        assert telemetry.dialog_views == ["steps", "profile"]

    @pytest.mark.asyncio
    async def test_resume_reprompts_inner(
        self, outer: DialogContext, adapter: InMemoryAdapter
    ) -> None:
        """Should re-prompt the inner stack when resumed from the outer stack."""
        await outer.begin_dialog("profile")

        result = await outer.dialogs.find("profile").resume_dialog(
            outer, DialogReason.END_CALLED, None
        )

        assert result.status == DialogTurnStatus.WAITING
        assert [a.text for a in adapter.replies] == ["ask", "ask again"]

    @pytest.mark.asyncio
    async def test_version_change_traced(
        self, outer: DialogContext, profile: ProfileDialog, telemetry
    ) -> None:
        """Should trace an unhandled versionChanged event when inner dialogs change."""
        outer.dialogs.telemetry_client = telemetry
        await outer.begin_dialog("profile")
        frame = outer.active_dialog
        recorded = frame.version
        assert recorded == profile.get_internal_version()

        profile.add_dialog(AskDialog("confirm"))
        await outer.continue_dialog()

        assert frame.version != recorded
        ((message, severity),) = telemetry.traces
        assert "versionChanged" in message
        assert severity == Severity.WARNING
