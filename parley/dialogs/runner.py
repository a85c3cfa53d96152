"""Run a dialog for one turn."""

from parley.dialogs.context import DialogContext
from parley.dialogs.dialog import Dialog
from parley.dialogs.dialog_set import DialogSet
from parley.dialogs.enums import DialogEvents, DialogTurnStatus
from parley.dialogs.models import DialogTurnResult
from parley.observability.logging import get_logger
from parley.state.bot_state import BotStatePropertyAccessor
from parley.turn.context import TurnContext

logger = get_logger(__name__)


async def run_dialog(
    dialog: Dialog,
    turn_context: TurnContext,
    accessor: BotStatePropertyAccessor,
) -> DialogTurnResult:
    """Continue dialog if it is on the persisted stack, otherwise start it."""
    dialog_set = DialogSet(accessor)
    dialog_set.telemetry_client = dialog.telemetry_client
    dialog_set.add(dialog)

    dialog_context = await dialog_set.create_context(turn_context)
    return await inner_run(turn_context, dialog.id, dialog_context)


async def inner_run(
    turn_context: TurnContext,
    dialog_id: str,
    dialog_context: DialogContext,
    log_snapshot: bool = True,
) -> DialogTurnResult:
    """Load memory, continue or begin dialog_id, then save memory.

    An exception is first offered to the dialogs as an ``error`` event
    raised from the deepest active dialog; it is re-raised if none handles it.
    """
    await dialog_context.state.load_all_scopes()

    try:
        result = await dialog_context.continue_dialog()
        if result.status == DialogTurnStatus.EMPTY:
            result = await dialog_context.begin_dialog(dialog_id)
    except Exception as err:
        handled = await dialog_context.emit_event(DialogEvents.ERROR.value, err, True, True)
        if not handled:
            raise
        logger.info("dialog_error_handled", dialog_id=dialog_id, error=str(err))
        result = DialogTurnResult(status=DialogTurnStatus.COMPLETE)

    await dialog_context.state.save_all_changes()

    if log_snapshot:
        logger.debug(
            "dialog_state_snapshot",
            dialog_id=dialog_id,
            status=result.status.value,
            snapshot=dialog_context.state.get_memory_snapshot(),
        )
    return result
