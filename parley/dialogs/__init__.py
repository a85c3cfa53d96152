"""Dialog stack: dialogs, dialog sets, contexts, waterfalls and components."""

from parley.dialogs.component import ComponentDialog
from parley.dialogs.container import DialogContainer
from parley.dialogs.context import DialogContext
from parley.dialogs.dialog import Dialog
from parley.dialogs.dialog_set import DialogSet
from parley.dialogs.enums import DialogEvents, DialogReason, DialogTurnStatus
from parley.dialogs.manager import DialogManager, DialogManagerResult
from parley.dialogs.models import DialogEvent, DialogInstance, DialogState, DialogTurnResult
from parley.dialogs.runner import inner_run, run_dialog
from parley.dialogs.waterfall import WaterfallDialog, WaterfallStep, WaterfallStepContext
from parley.exceptions import (
    DialogError,
    DialogNotFoundError,
    InvalidArgumentError,
    InvalidDialogStateError,
    ScopeNotFoundError,
    UnsupportedOperationError,
)

__all__ = [
    "ComponentDialog",
    "Dialog",
    "DialogContainer",
    "DialogContext",
    "DialogError",
    "DialogEvent",
    "DialogEvents",
    "DialogInstance",
    "DialogManager",
    "DialogManagerResult",
    "DialogNotFoundError",
    "DialogReason",
    "DialogSet",
    "DialogState",
    "DialogTurnResult",
    "DialogTurnStatus",
    "InvalidArgumentError",
    "InvalidDialogStateError",
    "ScopeNotFoundError",
    "UnsupportedOperationError",
    "WaterfallDialog",
    "WaterfallStep",
    "WaterfallStepContext",
    "inner_run",
    "run_dialog",
]
