"""Dialog memory scope: the state of the closest container dialog."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from parley.dialogs.container import DialogContainer
from parley.dialogs.memory.scopes.base import MemoryScope, require_context
from parley.dialogs.paths import ScopePath
from parley.exceptions import InvalidArgumentError, InvalidDialogStateError

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext
    from parley.dialogs.models import DialogInstance


def _bound_instance(dialog_context: "DialogContext") -> "DialogInstance | None":
    """Frame whose state ``dialog`` binds to.

    The active dialog if it is a container, otherwise the parent's active
    dialog, falling back to the active dialog when there is no parent.
    """
    active = dialog_context.active_dialog
    if active is not None and isinstance(dialog_context.find_dialog(active.id), DialogContainer):
        return active

    parent = dialog_context.parent
    if parent is not None and parent.active_dialog is not None:
        return parent.active_dialog

    return active


class DialogMemoryScope(MemoryScope):
    """``dialog``: memory of the container dialog running the active step."""

    def __init__(self) -> None:
        super().__init__(ScopePath.DIALOG)

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        instance = _bound_instance(require_context(dialog_context))
        return instance.state if instance is not None else None

    def set_memory(self, dialog_context: "DialogContext", memory: Any) -> None:
        instance = _bound_instance(require_context(dialog_context))
        if not isinstance(memory, Mapping):
            raise InvalidArgumentError("dialog memory must be a mapping")
        if instance is None:
            raise InvalidDialogStateError("Cannot set dialog memory: there is no active dialog")
        # keep the same dict: the frame holds a reference to it
        replacement = dict(memory)
        instance.state.clear()
        instance.state.update(replacement)
