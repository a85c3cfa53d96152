"""DialogClass memory scope: read-only view of the container dialog definition."""

from typing import TYPE_CHECKING, Any

from parley.dialogs.container import DialogContainer
from parley.dialogs.memory.read_only import ReadOnlyObject
from parley.dialogs.memory.scopes.base import ReadOnlyMemoryScope, require_context
from parley.dialogs.paths import ScopePath

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext


class DialogClassMemoryScope(ReadOnlyMemoryScope):
    """``dialogclass``: properties of the dialog definition ``dialog`` binds to."""

    def __init__(self) -> None:
        super().__init__(ScopePath.DIALOG_CLASS, include_in_snapshot=False)

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        require_context(dialog_context)
        active = dialog_context.active_dialog
        if active is not None:
            dialog = dialog_context.find_dialog(active.id)
            if isinstance(dialog, DialogContainer):
                return ReadOnlyObject(dialog)

        parent = dialog_context.parent
        if parent is not None and parent.active_dialog is not None:
            dialog_id = parent.active_dialog.id
        elif active is not None:
            dialog_id = active.id
        else:
            return None

        dialog = dialog_context.find_dialog(dialog_id)
        return ReadOnlyObject(dialog) if dialog is not None else None
