"""Class memory scope: read-only view of the active dialog definition."""

from typing import TYPE_CHECKING, Any

from parley.dialogs.memory.read_only import ReadOnlyObject
from parley.dialogs.memory.scopes.base import ReadOnlyMemoryScope, require_context
from parley.dialogs.paths import ScopePath

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext


class ClassMemoryScope(ReadOnlyMemoryScope):
    """``class``: properties of the active dialog's definition."""

    def __init__(self) -> None:
        super().__init__(ScopePath.CLASS, include_in_snapshot=False)

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        active = require_context(dialog_context).active_dialog
        if active is None:
            return None
        dialog = dialog_context.find_dialog(active.id)
        return ReadOnlyObject(dialog) if dialog is not None else None
