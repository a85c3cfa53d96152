"""This memory scope: the active dialog's own state."""

from typing import TYPE_CHECKING, Any

from parley.dialogs.memory.scopes.base import ReadOnlyMemoryScope, require_context
from parley.dialogs.paths import ScopePath

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext


class ThisMemoryScope(ReadOnlyMemoryScope):
    """``this``: state of the active frame, with no parent fallback.

    The scope itself cannot be replaced; paths below it are writable.
    """

    def __init__(self) -> None:
        super().__init__(ScopePath.THIS)

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        active = require_context(dialog_context).active_dialog
        return active.state if active is not None else None
