"""DialogContext memory scope: a synthetic view of the dialog stack."""

from typing import TYPE_CHECKING, Any

from parley.dialogs.memory.scopes.base import ReadOnlyMemoryScope, require_context
from parley.dialogs.paths import ScopePath

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext

ACTION_SCOPE_PREFIX = "ActionScope["


class DialogContextMemoryScope(ReadOnlyMemoryScope):
    """``dialogcontext``: ``{stack, activeDialog, parent}``.

    ``stack`` lists action-scope frame ids from the deepest child context up
    through every parent, top of each stack first.
    """

    def __init__(self) -> None:
        super().__init__(ScopePath.DIALOG_CONTEXT, include_in_snapshot=False)

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        require_context(dialog_context)

        current = dialog_context
        while current.child is not None:
            current = current.child

        stack: list[str] = []
        while current is not None:
            stack.extend(
                instance.id
                for instance in reversed(current.stack)
                if instance.id.startswith(ACTION_SCOPE_PREFIX)
            )
            current = current.parent

        active = dialog_context.active_dialog
        parent = dialog_context.parent
        return {
            "stack": stack,
            "activeDialog": active.id if active is not None else None,
            "parent": (
                parent.active_dialog.id
                if parent is not None and parent.active_dialog is not None
                else None
            ),
        }
