"""Turn memory scope: scratch memory that lives for one turn."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from parley.dialogs.memory.scopes.base import MemoryScope, require_context
from parley.dialogs.object_path import CaseInsensitiveDict
from parley.dialogs.paths import ScopePath
from parley.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext

TURN_MEMORY_KEY = "turn"


def turn_memory(turn_state: Any) -> CaseInsensitiveDict:
    """Return the turn memory cached on turn state, creating it on first access."""
    memory = turn_state.get(TURN_MEMORY_KEY)
    if memory is None:
        memory = CaseInsensitiveDict()
        turn_state[TURN_MEMORY_KEY] = memory
    return memory


class TurnMemoryScope(MemoryScope):
    """``turn``: a case-insensitive map created on first access each turn."""

    def __init__(self) -> None:
        super().__init__(ScopePath.TURN)

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        return turn_memory(require_context(dialog_context).context.turn_state)

    def set_memory(self, dialog_context: "DialogContext", memory: Any) -> None:
        require_context(dialog_context)
        if not isinstance(memory, Mapping):
            raise InvalidArgumentError("turn memory must be a mapping")
        dialog_context.context.turn_state[TURN_MEMORY_KEY] = CaseInsensitiveDict(memory)
