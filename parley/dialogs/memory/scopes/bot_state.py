"""Memory scopes backed by BotState (conversation and user)."""

from typing import TYPE_CHECKING, Any

from parley.dialogs.memory.scopes.base import MemoryScope, require_context
from parley.dialogs.paths import ScopePath
from parley.exceptions import UnsupportedOperationError
from parley.state.bot_state import BotState
from parley.state.states import ConversationState, UserState

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext


class BotStateMemoryScope(MemoryScope):
    """Scope bound to the BotState of `state_type` registered on turn state."""

    def __init__(self, state_type: type[BotState], name: str) -> None:
        super().__init__(name, include_in_snapshot=True)
        self.state_type = state_type

    def _bot_state(self, dialog_context: "DialogContext") -> BotState | None:
        return dialog_context.context.turn_state.get(self.state_type)

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        bot_state = self._bot_state(require_context(dialog_context))
        if bot_state is None:
            return None
        return bot_state.get(dialog_context.context)

    def set_memory(self, dialog_context: "DialogContext", memory: Any) -> None:
        require_context(dialog_context)
        raise UnsupportedOperationError("You cannot replace the root BotState object.")

    async def load(self, dialog_context: "DialogContext", force: bool = False) -> None:
        bot_state = self._bot_state(require_context(dialog_context))
        if bot_state is not None:
            await bot_state.load(dialog_context.context, force)

    async def save_changes(self, dialog_context: "DialogContext", force: bool = False) -> None:
        bot_state = self._bot_state(require_context(dialog_context))
        if bot_state is not None:
            await bot_state.save_changes(dialog_context.context, force)

    async def delete(self, dialog_context: "DialogContext") -> None:
        bot_state = self._bot_state(require_context(dialog_context))
        if bot_state is not None:
            await bot_state.delete(dialog_context.context)


class ConversationMemoryScope(BotStateMemoryScope):
    """``conversation``: ConversationState."""

    def __init__(self) -> None:
        super().__init__(ConversationState, ScopePath.CONVERSATION)


class UserMemoryScope(BotStateMemoryScope):
    """``user``: UserState."""

    def __init__(self) -> None:
        super().__init__(UserState, ScopePath.USER)
