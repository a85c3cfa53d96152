"""Bot state persisted between turns."""

from parley.state.bot_state import BotState, BotStatePropertyAccessor, CachedBotState
from parley.state.middleware import AutoSaveStateMiddleware
from parley.state.serialization import StorageError
from parley.state.states import BotStateSet, ConversationState, UserState
from parley.state.storage import Storage
from parley.state.stores import InMemoryStorage

__all__ = [
    "AutoSaveStateMiddleware",
    "BotState",
    "BotStatePropertyAccessor",
    "BotStateSet",
    "CachedBotState",
    "ConversationState",
    "InMemoryStorage",
    "Storage",
    "StorageError",
    "UserState",
]
