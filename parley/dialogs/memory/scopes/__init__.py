"""Built-in memory scopes."""

from parley.dialogs.memory.scopes.base import MemoryScope, ReadOnlyMemoryScope
from parley.dialogs.memory.scopes.bot_state import (
    BotStateMemoryScope,
    ConversationMemoryScope,
    UserMemoryScope,
)
from parley.dialogs.memory.scopes.class_scope import ClassMemoryScope
from parley.dialogs.memory.scopes.dialog import DialogMemoryScope
from parley.dialogs.memory.scopes.dialog_class import DialogClassMemoryScope
from parley.dialogs.memory.scopes.dialog_context import DialogContextMemoryScope
from parley.dialogs.memory.scopes.settings import SettingsMemoryScope
from parley.dialogs.memory.scopes.this import ThisMemoryScope
from parley.dialogs.memory.scopes.turn import TurnMemoryScope

__all__ = [
    "BotStateMemoryScope",
    "ClassMemoryScope",
    "ConversationMemoryScope",
    "DialogClassMemoryScope",
    "DialogContextMemoryScope",
    "DialogMemoryScope",
    "MemoryScope",
    "ReadOnlyMemoryScope",
    "SettingsMemoryScope",
    "ThisMemoryScope",
    "TurnMemoryScope",
    "UserMemoryScope",
]
