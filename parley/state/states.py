"""Conversation and user state, plus a set that loads/saves several at once."""

import asyncio

from parley.exceptions import InvalidArgumentError
from parley.state.bot_state import BotState
from parley.state.storage import Storage
from parley.turn.context import TurnContext


class ConversationState(BotState):
    """State shared by everyone in a conversation."""

    def __init__(self, storage: Storage) -> None:
        super().__init__(storage, "ConversationState")

    def get_storage_key(self, turn_context: TurnContext) -> str:
        activity = turn_context.activity
        if not activity.channel_id:
            raise InvalidArgumentError("activity.channel_id is required for conversation state")
        if activity.conversation is None or not activity.conversation.id:
            raise InvalidArgumentError("activity.conversation.id is required for conversation state")
        return f"{activity.channel_id}/conversations/{activity.conversation.id}"


class UserState(BotState):
    """State that follows a user across conversations on a channel."""

    def __init__(self, storage: Storage) -> None:
        super().__init__(storage, "UserState")

    def get_storage_key(self, turn_context: TurnContext) -> str:
        activity = turn_context.activity
        if not activity.channel_id:
            raise InvalidArgumentError("activity.channel_id is required for user state")
        if activity.from_property is None or not activity.from_property.id:
            raise InvalidArgumentError("activity.from.id is required for user state")
        return f"{activity.channel_id}/users/{activity.from_property.id}"


class BotStateSet:
    """A group of BotState objects loaded and saved together."""

    def __init__(self, *bot_states: BotState) -> None:
        self.bot_states: list[BotState] = list(bot_states)

    def add(self, bot_state: BotState) -> "BotStateSet":
        if bot_state is None:
            raise InvalidArgumentError("bot_state is required")
        self.bot_states.append(bot_state)
        return self

    async def load_all(self, turn_context: TurnContext, force: bool = False) -> None:
        await asyncio.gather(*(s.load(turn_context, force) for s in self.bot_states))

    async def save_all_changes(self, turn_context: TurnContext, force: bool = False) -> None:
        await asyncio.gather(*(s.save_changes(turn_context, force) for s in self.bot_states))
