"""Turn processing: activities, turn context, adapters and middleware."""

from parley.turn.activity import (
    Activity,
    ActivityTypes,
    ChannelAccount,
    ConversationAccount,
)
from parley.turn.adapter import BotAdapter, InMemoryAdapter
from parley.turn.context import TurnContext, TurnState
from parley.turn.middleware import Middleware, MiddlewareSet

__all__ = [
    "Activity",
    "ActivityTypes",
    "BotAdapter",
    "ChannelAccount",
    "ConversationAccount",
    "InMemoryAdapter",
    "Middleware",
    "MiddlewareSet",
    "TurnContext",
    "TurnState",
]
