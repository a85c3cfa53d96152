"""Middleware that saves bot state at the end of every turn."""

from parley.state.bot_state import BotState
from parley.state.states import BotStateSet
from parley.turn.context import TurnContext
from parley.turn.middleware import Middleware, NextHandler


class AutoSaveStateMiddleware(Middleware):
    """Persist changed state after the bot logic has run."""

    def __init__(self, *bot_states: BotState) -> None:
        self.bot_state_set = BotStateSet(*bot_states)

    def add(self, bot_state: BotState) -> "AutoSaveStateMiddleware":
        self.bot_state_set.add(bot_state)
        return self

    async def on_turn(self, turn_context: TurnContext, next_handler: NextHandler) -> None:
        await next_handler()
        await self.bot_state_set.save_all_changes(turn_context)
