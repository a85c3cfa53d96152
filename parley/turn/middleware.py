"""Middleware pipeline run around the bot's turn logic."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from parley.turn.context import TurnContext

NextHandler = Callable[[], Awaitable[None]]
BotCallback = Callable[[TurnContext], Awaitable[None]]


class Middleware(ABC):
    """A component that sees every turn before and after the bot logic."""

    @abstractmethod
    async def on_turn(self, turn_context: TurnContext, next_handler: NextHandler) -> None:
        """Process the turn and call next_handler to continue the pipeline."""
        pass


class MiddlewareSet(Middleware):
    """Ordered collection of middleware, itself usable as middleware."""

    def __init__(self) -> None:
        self._middleware: list[Middleware] = []

    def use(self, middleware: Middleware) -> "MiddlewareSet":
        self._middleware.append(middleware)
        return self

    async def on_turn(self, turn_context: TurnContext, next_handler: NextHandler) -> None:
        await self.receive_activity(turn_context, lambda _ctx: next_handler())

    async def receive_activity(
        self, turn_context: TurnContext, callback: BotCallback | None
    ) -> None:
        """Run every middleware in order, then the callback."""
        await self._run(turn_context, callback, 0)

    async def _run(
        self, turn_context: TurnContext, callback: BotCallback | None, index: int
    ) -> None:
        if index == len(self._middleware):
            if callback is not None:
                await callback(turn_context)
            return

        async def next_handler() -> None:
            await self._run(turn_context, callback, index + 1)

        await self._middleware[index].on_turn(turn_context, next_handler)
