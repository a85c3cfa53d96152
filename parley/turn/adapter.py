"""Bot adapters: run the middleware pipeline and deliver outgoing activities."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from itertools import count

from structlog.contextvars import bound_contextvars

from parley.observability.logging import get_logger
from parley.turn.activity import Activity, ActivityTypes, ChannelAccount, ConversationAccount
from parley.turn.context import TurnContext
from parley.turn.middleware import BotCallback, Middleware, MiddlewareSet

logger = get_logger(__name__)

TurnErrorHandler = Callable[[TurnContext, Exception], Awaitable[None]]


class BotAdapter(ABC):
    """Base adapter connecting a channel to bot logic."""

    def __init__(self, on_turn_error: TurnErrorHandler | None = None) -> None:
        self.middleware = MiddlewareSet()
        self.on_turn_error = on_turn_error

    def use(self, middleware: Middleware) -> "BotAdapter":
        """Register middleware to run on every turn."""
        self.middleware.use(middleware)
        return self

    @abstractmethod
    async def send_activities(
        self, turn_context: TurnContext, activities: list[Activity]
    ) -> list[str | None]:
        """Deliver outgoing activities, returning their ids."""
        pass

    async def run_pipeline(self, turn_context: TurnContext, callback: BotCallback) -> None:
        """Run middleware then callback, routing failures to on_turn_error if set.

        The activity's conversation, channel and id are bound to structlog
        contextvars while the pipeline runs.
        """
        activity = turn_context.activity
        with bound_contextvars(
            conversation_id=activity.conversation.id if activity.conversation else None,
            channel_id=activity.channel_id,
            activity_id=activity.id,
        ):
            await self._run_pipeline(turn_context, callback)

    async def _run_pipeline(self, turn_context: TurnContext, callback: BotCallback) -> None:
        try:
            await self.middleware.receive_activity(turn_context, callback)
        except Exception as error:
            if self.on_turn_error is None:
                raise
            logger.error(
                "turn_failed",
                error=str(error),
                error_type=type(error).__name__,
            )
            await self.on_turn_error(turn_context, error)


class InMemoryAdapter(BotAdapter):
    """Adapter that keeps replies in memory.

    Used for tests and local development: each call to `send` runs one turn
    through the pipeline and returns the activities the bot sent back.
    """

    def __init__(
        self,
        channel_id: str = "test",
        conversation_id: str = "Convo1",
        user_id: str = "user1",
        bot_id: str = "bot",
        locale: str = "en-us",
        on_turn_error: TurnErrorHandler | None = None,
    ) -> None:
        super().__init__(on_turn_error)
        self.channel_id = channel_id
        self.conversation = ConversationAccount(id=conversation_id)
        self.user = ChannelAccount(id=user_id, name="User1")
        self.bot = ChannelAccount(id=bot_id, name="Bot")
        self.locale = locale
        self.replies: list[Activity] = []
        self._ids = count(1)

    def make_activity(self, text: str | None = None, type: str = ActivityTypes.MESSAGE.value) -> Activity:
        """Build an inbound activity from the simulated user."""
        return Activity(
            type=type,
            id=str(next(self._ids)),
            text=text,
            channel_id=self.channel_id,
            conversation=self.conversation,
            from_property=self.user,
            recipient=self.bot,
            locale=self.locale,
        )

    async def process_activity(self, activity: Activity, logic: BotCallback) -> list[Activity]:
        """Run one turn for an inbound activity and return the replies it produced."""
        start = len(self.replies)
        turn_context = TurnContext(self, activity)
        await self.run_pipeline(turn_context, logic)
        return self.replies[start:]

    async def send(self, text: str, logic: BotCallback) -> list[Activity]:
        """Run one turn for a user message."""
        return await self.process_activity(self.make_activity(text), logic)

    async def send_activities(
        self, turn_context: TurnContext, activities: list[Activity]
    ) -> list[str | None]:
        ids: list[str | None] = []
        for activity in activities:
            if activity.id is None:
                activity.id = str(next(self._ids))
            self.replies.append(activity)
            ids.append(activity.id)
        return ids
