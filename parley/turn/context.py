"""Turn context and turn-scoped state."""

from collections.abc import Iterator, MutableMapping
from typing import TYPE_CHECKING, Any

from parley.exceptions import InvalidArgumentError
from parley.turn.activity import Activity, ActivityTypes

if TYPE_CHECKING:
    from parley.turn.adapter import BotAdapter


def _state_key(key: str | type) -> str:
    if isinstance(key, type):
        return f"{key.__module__}.{key.__qualname__}"
    return key


class TurnState(MutableMapping[Any, Any]):
    """Per-turn cache of services and state.

    Keys are strings or types; a type is stored under its qualified name so
    collaborators can look one another up by class.
    """

    def __init__(self) -> None:
        self._items: dict[str, Any] = {}

    def __getitem__(self, key: str | type) -> Any:
        return self._items[_state_key(key)]

    def __setitem__(self, key: str | type, value: Any) -> None:
        self._items[_state_key(key)] = value

    def __delitem__(self, key: str | type) -> None:
        del self._items[_state_key(key)]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str | type):
            return False
        return _state_key(key) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


class TurnContext:
    """Everything known about the turn being processed."""

    def __init__(self, adapter: "BotAdapter", activity: Activity) -> None:
        if activity is None:
            raise InvalidArgumentError("activity is required")
        self.adapter = adapter
        self.activity = activity
        self.turn_state = TurnState()
        self.responded = False

    async def send_activity(self, activity_or_text: Activity | str) -> str | None:
        """Send a single activity (or plain text message) to the user."""
        responses = await self.send_activities([activity_or_text])
        return responses[0] if responses else None

    async def send_activities(self, activities: list[Activity | str]) -> list[str | None]:
        outgoing: list[Activity] = []
        for item in activities:
            activity = self.activity.create_reply(item) if isinstance(item, str) else item
            if activity.conversation is None:
                activity.conversation = self.activity.conversation
            if activity.channel_id is None:
                activity.channel_id = self.activity.channel_id
            outgoing.append(activity)

        responses = await self.adapter.send_activities(self, outgoing)
        if any(a.type != ActivityTypes.TRACE.value for a in outgoing):
            self.responded = True
        return responses
