"""Bot state: a storage-backed property bag cached on the turn."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from parley.exceptions import InvalidArgumentError, InvalidDialogStateError
from parley.observability.logging import get_logger
from parley.state.serialization import dumps
from parley.state.storage import Storage
from parley.turn.context import TurnContext

logger = get_logger(__name__)


class CachedBotState:
    """State loaded for one turn plus the hash it was loaded with."""

    def __init__(self, state: dict[str, Any] | None = None) -> None:
        self.state: dict[str, Any] = state if state is not None else {}
        self.hash = self.compute_hash(self.state)

    def is_changed(self) -> bool:
        return self.hash != self.compute_hash(self.state)

    @staticmethod
    def compute_hash(state: Any) -> str:
        return dumps(state)


class BotState(ABC):
    """Base class for state persisted between turns under one storage key.

    The loaded state is cached in turn state under `context_service_key`,
    so every accessor in the same turn shares one copy.
    """

    def __init__(self, storage: Storage, context_service_key: str) -> None:
        if storage is None:
            raise InvalidArgumentError("storage is required")
        self._storage = storage
        self._context_service_key = context_service_key

    @property
    def context_service_key(self) -> str:
        return self._context_service_key

    def create_property(self, name: str) -> "BotStatePropertyAccessor":
        """Create an accessor for a named property of this state."""
        if not name:
            raise InvalidArgumentError("name is required")
        return BotStatePropertyAccessor(self, name)

    def get_cached_state(self, turn_context: TurnContext) -> CachedBotState | None:
        if turn_context is None:
            raise InvalidArgumentError("turn_context is required")
        return turn_context.turn_state.get(self._context_service_key)

    def get(self, turn_context: TurnContext) -> dict[str, Any] | None:
        """Return the live cached state, or None if it has not been loaded."""
        cached = self.get_cached_state(turn_context)
        return cached.state if cached is not None else None

    async def load(self, turn_context: TurnContext, force: bool = False) -> None:
        """Read state from storage unless it is already cached for this turn."""
        cached = self.get_cached_state(turn_context)
        if force or cached is None:
            key = self.get_storage_key(turn_context)
            items = await self._storage.read([key])
            value = items.get(key)
            turn_context.turn_state[self._context_service_key] = CachedBotState(
                dict(value) if isinstance(value, dict) else None
            )

    async def save_changes(self, turn_context: TurnContext, force: bool = False) -> None:
        """Write cached state back to storage if it changed (or if forced)."""
        cached = self.get_cached_state(turn_context)
        if cached is not None and (force or cached.is_changed()):
            key = self.get_storage_key(turn_context)
            await self._storage.write({key: cached.state})
            cached.hash = cached.compute_hash(cached.state)
            logger.debug("bot_state_saved", state=self._context_service_key, key=key)

    async def clear_state(self, turn_context: TurnContext) -> None:
        """Replace cached state with an empty one, forcing the next save to write."""
        if turn_context is None:
            raise InvalidArgumentError("turn_context is required")
        cleared = CachedBotState()
        cleared.hash = ""
        turn_context.turn_state[self._context_service_key] = cleared

    async def delete(self, turn_context: TurnContext) -> None:
        """Clear the cache and delete the stored state."""
        if turn_context is None:
            raise InvalidArgumentError("turn_context is required")
        turn_context.turn_state[self._context_service_key] = CachedBotState()
        await self._storage.delete([self.get_storage_key(turn_context)])

    async def get_property_value(self, turn_context: TurnContext, name: str) -> Any:
        cached = self.get_cached_state(turn_context)
        return cached.state.get(name) if cached is not None else None

    async def set_property_value(self, turn_context: TurnContext, name: str, value: Any) -> None:
        cached = self.get_cached_state(turn_context)
        if cached is None:
            raise InvalidDialogStateError(
                f"{self._context_service_key} must be loaded before it is written"
            )
        cached.state[name] = value

    async def delete_property_value(self, turn_context: TurnContext, name: str) -> None:
        cached = self.get_cached_state(turn_context)
        if cached is not None:
            cached.state.pop(name, None)

    @abstractmethod
    def get_storage_key(self, turn_context: TurnContext) -> str:
        """Storage key for the state belonging to this turn."""
        pass


class BotStatePropertyAccessor:
    """Reads and writes one named property of a BotState."""

    def __init__(self, bot_state: BotState, name: str) -> None:
        self.bot_state = bot_state
        self.name = name

    async def get(
        self,
        turn_context: TurnContext,
        default_factory: Callable[[], Any] | None = None,
    ) -> Any:
        """Get the property value, creating it from default_factory if absent."""
        await self.bot_state.load(turn_context)
        cached = self.bot_state.get_cached_state(turn_context)
        if cached is not None and self.name in cached.state:
            return cached.state[self.name]
        if default_factory is None:
            return None
        value = default_factory()
        await self.set(turn_context, value)
        return value

    async def set(self, turn_context: TurnContext, value: Any) -> None:
        await self.bot_state.load(turn_context)
        await self.bot_state.set_property_value(turn_context, self.name, value)

    async def delete(self, turn_context: TurnContext) -> None:
        await self.bot_state.load(turn_context)
        await self.bot_state.delete_property_value(turn_context, self.name)
