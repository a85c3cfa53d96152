"""Unit tests for BotState, its property accessors and BotStateSet."""

import pytest

from parley.exceptions import InvalidArgumentError, InvalidDialogStateError
from parley.state import (
    AutoSaveStateMiddleware,
    BotStateSet,
    CachedBotState,
    ConversationState,
    InMemoryStorage,
    UserState,
)
from parley.turn import InMemoryAdapter, TurnContext


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def adapter() -> InMemoryAdapter:
    return InMemoryAdapter()


@pytest.fixture
def turn_context(adapter: InMemoryAdapter) -> TurnContext:
    return TurnContext(adapter, adapter.make_activity("hi"))


class TestCachedBotState:
    """Tests for CachedBotState change detection."""

    def test_unchanged_after_load(self) -> None:
        """Should report no change until the state is mutated."""
        cached = CachedBotState({"a": 1})
        assert cached.is_changed() is False

        cached.state["a"] = 2
        assert cached.is_changed() is True


class TestStorageKeys:
    """Tests for conversation and user storage keys."""

    def test_conversation_key(self, storage: InMemoryStorage, turn_context: TurnContext) -> None:
        """Should key conversation state by channel and conversation id."""
        key = ConversationState(storage).get_storage_key(turn_context)
        assert key == "test/conversations/Convo1"

    def test_user_key(self, storage: InMemoryStorage, turn_context: TurnContext) -> None:
        """Should key user state by channel and sender id."""
        key = UserState(storage).get_storage_key(turn_context)
        assert key == "test/users/user1"

    def test_missing_conversation_raises(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should refuse to build a key without a conversation."""
        turn_context.activity.conversation = None
        with pytest.raises(InvalidArgumentError, match="conversation.id"):
            ConversationState(storage).get_storage_key(turn_context)


class TestBotStatePropertyAccessor:
    """Tests for property accessors."""

    @pytest.mark.asyncio
    async def test_default_factory_creates_value(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should create and store the default when the property is absent."""
        state = ConversationState(storage)
        accessor = state.create_property("counter")

        value = await accessor.get(turn_context, lambda: {"count": 0})
        value["count"] += 1

        assert await accessor.get(turn_context) == {"count": 1}

    @pytest.mark.asyncio
    async def test_missing_without_default(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should return None when absent and no default is given."""
        accessor = ConversationState(storage).create_property("missing")
        assert await accessor.get(turn_context) is None

    @pytest.mark.asyncio
    async def test_delete(self, storage: InMemoryStorage, turn_context: TurnContext) -> None:
        """Should remove the property."""
        accessor = ConversationState(storage).create_property("name")
        await accessor.set(turn_context, "joe")

        await accessor.delete(turn_context)

        assert await accessor.get(turn_context) is None

    def test_empty_name_rejected(self, storage: InMemoryStorage) -> None:
        """Should require a property name."""
        with pytest.raises(InvalidArgumentError):
            ConversationState(storage).create_property("")

    def test_requires_storage(self) -> None:
        """Should reject a missing storage backend."""
        with pytest.raises(InvalidArgumentError, match="storage"):
            ConversationState(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_set_before_load(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should refuse to write a property before the state is loaded."""
        state = ConversationState(storage)
        with pytest.raises(InvalidDialogStateError, match="must be loaded"):
            await state.set_property_value(turn_context, "name", "joe")


class TestBotStatePersistence:
    """Tests for load/save/clear/delete."""

    @pytest.mark.asyncio
    async def test_save_and_reload(
        self, storage: InMemoryStorage, adapter: InMemoryAdapter
    ) -> None:
        """Should persist changes and read them on a later turn."""
        state = ConversationState(storage)
        first = TurnContext(adapter, adapter.make_activity("one"))
        await state.create_property("name").set(first, "joe")
        await state.save_changes(first)

        second = TurnContext(adapter, adapter.make_activity("two"))
        assert await state.create_property("name").get(second) == "joe"

    @pytest.mark.asyncio
    async def test_unchanged_state_not_written(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should skip the write when nothing changed."""
        state = ConversationState(storage)
        await state.load(turn_context)

        await state.save_changes(turn_context)

        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_force_writes_unchanged_state(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should write when forced even without changes."""
        state = ConversationState(storage)
        await state.load(turn_context)

        await state.save_changes(turn_context, force=True)

        assert "test/conversations/Convo1" in storage

    @pytest.mark.asyncio
    async def test_clear_state_forces_write(
        self, storage: InMemoryStorage, adapter: InMemoryAdapter
    ) -> None:
        """Should persist an empty state after clear_state."""
        state = ConversationState(storage)
        first = TurnContext(adapter, adapter.make_activity("one"))
        await state.create_property("name").set(first, "joe")
        await state.save_changes(first)

        second = TurnContext(adapter, adapter.make_activity("two"))
        await state.load(second)
        await state.clear_state(second)
        await state.save_changes(second)

        items = await storage.read(["test/conversations/Convo1"])
        assert items["test/conversations/Convo1"] == {}

    @pytest.mark.asyncio
    async def test_delete(self, storage: InMemoryStorage, turn_context: TurnContext) -> None:
        """Should delete stored state and reset the cache."""
        state = ConversationState(storage)
        await state.create_property("name").set(turn_context, "joe")
        await state.save_changes(turn_context)

        await state.delete(turn_context)

        assert len(storage) == 0
        assert state.get(turn_context) == {}

    @pytest.mark.asyncio
    async def test_load_is_cached_per_turn(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should not reload unless forced."""
        state = ConversationState(storage)
        await state.load(turn_context)
        state.get(turn_context)["local"] = True

        await state.load(turn_context)
        assert state.get(turn_context) == {"local": True}

        await state.load(turn_context, force=True)
        assert state.get(turn_context) == {}


class TestBotStateSet:
    """Tests for BotStateSet."""

    @pytest.mark.asyncio
    async def test_load_and_save_all(
        self, storage: InMemoryStorage, turn_context: TurnContext
    ) -> None:
        """Should load and save every member."""
        conversation = ConversationState(storage)
        user = UserState(storage)
        state_set = BotStateSet(conversation).add(user)

        await state_set.load_all(turn_context)
        conversation.get(turn_context)["topic"] = "weather"
        user.get(turn_context)["name"] = "joe"
        await state_set.save_all_changes(turn_context)

        items = await storage.read(["test/conversations/Convo1", "test/users/user1"])
        assert items["test/conversations/Convo1"] == {"topic": "weather"}
        assert items["test/users/user1"] == {"name": "joe"}


class TestAutoSaveStateMiddleware:
    """Tests for AutoSaveStateMiddleware."""

    @pytest.mark.asyncio
    async def test_saves_after_turn(
        self, storage: InMemoryStorage, adapter: InMemoryAdapter
    ) -> None:
        """Should save changed state once the bot logic returns."""
        conversation = ConversationState(storage)
        adapter.use(AutoSaveStateMiddleware(conversation))
        count = conversation.create_property("count")

        async def logic(turn_context: TurnContext) -> None:
            await count.set(turn_context, (await count.get(turn_context, int)) + 1)

        await adapter.send("one", logic)
        await adapter.send("two", logic)

        items = await storage.read(["test/conversations/Convo1"])
        assert items["test/conversations/Convo1"] == {"count": 2}
