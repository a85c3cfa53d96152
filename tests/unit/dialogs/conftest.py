"""Shared fixtures for dialog stack tests."""

import pytest
import pytest_asyncio

from parley.dialogs import DialogContext, DialogSet
from parley.dialogs.models import DialogState
from parley.observability.telemetry import BotTelemetryClient, Severity
from parley.state import BotStatePropertyAccessor, ConversationState, InMemoryStorage, UserState
from parley.turn import InMemoryAdapter, TurnContext


class RecordingTelemetryClient(BotTelemetryClient):
    """Telemetry client that keeps every call for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, str]]] = []
        self.dialog_views: list[str] = []
        self.traces: list[tuple[str, Severity]] = []
        self.exceptions: list[BaseException] = []

    def track_event(self, name, properties=None, metrics=None) -> None:
        self.events.append((name, dict(properties or {})))

    def track_dialog_view(self, dialog_name, properties=None, metrics=None) -> None:
        self.dialog_views.append(dialog_name)

    def track_trace(self, message, severity=Severity.INFORMATION, properties=None) -> None:
        self.traces.append((message, severity))

    def track_exception(self, exception, properties=None, metrics=None) -> None:
        self.exceptions.append(exception)

    @property
    def event_names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def telemetry() -> RecordingTelemetryClient:
    return RecordingTelemetryClient()


@pytest.fixture
def adapter() -> InMemoryAdapter:
    return InMemoryAdapter()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def conversation_state(storage: InMemoryStorage) -> ConversationState:
    return ConversationState(storage)


@pytest.fixture
def user_state(storage: InMemoryStorage) -> UserState:
    return UserState(storage)


@pytest.fixture
def dialog_state(conversation_state: ConversationState) -> BotStatePropertyAccessor:
    return conversation_state.create_property("DialogState")


@pytest.fixture
def turn_context(
    adapter: InMemoryAdapter,
    conversation_state: ConversationState,
    user_state: UserState,
) -> TurnContext:
    """A message turn with conversation and user state registered."""
    turn_context = TurnContext(adapter, adapter.make_activity("hi"))
    turn_context.turn_state[ConversationState] = conversation_state
    turn_context.turn_state[UserState] = user_state
    return turn_context


@pytest_asyncio.fixture
async def dialog_context(
    turn_context: TurnContext,
    conversation_state: ConversationState,
    user_state: UserState,
) -> DialogContext:
    """A DialogContext over an empty stack with both bot states loaded."""
    await conversation_state.load(turn_context)
    await user_state.load(turn_context)
    return DialogContext(DialogSet(), turn_context, DialogState())
