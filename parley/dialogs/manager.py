"""DialogManager: runs a root dialog against conversation and user state."""

import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from parley.config.models.dialogs import DialogsConfig
from parley.dialogs.context import DialogContext
from parley.dialogs.dialog import Dialog
from parley.dialogs.dialog_set import DialogSet
from parley.dialogs.memory.configuration import (
    CONFIGURATION_CACHE_KEY,
    DialogStateManagerConfiguration,
)
from parley.dialogs.memory.scopes.settings import CONFIGURATION_KEY
from parley.dialogs.models import DialogState, DialogTurnResult, as_dialog_state
from parley.dialogs.paths import DialogPath
from parley.dialogs.runner import inner_run
from parley.exceptions import InvalidDialogStateError
from parley.observability.logging import get_logger
from parley.observability.metrics import DIALOG_TURN_DURATION, DIALOG_TURNS
from parley.state.states import BotStateSet, ConversationState, UserState
from parley.turn.context import TurnContext

logger = get_logger(__name__)


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class DialogManagerResult(BaseModel):
    """Outcome of one DialogManager turn."""

    turn_result: DialogTurnResult = Field(..., description="Result of running the root dialog")


class DialogManager:
    """Host a root dialog: load state, expire idle conversations, run, save.

    Conversation (and optionally user) state are registered on turn state so
    the ``conversation`` and ``user`` memory scopes can find them.
    """

    def __init__(
        self,
        root_dialog: Dialog | None = None,
        conversation_state: ConversationState | None = None,
        user_state: UserState | None = None,
        config: DialogsConfig | None = None,
        state_configuration: DialogStateManagerConfiguration | None = None,
        initial_turn_state: Mapping[Any, Any] | None = None,
        configuration: Mapping[str, Any] | BaseModel | None = None,
        record_metrics: bool = True,
    ) -> None:
        """Create a dialog manager.

        Args:
            root_dialog: Dialog started when the stack is empty
            conversation_state: State holding the dialog stack
            user_state: Optional state backing the ``user`` scope
            config: Dialog settings (state property name, expiration)
            state_configuration: Memory scopes/path resolvers to use instead
                of the defaults
            initial_turn_state: Items copied into turn state on every turn
            configuration: Application configuration exposed as ``settings``
            record_metrics: Whether to record prometheus turn metrics
        """
        self.config = config or DialogsConfig()
        self.conversation_state = conversation_state
        self.user_state = user_state
        self.state_configuration = state_configuration
        self.initial_turn_state: dict[Any, Any] = dict(initial_turn_state or {})
        self.configuration = configuration
        self.record_metrics = record_metrics
        self.dialogs = DialogSet()
        self._root_dialog_id: str | None = None
        if root_dialog is not None:
            self.root_dialog = root_dialog

    @property
    def root_dialog(self) -> Dialog | None:
        return self.dialogs.find(self._root_dialog_id) if self._root_dialog_id else None

    @root_dialog.setter
    def root_dialog(self, dialog: Dialog) -> None:
        self.dialogs = DialogSet()
        self.dialogs.add(dialog)
        self._root_dialog_id = dialog.id

    async def on_turn(self, turn_context: TurnContext) -> DialogManagerResult:
        """Run the root dialog for one turn and persist the resulting state."""
        if self.conversation_state is None:
            raise InvalidDialogStateError("DialogManager.on_turn(): conversation_state is required")
        if self._root_dialog_id is None:
            raise InvalidDialogStateError("DialogManager.on_turn(): root_dialog is required")

        start = time.perf_counter()
        self._register_turn_state(turn_context)

        bot_state_set = BotStateSet(self.conversation_state)
        if self.user_state is not None:
            bot_state_set.add(self.user_state)

        await self._expire_conversation(turn_context)

        accessor = self.conversation_state.create_property(self.config.state_property)
        dialog_state = as_dialog_state(await accessor.get(turn_context, DialogState))
        await accessor.set(turn_context, dialog_state)

        dialog_context = DialogContext(self.dialogs, turn_context, dialog_state)
        turn_result = await inner_run(
            turn_context,
            self._root_dialog_id,
            dialog_context,
            log_snapshot=self.config.log_state_snapshot,
        )

        await bot_state_set.save_all_changes(turn_context)

        if self.record_metrics:
            DIALOG_TURNS.labels(status=turn_result.status.value).inc()
            DIALOG_TURN_DURATION.observe(time.perf_counter() - start)
        logger.debug(
            "dialog_turn_completed",
            root_dialog_id=self._root_dialog_id,
            status=turn_result.status.value,
            stack_depth=len(dialog_state.dialog_stack),
        )
        return DialogManagerResult(turn_result=turn_result)

    def _register_turn_state(self, turn_context: TurnContext) -> None:
        turn_state = turn_context.turn_state
        turn_state[ConversationState] = self.conversation_state
        if self.user_state is not None:
            turn_state[UserState] = self.user_state
        if self.configuration is not None:
            turn_state[CONFIGURATION_KEY] = self.configuration
        if self.state_configuration is not None:
            turn_state[CONFIGURATION_CACHE_KEY] = self.state_configuration
        for key, value in self.initial_turn_state.items():
            turn_state[key] = value

    async def _expire_conversation(self, turn_context: TurnContext) -> None:
        """Clear conversation state if it has been idle longer than expire_after_seconds."""
        now = utc_now()
        last_access_property = self.conversation_state.create_property(DialogPath.LAST_ACCESS)
        stored = await last_access_property.get(turn_context, now.isoformat)
        last_access = datetime.fromisoformat(stored) if isinstance(stored, str) else now

        expire_after = self.config.expire_after_seconds
        if expire_after is not None and (now - last_access).total_seconds() >= expire_after:
            logger.info(
                "conversation_expired",
                idle_seconds=(now - last_access).total_seconds(),
                expire_after_seconds=expire_after,
            )
            await self.conversation_state.clear_state(turn_context)

        await last_access_property.set(turn_context, now.isoformat())
