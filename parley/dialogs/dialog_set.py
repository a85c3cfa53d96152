"""DialogSet: the registry of dialogs a DialogContext can start."""

import hashlib
from collections.abc import Iterator
from typing import TYPE_CHECKING

from parley.dialogs.dialog import Dialog
from parley.dialogs.models import DialogState, as_dialog_state
from parley.exceptions import InvalidArgumentError, InvalidDialogStateError
from parley.observability.logging import get_logger
from parley.observability.telemetry import BotTelemetryClient, NullBotTelemetryClient
from parley.state.bot_state import BotStatePropertyAccessor

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext
    from parley.turn.context import TurnContext

logger = get_logger(__name__)


class DialogSet:
    """A collection of dialogs addressable by id.

    When created with a state property accessor, `create_context` loads the
    persisted dialog stack for the current conversation.
    """

    def __init__(self, dialog_state: BotStatePropertyAccessor | None = None) -> None:
        self._dialog_state = dialog_state
        self._dialogs: dict[str, Dialog] = {}
        self._telemetry_client: BotTelemetryClient = NullBotTelemetryClient()
        self._version: str | None = None

    @property
    def telemetry_client(self) -> BotTelemetryClient:
        return self._telemetry_client

    @telemetry_client.setter
    def telemetry_client(self, value: BotTelemetryClient | None) -> None:
        self._telemetry_client = value if value is not None else NullBotTelemetryClient()
        for dialog in self._dialogs.values():
            dialog.telemetry_client = self._telemetry_client

    def add(self, dialog: Dialog) -> "DialogSet":
        """Register a dialog.

        A different dialog with an id that is already taken is renamed with
        a numeric suffix (``confirm`` -> ``confirm2``).
        """
        if dialog is None:
            raise InvalidArgumentError("dialog is required")

        self._version = None
        existing = self._dialogs.get(dialog.id)
        if existing is dialog:
            return self
        if existing is not None:
            suffix = 2
            while f"{dialog.id}{suffix}" in self._dialogs:
                suffix += 1
            logger.debug("dialog_id_renamed", dialog_id=dialog.id, new_id=f"{dialog.id}{suffix}")
            dialog.id = f"{dialog.id}{suffix}"

        dialog.telemetry_client = self._telemetry_client
        self._dialogs[dialog.id] = dialog
        return self

    def find(self, dialog_id: str) -> Dialog | None:
        if not dialog_id:
            raise InvalidArgumentError("dialog_id is required")
        return self._dialogs.get(dialog_id)

    def get_dialogs(self) -> list[Dialog]:
        return list(self._dialogs.values())

    def get_version(self) -> str:
        """Hash of every registered dialog's version."""
        if self._version is None:
            versions = "".join(dialog.get_version() for dialog in self._dialogs.values())
            self._version = hashlib.sha256(versions.encode("utf-8")).hexdigest()
        return self._version

    async def create_context(self, turn_context: "TurnContext") -> "DialogContext":
        """Create a DialogContext over the persisted stack for this conversation."""
        from parley.dialogs.context import DialogContext

        if turn_context is None:
            raise InvalidArgumentError("turn_context is required")
        if self._dialog_state is None:
            raise InvalidDialogStateError(
                "DialogSet.create_context(): DialogSet created without a dialog state accessor."
            )

        state = as_dialog_state(await self._dialog_state.get(turn_context, DialogState))
        await self._dialog_state.set(turn_context, state)
        return DialogContext(self, turn_context, state)

    def __iter__(self) -> Iterator[Dialog]:
        return iter(self._dialogs.values())

    def __len__(self) -> int:
        return len(self._dialogs)

    def __contains__(self, dialog_id: object) -> bool:
        return dialog_id in self._dialogs
