"""MemoryScope base class."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from parley.exceptions import InvalidArgumentError, UnsupportedOperationError

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext


def require_context(dialog_context: "DialogContext | None") -> "DialogContext":
    if dialog_context is None:
        raise InvalidArgumentError("dialog_context is required")
    return dialog_context


class MemoryScope(ABC):
    """A named region of memory bound to the current dialog context.

    Scope instances hold no per-turn data, so one configuration can be
    shared across turns. Persistence hooks default to no-ops.
    """

    def __init__(self, name: str, include_in_snapshot: bool = True) -> None:
        if not name:
            raise InvalidArgumentError("name is required")
        self._name = name
        self._include_in_snapshot = include_in_snapshot

    @property
    def name(self) -> str:
        return self._name

    @property
    def include_in_snapshot(self) -> bool:
        return self._include_in_snapshot

    @abstractmethod
    def get_memory(self, dialog_context: "DialogContext") -> Any:
        """Return the live backing object for this scope, or None."""
        pass

    @abstractmethod
    def set_memory(self, dialog_context: "DialogContext", memory: Any) -> None:
        """Replace the backing object for this scope."""
        pass

    async def load(self, dialog_context: "DialogContext", force: bool = False) -> None:
        return None

    async def save_changes(self, dialog_context: "DialogContext", force: bool = False) -> None:
        return None

    async def delete(self, dialog_context: "DialogContext") -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


class ReadOnlyMemoryScope(MemoryScope):
    """Scope whose memory cannot be replaced."""

    def set_memory(self, dialog_context: "DialogContext", memory: Any) -> None:
        require_context(dialog_context)
        raise UnsupportedOperationError(f"The {self.name} memory scope is read-only")
