"""Storage abstract interface."""

from abc import ABC, abstractmethod
from typing import Any


class Storage(ABC):
    """Abstract key/value storage for bot state.

    Values are JSON-compatible objects; implementations return what was
    written as plain mappings and lists.
    """

    @abstractmethod
    async def read(self, keys: list[str]) -> dict[str, Any]:
        """Read the given keys. Missing keys are omitted from the result."""
        pass

    @abstractmethod
    async def write(self, changes: dict[str, Any]) -> None:
        """Write (insert or replace) the given items."""
        pass

    @abstractmethod
    async def delete(self, keys: list[str]) -> None:
        """Delete the given keys. Missing keys are ignored."""
        pass
