"""In-memory implementation of Storage."""

import json
from typing import Any

from parley.exceptions import InvalidArgumentError
from parley.observability.logging import get_logger
from parley.state.serialization import dumps
from parley.state.storage import Storage

logger = get_logger(__name__)


class InMemoryStorage(Storage):
    """In-memory implementation of Storage for testing and development.

    Items are kept as JSON text, so every read returns a fresh copy shaped
    the way a durable backend would return it. Not suitable for production.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._items: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._items[key] = dumps(value)

    async def read(self, keys: list[str]) -> dict[str, Any]:
        if keys is None:
            raise InvalidArgumentError("keys is required")
        return {key: json.loads(self._items[key]) for key in keys if key in self._items}

    async def write(self, changes: dict[str, Any]) -> None:
        if changes is None:
            raise InvalidArgumentError("changes is required")
        for key, value in changes.items():
            self._items[key] = dumps(value)
        logger.debug("storage_written", keys=list(changes))

    async def delete(self, keys: list[str]) -> None:
        if keys is None:
            raise InvalidArgumentError("keys is required")
        for key in keys:
            self._items.pop(key, None)
        logger.debug("storage_deleted", keys=list(keys))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
