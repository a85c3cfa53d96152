"""JSON-compatible conversion for persisted state."""

import json
from collections.abc import Mapping
from typing import Any

from pydantic_core import to_jsonable_python


class StorageError(Exception):
    """Raised when state cannot be read, written or serialized."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _fallback(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, set | frozenset):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_plain(value: Any) -> Any:
    """Convert models, mappings and sequences to plain JSON-compatible data."""
    try:
        return to_jsonable_python(value, by_alias=True, fallback=_fallback)
    except (TypeError, ValueError) as e:
        raise StorageError(f"State is not serializable: {e}") from e


def dumps(value: Any) -> str:
    """Serialize state to a stable JSON string."""
    return json.dumps(to_plain(value), sort_keys=True)
