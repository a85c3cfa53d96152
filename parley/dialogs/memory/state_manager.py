"""DialogStateManager: path-addressed access to every memory scope."""

import asyncio
import dataclasses
import inspect
from collections.abc import Iterator, Mapping, MutableMapping
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from parley.dialogs import object_path
from parley.dialogs.memory.configuration import (
    CONFIGURATION_CACHE_KEY,
    MEMORY_SCOPES_KEY,
    PATH_RESOLVERS_KEY,
    VERSION_KEY,
    DialogStateManagerConfiguration,
    default_memory_scopes,
    default_path_resolvers,
)
from parley.dialogs.memory.scopes import MemoryScope
from parley.dialogs.paths import DialogPath
from parley.exceptions import (
    InvalidArgumentError,
    ScopeNotFoundError,
    UnsupportedOperationError,
)
from parley.observability.logging import get_logger
from parley.observability.metrics import MEMORY_SCOPE_FAILURES

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext

logger = get_logger(__name__)

_FIRST = ".FIRST()"
_SEPARATORS = (".", "[")


@lru_cache(maxsize=128)
def _adapter(expected_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(expected_type)


def _normalize(value: Any) -> Any:
    """Copy a value into plain JSON-like data before it is stored."""
    if isinstance(value, BaseModel):
        return _normalize(value.model_dump(by_alias=True))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _normalize(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(key): _normalize(item) for key, item in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [_normalize(item) for item in value]
    return object_path.clone(value)


def _is_unresolved(value: Any) -> bool:
    return isinstance(value, asyncio.Future) or inspect.isawaitable(value)


class _TurnVersion:
    """Write counter shared by every DialogStateManager of one turn.

    `trackers` holds the tracker mappings already reset this turn.
    """

    def __init__(self) -> None:
        self.value = 0
        self.trackers: list[MutableMapping[str, Any]] = []


class _ScopeView(MutableMapping[str, Any]):
    """Live mapping of scope name -> scope memory used as the object path root."""

    def __init__(self, manager: "DialogStateManager") -> None:
        self._manager = manager

    def __getitem__(self, key: str) -> Any:
        scope = self._manager.get_memory_scope(key)
        if scope is None:
            raise KeyError(key)
        return scope.get_memory(self._manager.dialog_context)

    def __setitem__(self, key: str, value: Any) -> None:
        scope = self._manager.get_memory_scope(key)
        if scope is None:
            raise ScopeNotFoundError(key, self._manager.configuration.scope_names)
        scope.set_memory(self._manager.dialog_context, value)

    def __delitem__(self, key: str) -> None:
        raise UnsupportedOperationError(f"Memory scope '{key}' cannot be removed")

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._manager.get_memory_scope(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._manager.configuration.scope_names)

    def __len__(self) -> int:
        return len(self._manager.configuration.memory_scopes)


class DialogStateManager(MutableMapping[str, Any]):
    """Resolve path expressions against the memory scopes of a dialog context.

    Paths are transformed by every registered path resolver, then split at
    the first ``.`` or ``[`` to find the scope. Reads always return clones.
    Every write bumps a turn-local version counter shared by all managers
    created during the turn; watched paths (see `track_paths`) are stamped
    with that counter so callers can ask whether anything changed since a
    watermark. Stamps left in dialog memory by earlier turns are reset to 0
    the first time a turn touches their tracker.

    As a mapping it is keyed by scope name: reading returns a clone of the
    scope memory, assigning replaces the scope memory, and keys can never
    be added or removed.
    """

    def __init__(
        self,
        dialog_context: "DialogContext",
        configuration: DialogStateManagerConfiguration | None = None,
    ) -> None:
        if dialog_context is None:
            raise InvalidArgumentError("dialog_context is required")
        self.dialog_context = dialog_context
        self._view = _ScopeView(self)

        turn_state = dialog_context.context.turn_state
        if configuration is None:
            configuration = turn_state.get(CONFIGURATION_CACHE_KEY)
        if configuration is None:
            configuration = DialogStateManagerConfiguration(
                [*default_memory_scopes(), *turn_state.get(MEMORY_SCOPES_KEY, [])],
                [*default_path_resolvers(), *turn_state.get(PATH_RESOLVERS_KEY, [])],
            )
        self.configuration = configuration
        # shared by every other manager created this turn
        turn_state[CONFIGURATION_CACHE_KEY] = configuration
        if VERSION_KEY not in turn_state:
            turn_state[VERSION_KEY] = _TurnVersion()
        self._turn_version: _TurnVersion = turn_state[VERSION_KEY]

    @property
    def version(self) -> int:
        """Number of writes made through any manager this turn."""
        return self._turn_version.value

    def get_memory_scope(self, name: str) -> MemoryScope | None:
        if name is None:
            raise InvalidArgumentError("name is required")
        return self.configuration.find_memory_scope(name)

    def transform_path(self, path: str) -> str:
        """Apply every path resolver in registration order."""
        for resolver in self.configuration.path_resolvers:
            path = resolver.transform_path(path)
        return path

    def resolve_memory_scope(self, path: str) -> tuple[MemoryScope, str]:
        """Return the scope a path addresses and the path remaining below it.

        Raises:
            InvalidArgumentError: If path is None
            ScopeNotFoundError: If the path does not start with a scope name
        """
        if path is None:
            raise InvalidArgumentError("path is required")

        path = self.transform_path(path)
        positions = [i for i in (path.find(sep) for sep in _SEPARATORS) if i > 0]
        if positions:
            split = min(positions)
            scope = self.get_memory_scope(path[:split])
            if scope is not None:
                remaining = path[split + 1 :] if path[split] == "." else path[split:]
                return scope, remaining

        scope = self.get_memory_scope(path)
        if scope is None:
            raise ScopeNotFoundError(path, self.configuration.scope_names)
        return scope, ""

    def try_get_value(self, path: str, expected_type: Any = None) -> tuple[Any, bool]:
        """Look up a path, returning ``(clone_of_value, found)``.

        A missing path, unknown scope, or value that cannot be converted to
        `expected_type` reports ``(None, False)``.
        """
        if path is None:
            raise InvalidArgumentError("path is required")

        path = self.transform_path(path)
        try:
            scope, remaining = self.resolve_memory_scope(path)
        except ScopeNotFoundError:
            logger.debug("memory_scope_not_found", path=path)
            return None, False

        if not remaining:
            value = scope.get_memory(self.dialog_context)
        else:
            first = path.upper().rfind(_FIRST)
            if first >= 0:
                value = self._get_first_nested(path[:first], path[first + len(_FIRST) :])
            else:
                value = object_path.try_get_path_value(self._view, path)

        if value is None:
            return None, False
        return self._convert(object_path.clone(value), expected_type)

    def get_value(self, path: str, default: Any = None, expected_type: Any = None) -> Any:
        """Get a clone of the value at path, or `default` if it is missing."""
        value, found = self.try_get_value(path, expected_type)
        return value if found else default

    def set_value(self, path: str, value: Any) -> None:
        """Write a copy of value at path.

        Raises:
            InvalidArgumentError: If path is empty or value is an unresolved
                awaitable
            ScopeNotFoundError: If the path does not start with a scope name
            UnsupportedOperationError: If the target scope is read-only
        """
        if _is_unresolved(value):
            raise InvalidArgumentError(
                f"{path} = an unresolved awaitable. Did you forget to await it?"
            )
        if not path:
            raise InvalidArgumentError("path cannot be null or empty")

        path = self.transform_path(path)
        self.resolve_memory_scope(path)
        value = _normalize(value)

        self._turn_version.value += 1
        if self.track_change(path, value):
            object_path.set_path_value(self._view, path, value)

    def remove_value(self, path: str) -> None:
        """Remove the leaf at path. Scopes themselves cannot be removed."""
        if not path:
            raise InvalidArgumentError("path cannot be null or empty")

        path = self.transform_path(path)
        _, remaining = self.resolve_memory_scope(path)
        if not remaining:
            raise UnsupportedOperationError(f"Memory scope '{path}' cannot be removed")

        self._turn_version.value += 1
        if self.track_change(path, None):
            object_path.remove_path_value(self._view, path)

    def get_memory_snapshot(self) -> dict[str, Any]:
        """Plain copy of every scope included in snapshots, keyed by scope name."""
        snapshot: dict[str, Any] = {}
        for scope in self.configuration.memory_scopes:
            if not scope.include_in_snapshot:
                continue
            memory = scope.get_memory(self.dialog_context)
            if memory is not None:
                snapshot[scope.name] = _normalize(memory)
        return snapshot

    async def load_all_scopes(self) -> None:
        """Load every scope; a failing scope is logged and skipped."""
        for scope in self.configuration.memory_scopes:
            try:
                await scope.load(self.dialog_context)
            except Exception as e:
                self._log_scope_failure(scope, "load", e)

    async def save_all_changes(self) -> None:
        """Save every scope; a failing scope is logged and skipped."""
        for scope in self.configuration.memory_scopes:
            try:
                await scope.save_changes(self.dialog_context)
            except Exception as e:
                self._log_scope_failure(scope, "save", e)

    async def delete_scopes_memory(self, name: str) -> None:
        """Delete the backing memory of the named scope."""
        scope = self.get_memory_scope(name)
        if scope is None:
            raise ScopeNotFoundError(name, self.configuration.scope_names)
        try:
            await scope.delete(self.dialog_context)
        except Exception as e:
            self._log_scope_failure(scope, "delete", e)

    def track_paths(self, paths: list[str]) -> list[str]:
        """Start watching paths; returns the normalized names to query with."""
        names: list[str] = []
        for path in paths:
            segments = object_path.try_resolve_path(self._view, self.transform_path(path))
            if segments:
                name = self._tracker_name(segments)
                object_path.set_path_value(self._view, f"{DialogPath.PATH_TRACKER}.{name}", 0)
                self._tracker()
                names.append(name)
        return names

    def any_path_changed(self, counter: int, paths: list[str] | None) -> bool:
        """True if any watched path was written this turn after the `counter` watermark."""
        tracker = self._tracker()
        if tracker is None:
            return False
        for name in paths or []:
            value = tracker.get(name)
            if isinstance(value, int) and value != -1 and value > counter:
                return True
        return False

    def track_change(self, path: str, value: Any) -> bool:
        """Stamp watched counters for path and, for mappings, every child path.

        Returns False if the path cannot be resolved to segments.
        """
        segments = object_path.try_resolve_path(self._view, path)
        if segments is None:
            return False

        scope_name = str(segments[0])
        root = str(segments[1]) if len(segments) > 1 else ""
        if scope_name.startswith("_") or root.startswith("_"):
            return True

        tracker = self._tracker()
        if tracker is not None:
            self._stamp(tracker, self._tracker_name(segments), value)
        return True

    def _stamp(self, tracker: MutableMapping[str, Any], name: str, value: Any) -> None:
        if name in tracker:
            tracker[name] = self.version
        if isinstance(value, Mapping):
            for key, child in value.items():
                self._stamp(tracker, f"{name}_{str(key).lower().replace('.', '_')}", child)

    def _tracker(self) -> MutableMapping[str, Any] | None:
        """Live tracker of the bound dialog memory, reset once per turn."""
        tracker = object_path.try_get_path_value(self._view, DialogPath.PATH_TRACKER)
        if not isinstance(tracker, MutableMapping):
            return None
        seen = self._turn_version.trackers
        if not any(known is tracker for known in seen):
            seen.append(tracker)
            for name, stamp in list(tracker.items()):
                if isinstance(stamp, int) and stamp > 0:
                    tracker[name] = 0
        return tracker

    @staticmethod
    def _tracker_name(segments: list[Any]) -> str:
        return "_".join(str(segment).lower().replace(".", "_") for segment in segments)

    def _get_first_nested(self, prefix: str, remaining: str) -> Any:
        """Value for ``<prefix>.first()<remaining>``.

        Takes the first element of the sequence at prefix; if that element
        is itself a sequence, its first element instead. Only these two
        levels are inspected.
        """
        array = object_path.try_get_path_value(self._view, prefix)
        if not isinstance(array, list | tuple) or not array:
            return None

        first = array[0]
        if isinstance(first, list | tuple):
            if not first:
                return None
            first = first[0]

        remaining = remaining.lstrip(".")
        if not remaining:
            return first
        return object_path.try_get_path_value(first, remaining)

    @staticmethod
    def _convert(value: Any, expected_type: Any) -> tuple[Any, bool]:
        if expected_type is None:
            return value, True
        if isinstance(expected_type, type) and isinstance(value, expected_type):
            return value, True
        try:
            return _adapter(expected_type).validate_python(value), True
        except ValidationError:
            return None, False

    def _log_scope_failure(self, scope: MemoryScope, operation: str, error: Exception) -> None:
        MEMORY_SCOPE_FAILURES.labels(scope=scope.name, operation=operation).inc()
        logger.warning(
            "memory_scope_operation_failed",
            operation=operation,
            scope=scope.name,
            error=str(error),
            error_type=type(error).__name__,
        )

    # Mapping protocol, keyed by scope name

    def __getitem__(self, key: str) -> Any:
        if self.get_memory_scope(key) is None:
            raise KeyError(key)
        return self.get_value(key)

    def __setitem__(self, key: str, value: Any) -> None:
        if self.get_memory_scope(key) is None:
            raise UnsupportedOperationError(f"Memory scopes cannot be added: '{key}'")
        self.set_value(key, value)

    def __delitem__(self, key: str) -> None:
        raise UnsupportedOperationError(f"Memory scopes cannot be removed: '{key}'")

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get_memory_scope(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.configuration.scope_names)

    def __len__(self) -> int:
        return len(self.configuration.memory_scopes)
