"""Path expressions over JSON-like memory trees.

A path is a dotted/bracketed address such as ``user.profile.name``,
``conversation.items[0]``, ``turn['Jo.Bob']`` or ``conversation.stuff[user.name]``.
Bracketed sub-expressions that are neither quoted nor integers are resolved
against the root object and their value becomes the segment.

Lookups are case-insensitive on mapping keys and object attributes; writes
keep the casing of an existing key.
"""

import copy
import re
from collections.abc import Iterator, Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any

from pydantic import BaseModel

from parley.exceptions import InvalidArgumentError, UnsupportedOperationError

Segment = str | int

_INT_PATTERN = re.compile(r"^-?\d+$")
_QUOTES = ("'", '"')
_SCALARS = (str, bytes, int, float, bool)


class CaseInsensitiveDict(MutableMapping[str, Any]):
    """Mapping with case-insensitive string keys that remembers original casing."""

    def __init__(self, data: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._store: dict[str, tuple[str, Any]] = {}
        self.update(data or {}, **kwargs)

    def __setitem__(self, key: str, value: Any) -> None:
        existing = self._store.get(key.lower())
        self._store[key.lower()] = (existing[0] if existing else key, value)

    def __getitem__(self, key: str) -> Any:
        return self._store[key.lower()][1]

    def __delitem__(self, key: str) -> None:
        del self._store[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._store

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"

    def copy(self) -> "CaseInsensitiveDict":
        return CaseInsensitiveDict(self)


def _is_int(text: str) -> bool:
    return bool(_INT_PATTERN.match(text))


def _is_sequence(obj: Any) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, str | bytes)


def _match_key(obj: Mapping[Any, Any], name: str) -> Any:
    """Return the existing key matching name (exact first, then case-insensitive)."""
    if name in obj:
        return name
    lowered = name.lower()
    for key in obj:
        if isinstance(key, str) and key.lower() == lowered:
            return key
    return None


def _attribute_names(obj: Any) -> list[str]:
    if isinstance(obj, BaseModel):
        return list(type(obj).model_fields)
    return [name for name in dir(obj) if not name.startswith("_")]


def _match_attribute(obj: Any, name: str) -> str | None:
    lowered = name.lower()
    for attr in _attribute_names(obj):
        if attr == name:
            return attr
    for attr in _attribute_names(obj):
        if attr.lower() == lowered:
            return attr
    return None


def get_properties(obj: Any) -> list[str]:
    """List the property names of a mapping, model or plain object."""
    if obj is None or isinstance(obj, _SCALARS) or _is_sequence(obj):
        return []
    if isinstance(obj, Mapping):
        return [str(key) for key in obj]
    return [
        name
        for name in _attribute_names(obj)
        if not callable(getattr(obj, name, None))
    ]


def get_property(obj: Any, name: Segment) -> Any:
    """Get one property (or index) of obj, or None if it does not exist."""
    if obj is None:
        return None

    if isinstance(name, int):
        if _is_sequence(obj):
            return obj[name] if 0 <= name < len(obj) else None
        name = str(name)

    if isinstance(obj, Mapping):
        key = _match_key(obj, name)
        return obj[key] if key is not None else None

    if isinstance(obj, _SCALARS) or _is_sequence(obj):
        return None

    attr = _match_attribute(obj, name)
    if attr is None:
        return None
    value = getattr(obj, attr, None)
    return None if callable(value) and not isinstance(value, type) else value


def set_property(obj: Any, name: Segment, value: Any) -> None:
    """Set one property (or index) of obj."""
    if obj is None:
        raise InvalidArgumentError(f"Cannot set '{name}' on a missing object")

    if isinstance(name, int):
        if isinstance(obj, MutableSequence):
            if name < 0:
                raise InvalidArgumentError(f"Negative index {name} is not supported")
            while len(obj) <= name:
                obj.append(None)
            obj[name] = value
            return
        name = str(name)

    if isinstance(obj, Mapping):
        if not isinstance(obj, MutableMapping):
            raise UnsupportedOperationError(f"Cannot set '{name}': object is read-only")
        key = _match_key(obj, name)
        obj[key if key is not None else name] = value
        return

    if isinstance(obj, _SCALARS) or _is_sequence(obj):
        raise InvalidArgumentError(f"Cannot set '{name}' on a {type(obj).__name__} value")

    setattr(obj, _match_attribute(obj, name) or name, value)


def remove_property(obj: Any, name: Segment) -> None:
    """Remove one property (or index) of obj; missing properties are ignored."""
    if obj is None:
        return

    if isinstance(name, int):
        if isinstance(obj, MutableSequence):
            if 0 <= name < len(obj):
                del obj[name]
            return
        name = str(name)

    if isinstance(obj, Mapping):
        key = _match_key(obj, name)
        if key is None:
            return
        if not isinstance(obj, MutableMapping):
            raise UnsupportedOperationError(f"Cannot remove '{name}': object is read-only")
        del obj[key]
        return

    attr = _match_attribute(obj, name)
    if attr is not None:
        setattr(obj, attr, None)


def _resolve_bracket(obj: Any, expression: str, eval_expressions: bool) -> Segment | None:
    expression = expression.strip()
    if expression[:1] in _QUOTES:
        if len(expression) < 2 or expression[-1] != expression[0]:
            return None
        return expression[1:-1]
    if _is_int(expression):
        return int(expression)
    if not eval_expressions:
        return expression

    inner = try_resolve_path(obj, expression)
    if inner is None:
        return None
    value = get_by_segments(obj, inner)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return str(value)


def try_resolve_path(
    obj: Any, property_path: str, eval_expressions: bool = True
) -> list[Segment] | None:
    """Split a path into segments, evaluating bracket expressions against obj.

    Returns None if the path is malformed (unbalanced brackets or quotes) or
    a bracket expression does not resolve.
    """
    if property_path is None:
        return None

    path = property_path
    if not path:
        return []

    if path[0] in _QUOTES:
        if len(path) < 2 or path[-1] != path[0]:
            return None
        return [path[1:-1]]

    if _is_int(path):
        return [int(path)]

    segments: list[Segment] = []
    start = 0
    i = 0
    while i < len(path):
        ch = path[i]
        if ch == "]":
            return None
        if ch in ".[":
            if i > start:
                segments.append(path[start:i])
            if ch == "[":
                depth = 1
                j = i + 1
                while j < len(path) and depth:
                    if path[j] == "[":
                        depth += 1
                    elif path[j] == "]":
                        depth -= 1
                    j += 1
                if depth:
                    return None
                segment = _resolve_bracket(obj, path[i + 1 : j - 1], eval_expressions)
                if segment is None:
                    return None
                segments.append(segment)
                i = start = j
                continue
            start = i + 1
        i += 1

    if start < len(path):
        segments.append(path[start:])
    return segments


def get_by_segments(obj: Any, segments: list[Segment]) -> Any:
    current = obj
    for segment in segments:
        current = get_property(current, segment)
        if current is None:
            return None
    return current


def try_get_path_value(obj: Any, path: str) -> Any:
    """Get the value at path, or None if any part of it is missing."""
    if obj is None or path is None:
        return None
    segments = try_resolve_path(obj, path)
    if segments is None:
        return None
    return get_by_segments(obj, segments)


def get_path_value(obj: Any, path: str, default: Any = None) -> Any:
    value = try_get_path_value(obj, path)
    return default if value is None else value


def has_value(obj: Any, path: str) -> bool:
    return try_get_path_value(obj, path) is not None


def set_path_value(obj: Any, path: str, value: Any) -> None:
    """Set the value at path, creating intermediate mappings and lists."""
    segments = try_resolve_path(obj, path)
    if segments is None:
        raise InvalidArgumentError(f"'{path}' is not a valid path")
    if not segments:
        raise InvalidArgumentError("path cannot be empty")

    current = obj
    for index, segment in enumerate(segments[:-1]):
        child = get_property(current, segment)
        if child is None:
            set_property(current, segment, [] if isinstance(segments[index + 1], int) else {})
            # re-read: scopes may copy the value they are given
            child = get_property(current, segment)
        if child is None:
            raise InvalidArgumentError(f"Cannot create '{segment}' while setting '{path}'")
        current = child

    set_property(current, segments[-1], value)


def remove_path_value(obj: Any, path: str) -> None:
    """Remove the leaf at path. Missing paths are ignored."""
    segments = try_resolve_path(obj, path)
    if not segments:
        return
    parent = get_by_segments(obj, segments[:-1])
    if parent is not None:
        remove_property(parent, segments[-1])


def clone(obj: Any) -> Any:
    """Deep copy a value so the caller cannot alias stored memory."""
    return copy.deepcopy(obj)
