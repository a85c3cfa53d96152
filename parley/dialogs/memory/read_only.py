"""Read-only mapping view over an arbitrary object."""

from collections.abc import Iterator, Mapping
from typing import Any

from parley.dialogs import object_path
from parley.exceptions import InvalidArgumentError

_SCALARS = (str, bytes, int, float, bool)


class ReadOnlyObject(Mapping[str, Any]):
    """Expose an object's public properties as a read-only mapping.

    Nested non-scalar values are wrapped as well, so nothing reachable
    through the view can be changed with object path writes.
    """

    def __init__(self, obj: Any) -> None:
        if obj is None:
            raise InvalidArgumentError("obj is required")
        self._obj = obj

    def __getitem__(self, key: str) -> Any:
        if key not in object_path.get_properties(self._obj):
            raise KeyError(key)
        return self._wrap(object_path.get_property(self._obj, key))

    def __iter__(self) -> Iterator[str]:
        return iter(object_path.get_properties(self._obj))

    def __len__(self) -> int:
        return len(object_path.get_properties(self._obj))

    def __deepcopy__(self, memo: dict[int, Any]) -> "ReadOnlyObject":
        return self

    def __repr__(self) -> str:
        return f"ReadOnlyObject({self._obj!r})"

    @staticmethod
    def _wrap(value: Any) -> Any:
        if value is None or isinstance(value, _SCALARS) or isinstance(value, ReadOnlyObject):
            return value
        if isinstance(value, list | tuple):
            return tuple(ReadOnlyObject._wrap(item) for item in value)
        return ReadOnlyObject(value)
