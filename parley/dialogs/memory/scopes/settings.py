"""Settings memory scope: read-only view of application configuration."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from parley.dialogs.memory.scopes.base import ReadOnlyMemoryScope, require_context
from parley.dialogs.paths import ScopePath

if TYPE_CHECKING:
    from parley.dialogs.context import DialogContext

# turn state key of the raw configuration (mapping or pydantic model)
CONFIGURATION_KEY = "configuration"
SETTINGS_MEMORY_KEY = "settings"

_KEY_SEPARATORS = (":", "__")


def _split_key(key: str) -> list[str]:
    parts = [key]
    for separator in _KEY_SEPARATORS:
        parts = [piece for part in parts for piece in part.split(separator)]
    return [part for part in parts if part]


def build_settings_tree(source: Any) -> dict[str, Any]:
    """Turn configuration into a nested tree.

    Flat keys such as ``"bot:greeting"`` or ``"BOT__GREETING"`` become nested
    mappings, so they can be addressed as ``settings.bot.greeting``.
    """
    if source is None:
        return {}
    if isinstance(source, BaseModel):
        source = source.model_dump(mode="json")

    tree: dict[str, Any] = {}
    for key, value in source.items():
        parts = _split_key(str(key))
        if not parts:
            continue
        node = tree
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        leaf = build_settings_tree(value) if isinstance(value, Mapping | BaseModel) else value
        existing = node.get(parts[-1])
        if isinstance(existing, dict) and isinstance(leaf, dict):
            existing.update(leaf)
        else:
            node[parts[-1]] = leaf
    return tree


class SettingsMemoryScope(ReadOnlyMemoryScope):
    """``settings``: configuration, built once per turn on first access.

    Configuration comes from the scope itself when given one, otherwise from
    turn state under ``CONFIGURATION_KEY``.
    """

    def __init__(self, settings: Mapping[str, Any] | BaseModel | None = None) -> None:
        super().__init__(ScopePath.SETTINGS, include_in_snapshot=False)
        self._settings = settings

    def get_memory(self, dialog_context: "DialogContext") -> Any:
        turn_state = require_context(dialog_context).context.turn_state
        memory = turn_state.get(SETTINGS_MEMORY_KEY)
        if memory is None:
            source = self._settings if self._settings is not None else turn_state.get(CONFIGURATION_KEY)
            memory = build_settings_tree(source)
            turn_state[SETTINGS_MEMORY_KEY] = memory
        return memory
