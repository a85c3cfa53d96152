"""Scoped dialog memory: scopes, path resolvers and the state manager."""

from parley.dialogs.memory.configuration import (
    MEMORY_SCOPES_KEY,
    PATH_RESOLVERS_KEY,
    DialogStateManagerConfiguration,
    default_memory_scopes,
    default_path_resolvers,
)
from parley.dialogs.memory.path_resolvers import (
    AliasPathResolver,
    AtAtPathResolver,
    AtPathResolver,
    DollarPathResolver,
    HashPathResolver,
    PathResolver,
    PercentPathResolver,
)
from parley.dialogs.memory.read_only import ReadOnlyObject
from parley.dialogs.memory.state_manager import DialogStateManager

__all__ = [
    "AliasPathResolver",
    "AtAtPathResolver",
    "AtPathResolver",
    "DialogStateManager",
    "DialogStateManagerConfiguration",
    "DollarPathResolver",
    "HashPathResolver",
    "MEMORY_SCOPES_KEY",
    "PATH_RESOLVERS_KEY",
    "PathResolver",
    "PercentPathResolver",
    "ReadOnlyObject",
    "default_memory_scopes",
    "default_path_resolvers",
]
