"""Registry of memory scopes and path resolvers used by DialogStateManager."""

from collections.abc import Iterable

from parley.dialogs.memory.path_resolvers import (
    AtAtPathResolver,
    AtPathResolver,
    DollarPathResolver,
    HashPathResolver,
    PathResolver,
    PercentPathResolver,
)
from parley.dialogs.memory.scopes import (
    ClassMemoryScope,
    ConversationMemoryScope,
    DialogClassMemoryScope,
    DialogContextMemoryScope,
    DialogMemoryScope,
    MemoryScope,
    SettingsMemoryScope,
    ThisMemoryScope,
    TurnMemoryScope,
    UserMemoryScope,
)
from parley.exceptions import InvalidArgumentError

# turn state keys for extra registrations picked up by DialogStateManager
MEMORY_SCOPES_KEY = "parley.memory_scopes"
PATH_RESOLVERS_KEY = "parley.path_resolvers"
CONFIGURATION_CACHE_KEY = "parley.dialog_state_manager_configuration"
VERSION_KEY = "parley.dialog_state_manager_version"


def default_memory_scopes() -> list[MemoryScope]:
    return [
        TurnMemoryScope(),
        SettingsMemoryScope(),
        DialogMemoryScope(),
        DialogContextMemoryScope(),
        DialogClassMemoryScope(),
        ClassMemoryScope(),
        ThisMemoryScope(),
        ConversationMemoryScope(),
        UserMemoryScope(),
    ]


def default_path_resolvers() -> list[PathResolver]:
    return [
        DollarPathResolver(),
        HashPathResolver(),
        AtAtPathResolver(),
        AtPathResolver(),
        PercentPathResolver(),
    ]


class DialogStateManagerConfiguration:
    """Ordered path resolvers and memory scopes.

    Scope names are unique (case-insensitive) within one configuration.
    """

    def __init__(
        self,
        memory_scopes: Iterable[MemoryScope] | None = None,
        path_resolvers: Iterable[PathResolver] | None = None,
    ) -> None:
        self.memory_scopes: list[MemoryScope] = []
        self.path_resolvers: list[PathResolver] = []
        for scope in memory_scopes or []:
            self.add_memory_scope(scope)
        for resolver in path_resolvers or []:
            self.add_path_resolver(resolver)

    @classmethod
    def default(cls) -> "DialogStateManagerConfiguration":
        return cls(default_memory_scopes(), default_path_resolvers())

    def add_memory_scope(self, scope: MemoryScope) -> "DialogStateManagerConfiguration":
        if scope is None:
            raise InvalidArgumentError("scope is required")
        if self.find_memory_scope(scope.name) is not None:
            raise InvalidArgumentError(f"A memory scope named '{scope.name}' is already registered")
        self.memory_scopes.append(scope)
        return self

    def add_path_resolver(self, resolver: PathResolver) -> "DialogStateManagerConfiguration":
        if resolver is None:
            raise InvalidArgumentError("resolver is required")
        self.path_resolvers.append(resolver)
        return self

    def find_memory_scope(self, name: str) -> MemoryScope | None:
        lowered = name.lower()
        for scope in self.memory_scopes:
            if scope.name.lower() == lowered:
                return scope
        return None

    @property
    def scope_names(self) -> list[str]:
        return [scope.name for scope in self.memory_scopes]
