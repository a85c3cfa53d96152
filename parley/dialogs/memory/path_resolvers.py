"""Path resolvers: shorthand aliases expanded before scope lookup."""

from abc import ABC, abstractmethod

from parley.dialogs.paths import TurnPath
from parley.exceptions import InvalidArgumentError


class PathResolver(ABC):
    """Transforms a path before it is resolved against memory scopes."""

    @abstractmethod
    def transform_path(self, path: str) -> str:
        """Return the transformed path, or path unchanged if it does not apply."""
        pass


def _is_path_char(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


class AliasPathResolver(PathResolver):
    """Expands a prefix alias, e.g. ``$foo`` -> ``dialog.foo``.

    The alias only applies when it is followed by a letter or underscore, so
    ``$`` and ``$23`` are left alone and an expanded path is never expanded
    again.
    """

    def __init__(self, alias: str, prefix: str, postfix: str | None = None) -> None:
        if not alias:
            raise InvalidArgumentError("alias is required")
        if prefix is None:
            raise InvalidArgumentError("prefix is required")
        self.alias = alias.strip()
        self.prefix = prefix.strip()
        self.postfix = postfix or ""

    def transform_path(self, path: str) -> str:
        if path is None:
            raise InvalidArgumentError("path is required")

        path = path.strip()
        if (
            path.startswith(self.alias)
            and len(path) > len(self.alias)
            and _is_path_char(path[len(self.alias)])
        ):
            # $foo.bar -> dialog.foo.bar
            return f"{self.prefix}{path[len(self.alias):]}{self.postfix}".rstrip(".")

        return path


class DollarPathResolver(AliasPathResolver):
    """``$foo`` -> ``dialog.foo``."""

    def __init__(self) -> None:
        super().__init__("$", "dialog.")


class HashPathResolver(AliasPathResolver):
    """``#intent`` -> ``turn.recognized.intents.intent``."""

    def __init__(self) -> None:
        super().__init__("#", f"{TurnPath.RECOGNIZED}.intents.")


class AtAtPathResolver(AliasPathResolver):
    """``@@entity`` -> ``turn.recognized.entities.entity`` (all values)."""

    def __init__(self) -> None:
        super().__init__("@@", f"{TurnPath.RECOGNIZED}.entities.")


class PercentPathResolver(AliasPathResolver):
    """``%property`` -> ``class.property``."""

    def __init__(self) -> None:
        super().__init__("%", "class.")


class AtPathResolver(AliasPathResolver):
    """``@entity`` -> ``turn.recognized.entities.entity.first()`` (first value).

    Any remainder after the entity name is kept after ``first()``:
    ``@foo.bar`` -> ``turn.recognized.entities.foo.first().bar``.
    """

    def __init__(self) -> None:
        super().__init__("@", "")
        self._entity_prefix = f"{TurnPath.RECOGNIZED}.entities."

    def transform_path(self, path: str) -> str:
        if path is None:
            raise InvalidArgumentError("path is required")

        path = path.strip()
        if path.startswith("@") and len(path) > 1 and _is_path_char(path[1]):
            separators = [i for i in (path.find("."), path.find("[")) if i != -1]
            end = min(separators) if separators else len(path)
            prop = path[1:end]
            suffix = path[end:]
            return f"{self._entity_prefix}{prop}.first(){suffix}"

        return path
