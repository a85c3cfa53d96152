"""Exceptions raised by Parley: dialog stack, memory state manager and bot state."""


class DialogError(Exception):
    """Base exception for dialog errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(DialogError, ValueError):
    """A required argument (context, path, key, dialog id, storage) was missing or invalid."""

    pass


class UnsupportedOperationError(DialogError):
    """A read-only memory scope or key set was asked to change."""

    pass


class ScopeNotFoundError(DialogError, LookupError):
    """A memory path does not start with any registered scope name."""

    def __init__(self, path: str, scope_names: list[str]) -> None:
        self.path = path
        self.scope_names = scope_names
        super().__init__(f"{path} does not match memory scopes:[{','.join(scope_names)}]")


class DialogNotFoundError(DialogError, LookupError):
    """A dialog id is not registered with the current or any parent DialogSet."""

    def __init__(self, dialog_id: str) -> None:
        self.dialog_id = dialog_id
        super().__init__(
            f"DialogContext.begin_dialog(): A dialog with an id of '{dialog_id}' wasn't found. "
            "The dialog must be included in the current or parent DialogSet. "
            "For example, if subclassing a ComponentDialog you can call add_dialog() "
            "within your constructor."
        )


class InvalidDialogStateError(DialogError):
    """An operation is not valid for the current state of the dialog stack or bot state."""

    pass
