"""Well-known memory scope names and turn paths."""


class ScopePath:
    """Names of the built-in memory scopes."""

    USER = "user"
    CONVERSATION = "conversation"
    TURN = "turn"
    SETTINGS = "settings"
    DIALOG = "dialog"
    DIALOG_CLASS = "dialogclass"
    DIALOG_CONTEXT = "dialogcontext"
    CLASS = "class"
    THIS = "this"


class TurnPath:
    """Paths in turn memory written by the dialog stack."""

    ACTIVITY = "turn.activity"
    LAST_RESULT = "turn.lastResult"
    RECOGNIZED = "turn.recognized"
    DIALOG_EVENT = "turn.dialogEvent"
    REPEAT_DIALOG_ID = "turn.__repeatDialogId"


class DialogPath:
    """Paths in dialog memory reserved by the dialog stack."""

    PATH_TRACKER = "dialog._tracker.paths"
    LAST_ACCESS = "_lastAccess"
