"""Enums for the dialog stack."""

from enum import Enum


class DialogTurnStatus(str, Enum):
    """State of the dialog stack after a turn."""

    EMPTY = "empty"  # No dialog was active
    WAITING = "waiting"  # Active dialog is waiting for input
    COMPLETE = "complete"  # Active dialog ended successfully
    CANCELLED = "cancelled"  # Active dialog was cancelled


class DialogReason(str, Enum):
    """Why a dialog is being started, resumed or ended."""

    BEGIN_CALLED = "beginCalled"
    CONTINUE_CALLED = "continueCalled"
    END_CALLED = "endCalled"
    REPLACE_CALLED = "replaceCalled"
    CANCEL_CALLED = "cancelCalled"
    NEXT_CALLED = "nextCalled"


class DialogEvents(str, Enum):
    """Names of events raised through the dialog stack."""

    BEGIN_DIALOG = "beginDialog"
    REPROMPT_DIALOG = "repromptDialog"
    CANCEL_DIALOG = "cancelDialog"
    ACTIVITY_RECEIVED = "activityReceived"
    VERSION_CHANGED = "versionChanged"
    ERROR = "error"
