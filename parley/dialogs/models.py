"""Serializable dialog stack frames and turn results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from parley.dialogs.enums import DialogTurnStatus


class DialogInstance(BaseModel):
    """One frame of the dialog stack.

    `state` is the dialog's private scratch memory and is mutated in place
    while the frame is active.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Id of the registered dialog definition")
    state: dict[str, Any] = Field(default_factory=dict, description="Dialog scratch memory")
    version: str | None = Field(
        default=None, description="Container version recorded when the frame last ran"
    )


class DialogState(BaseModel):
    """The persisted dialog stack for one conversation.

    Index 0 is the bottom (oldest) frame; the last frame is active.
    Serialized as `{"dialogStack": [{"id": ..., "state": {...}}, ...]}`.
    """

    model_config = ConfigDict(populate_by_name=True)

    dialog_stack: list[DialogInstance] = Field(
        default_factory=list,
        alias="dialogStack",
        description="Stack frames, bottom first",
    )


class DialogTurnResult(BaseModel):
    """Result of beginning, continuing or resuming a dialog."""

    model_config = ConfigDict(frozen=True)

    status: DialogTurnStatus = Field(..., description="Stack state after the call")
    result: Any = Field(default=None, description="Value returned by an ending dialog")
    parent_ended: bool = Field(default=False, description="Whether the parent dialog ended too")


class DialogEvent(BaseModel):
    """An event raised through the dialog stack by DialogContext.emit_event."""

    bubble: bool = Field(default=True, description="Propagate to parent contexts")
    name: str = Field(..., description="Event name")
    value: Any = Field(default=None, description="Event payload")


def as_dialog_state(value: Any) -> DialogState:
    """Rehydrate a persisted stack; mappings come back from storage as plain dicts."""
    if isinstance(value, DialogState):
        return value
    if value is None:
        return DialogState()
    return DialogState.model_validate(value)
