"""Dialog stack configuration models."""

from pydantic import BaseModel, Field


class DialogsConfig(BaseModel):
    """Settings consumed by DialogManager and the dialog runner."""

    state_property: str = Field(
        default="DialogState",
        min_length=1,
        description="Conversation state property holding the persisted dialog stack",
    )
    expire_after_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Idle time after which conversation state is cleared",
    )
    log_state_snapshot: bool = Field(
        default=True,
        description="Log a memory snapshot at debug level after each turn",
    )
