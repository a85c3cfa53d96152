"""Activity models exchanged between a channel and the bot."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ActivityTypes(str, Enum):
    """Activity types understood by the dialog stack."""

    MESSAGE = "message"
    EVENT = "event"
    CONVERSATION_UPDATE = "conversationUpdate"
    END_OF_CONVERSATION = "endOfConversation"
    TYPING = "typing"
    TRACE = "trace"


class ChannelAccount(BaseModel):
    """A participant on a channel."""

    id: str = Field(..., description="Channel-specific participant id")
    name: str | None = Field(default=None, description="Display name")


class ConversationAccount(BaseModel):
    """The conversation an activity belongs to."""

    id: str = Field(..., description="Channel-specific conversation id")
    name: str | None = Field(default=None, description="Conversation name")


class Activity(BaseModel):
    """A single inbound or outbound activity."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    type: str = Field(default=ActivityTypes.MESSAGE.value, description="Activity type")
    id: str | None = Field(default=None, description="Activity id")
    text: str | None = Field(default=None, description="Message text")
    name: str | None = Field(default=None, description="Event name")
    value: Any = Field(default=None, description="Event or invoke payload")
    locale: str | None = Field(default=None, description="Sender locale")
    channel_id: str | None = Field(default=None, alias="channelId")
    conversation: ConversationAccount | None = Field(default=None)
    from_property: ChannelAccount | None = Field(default=None, alias="from")
    recipient: ChannelAccount | None = Field(default=None)
    reply_to_id: str | None = Field(default=None, alias="replyToId")
    timestamp: datetime = Field(default_factory=utc_now)

    @classmethod
    def message(cls, text: str, **kwargs: Any) -> "Activity":
        """Create a message activity."""
        return cls(type=ActivityTypes.MESSAGE.value, text=text, **kwargs)

    def create_reply(self, text: str | None = None) -> "Activity":
        """Create a message addressed back to the sender of this activity."""
        return Activity(
            type=ActivityTypes.MESSAGE.value,
            text=text,
            channel_id=self.channel_id,
            conversation=self.conversation,
            from_property=self.recipient,
            recipient=self.from_property,
            reply_to_id=self.id,
            locale=self.locale,
        )
