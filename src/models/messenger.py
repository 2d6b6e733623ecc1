"""Incoming/outgoing Facebook Messenger models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.constants import MAX_MESSENGER_TEXT_CHARS


class EventKind(str, Enum):
    """Handling path for a messaging event, chosen by its structural shape."""

    TEXT = "text"
    POSTBACK = "postback"
    QUICK_REPLY = "quick_reply"
    ECHO = "echo"
    UNSUPPORTED = "unsupported"


class Participant(BaseModel):
    """Sender or recipient of a messaging event (PSID or page ID)."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1)


class QuickReply(BaseModel):
    """Quick reply button payload attached to a text message."""

    payload: str


class MessageContent(BaseModel):
    """The ``message`` object of a messaging event."""

    model_config = ConfigDict(extra="allow")

    mid: str | None = None
    text: str | None = None
    quick_reply: QuickReply | None = None
    is_echo: bool = False
    attachments: list[dict] = Field(default_factory=list)


class Postback(BaseModel):
    """Button click delivered as a postback."""

    model_config = ConfigDict(extra="allow")

    payload: str | None = None
    title: str | None = None


class MessagingEvent(BaseModel):
    """A single entry of ``entry[].messaging[]`` in a page webhook."""

    model_config = ConfigDict(extra="allow")

    sender: Participant
    recipient: Participant
    timestamp: int | None = None
    message: MessageContent | None = None
    postback: Postback | None = None

    @property
    def sender_id(self) -> str:
        return self.sender.id

    @property
    def recipient_id(self) -> str:
        return self.recipient.id

    @property
    def kind(self) -> EventKind:
        """Classify the event.

        Quick replies also carry the button title as ``text``, so they are
        checked before plain text.
        """
        if self.message is not None:
            if self.message.is_echo:
                return EventKind.ECHO
            if self.message.quick_reply and self.message.quick_reply.payload:
                return EventKind.QUICK_REPLY
            if self.message.text:
                return EventKind.TEXT
        elif self.postback is not None:
            return EventKind.POSTBACK
        return EventKind.UNSUPPORTED


class OutboundReply(BaseModel):
    """Reply text addressed to a Messenger user."""

    recipient_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)

    @field_validator("text")
    @classmethod
    def truncate_text(cls, value: str) -> str:
        if len(value) > MAX_MESSENGER_TEXT_CHARS:
            return value[: MAX_MESSENGER_TEXT_CHARS - 3] + "..."
        return value
