"""Bot Framework activity models (wire format)."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Connector timestamps carry 7 fractional digits; datetime holds 6.
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


class ActivityType(str, Enum):
    """Activity types defined by the Bot Framework schema."""

    MESSAGE = "message"
    TYPING = "typing"
    CONVERSATION_UPDATE = "conversationUpdate"
    CONTACT_RELATION_UPDATE = "contactRelationUpdate"
    INSTALLATION_UPDATE = "installationUpdate"
    END_OF_CONVERSATION = "endOfConversation"
    EVENT = "event"
    INVOKE = "invoke"
    DELETE_USER_DATA = "deleteUserData"
    MESSAGE_UPDATE = "messageUpdate"
    MESSAGE_DELETE = "messageDelete"
    MESSAGE_REACTION = "messageReaction"
    PING = "ping"
    TRACE = "trace"
    HANDOFF = "handoff"


class WireModel(BaseModel):
    """Base for camelCase wire payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ChannelAccount(WireModel):
    """A participant (user or bot) on a channel."""

    id: str
    name: str | None = None


class ConversationAccount(WireModel):
    """The conversation an activity belongs to."""

    id: str
    name: str | None = None
    is_group: bool | None = None


class Activity(WireModel):
    """A single message or event exchanged with the messaging platform."""

    id: str | None = None
    type: ActivityType | None = None
    text: str | None = None
    service_url: str | None = None
    timestamp: datetime | None = None
    channel_id: str | None = None
    from_: ChannelAccount | None = Field(default=None, alias="from")
    recipient: ChannelAccount | None = None
    conversation: ConversationAccount | None = None
    reply_to_id: str | None = None
    locale: str | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _trim_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _EXCESS_FRACTION.sub(r"\1", value)
        return value

    @property
    def is_message(self) -> bool:
        return self.type == ActivityType.MESSAGE

    def create_reply(self, text: str, locale: str | None = None) -> "Activity":
        """Build a reply addressed back to the sender of this activity."""
        return Activity(
            id=str(uuid4()),
            type=ActivityType.MESSAGE,
            text=text,
            service_url=self.service_url,
            timestamp=datetime.now(timezone.utc),
            channel_id=self.channel_id,
            from_=self.recipient,
            recipient=self.from_,
            conversation=self.conversation,
            reply_to_id=self.id,
            locale=locale or self.locale,
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON the connector expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
