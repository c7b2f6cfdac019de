"""Persistence record for activities."""

from datetime import datetime

from pydantic import BaseModel, Field


class ActivityModel(BaseModel):
    """Flattened, storage-friendly projection of an Activity.

    Accounts are stored as id/name column pairs. A null ``*_id`` column means
    the account was absent on the activity.
    """

    id: str = Field(..., description="Activity identifier")
    type: str = Field(..., description="Activity type value, e.g. 'message'")
    timestamp: datetime = Field(..., description="Activity timestamp")

    text: str | None = None
    service_url: str | None = None
    channel_id: str | None = None
    reply_to_id: str | None = None

    # Sender
    from_id: str | None = None
    from_name: str | None = None

    # Recipient
    recipient_id: str | None = None
    recipient_name: str | None = None

    # Conversation
    conversation_id: str | None = None
    conversation_name: str | None = None
    conversation_is_group: bool | None = None

    def to_record(self) -> dict:
        """Column dict with the timestamp as an ISO-8601 string."""
        return self.model_dump(mode="json")
