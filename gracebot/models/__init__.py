"""Data models for the application."""

from gracebot.models.activity import (
    Activity,
    ActivityType,
    ChannelAccount,
    ConversationAccount,
)

__all__ = [
    "Activity",
    "ActivityType",
    "ChannelAccount",
    "ConversationAccount",
]
