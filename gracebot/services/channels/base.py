"""Abstract base class for channel adapters."""

from abc import ABC, abstractmethod
from typing import Any

from gracebot.models import Activity


class ChannelAdapter(ABC):
    """Abstract base class for messaging platform adapters.

    Adapters own all network calls to the platform and their failure
    handling; the bot core only hands them reply text and the activity
    being answered.
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Get the channel name identifier."""
        ...

    @abstractmethod
    def parse_activity(self, payload: dict[str, Any]) -> Activity:
        """Parse an inbound payload into an Activity.

        Args:
            payload: Raw JSON body posted by the platform

        Returns:
            Activity
        """
        ...

    @abstractmethod
    async def send_activity(self, activity: Activity) -> Activity:
        """Send an outbound activity through the channel.

        Args:
            activity: Fully addressed activity to send

        Returns:
            The activity as sent (with any platform-assigned id)
        """
        ...

    async def send_reply(self, reply_text: str, original: Activity) -> Activity:
        """Convenience method to reply to an activity with plain text.

        Args:
            reply_text: Message text
            original: Activity being answered

        Returns:
            The sent reply activity
        """
        reply = original.create_reply(reply_text)
        return await self.send_activity(reply)
