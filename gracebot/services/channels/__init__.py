"""Channel adapters for different messaging platforms."""

from gracebot.services.channels.base import ChannelAdapter
from gracebot.services.channels.botframework import BotFrameworkAdapter

__all__ = ["BotFrameworkAdapter", "ChannelAdapter"]
