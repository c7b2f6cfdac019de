"""Bot orchestration."""

from gracebot.services.bot.engine import BotEngine, BotReply, ReplySource

__all__ = ["BotEngine", "BotReply", "ReplySource"]
