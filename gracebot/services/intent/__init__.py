"""Intent classification service."""

from gracebot.services.intent.base import IntentClassifier, IntentResult
from gracebot.services.intent.luis import LuisClient

__all__ = ["IntentClassifier", "IntentResult", "LuisClient"]
