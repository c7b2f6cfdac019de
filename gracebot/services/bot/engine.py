"""Bot engine - filters, answers and records one inbound activity."""

from dataclasses import dataclass
from enum import Enum

import structlog

from gracebot.core.exceptions import DuplicateRecordError
from gracebot.models import Activity
from gracebot.services.channels.base import ChannelAdapter
from gracebot.services.definitions import DefinitionLookup, extract_term
from gracebot.services.filters import WordListFilter
from gracebot.services.intent import IntentClassifier
from gracebot.storage.manager import PersistenceManager

logger = structlog.get_logger()


class ReplySource(str, Enum):
    """What produced a reply."""

    PROFANITY = "profanity"
    DEFINITION = "definition"
    INTENT = "intent"
    FALLBACK = "fallback"


@dataclass
class BotReply:
    """Reply chosen for an inbound activity."""

    text: str
    source: ReplySource
    matched: str | None = None


class BotEngine:
    """Runs the filter -> lookup -> classify -> reply -> persist pipeline.

    One ``handle`` call is one unit of work. The engine holds no per-message
    state, so the host may run many calls concurrently.
    """

    def __init__(
        self,
        persistence: PersistenceManager,
        word_filter: WordListFilter,
        definitions: DefinitionLookup,
        channel: ChannelAdapter,
        classifier: IntentClassifier | None = None,
        profanity_reply: str = "Please mind your language.",
        fallback_reply: str = "Sorry, I don't know the answer to that yet.",
        intent_replies: dict[str, str] | None = None,
        intent_confidence_threshold: float = 0.5,
    ) -> None:
        self.persistence = persistence
        self.word_filter = word_filter
        self.definitions = definitions
        self.channel = channel
        self.classifier = classifier
        self.profanity_reply = profanity_reply
        self.fallback_reply = fallback_reply
        self.intent_replies = intent_replies or {}
        self.intent_confidence_threshold = intent_confidence_threshold

    async def compose_reply(self, activity: Activity) -> BotReply | None:
        """Decide how to answer an activity. Returns None when no reply is due."""
        if not activity.is_message:
            return None

        text = (activity.text or "").strip()
        if not text:
            return None

        bad_words = self.word_filter.matches(text, first_only=True)
        if bad_words:
            logger.info("Message rejected by word filter", activity_id=activity.id)
            return BotReply(self.profanity_reply, ReplySource.PROFANITY, bad_words[0])

        term = extract_term(text)
        definition = self.definitions.lookup(term)
        if definition is not None:
            return BotReply(definition, ReplySource.DEFINITION, term)

        if self.classifier is not None:
            result = await self.classifier.classify(text)
            canned = self.intent_replies.get(result.top_intent)
            if canned and result.score >= self.intent_confidence_threshold:
                return BotReply(canned, ReplySource.INTENT, result.top_intent)
            logger.debug(
                "No confident intent reply",
                intent=result.top_intent,
                score=round(result.score, 3),
            )

        return BotReply(self.fallback_reply, ReplySource.FALLBACK)

    async def handle(self, activity: Activity) -> Activity | None:
        """Process an inbound activity and return the sent reply, if any.

        The inbound activity is persisted before anything else; the reply is
        persisted after the channel accepted it. A redelivered inbound activity
        is already stored, so it is answered without being stored again.
        Other errors propagate unchanged.
        """
        try:
            await self.persistence.add_activity(activity)
        except DuplicateRecordError:
            logger.info("Inbound activity already stored, replying again", activity_id=activity.id)

        reply = await self.compose_reply(activity)
        if reply is None:
            logger.debug("No reply for activity", activity_id=activity.id, type=activity.type)
            return None

        sent = await self.channel.send_reply(reply.text, activity)
        await self.persistence.add_activity(sent)

        logger.info(
            "Replied to activity",
            activity_id=activity.id,
            reply_id=sent.id,
            source=reply.source.value,
            conversation_id=activity.conversation.id if activity.conversation else None,
        )
        return sent
