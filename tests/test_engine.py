"""Tests for the bot engine pipeline."""

from unittest.mock import AsyncMock, patch

import pytest

from gracebot.core.exceptions import ChannelError, ClassificationError, StorageError
from gracebot.models import ActivityType
from gracebot.services.bot import BotEngine, ReplySource
from gracebot.services.definitions import DefinitionLookup
from gracebot.services.filters import WordListFilter
from gracebot.services.intent import IntentResult


class StubClassifier:
    def __init__(self, intent: str, score: float) -> None:
        self.result = IntentResult(query="", top_intent=intent, score=score)
        self.calls: list[str] = []

    async def classify(self, text: str) -> IntentResult:
        self.calls.append(text)
        return self.result


@pytest.fixture
def engine_factory(persistence, channel):
    def _make(classifier=None) -> BotEngine:
        return BotEngine(
            persistence=persistence,
            word_filter=WordListFilter(["bad", "word", "list"]),
            definitions=DefinitionLookup({"bot": "A program that chats."}),
            channel=channel,
            classifier=classifier,
            profanity_reply="Mind your language.",
            fallback_reply="No idea.",
            intent_replies={"Greeting": "Hello!"},
            intent_confidence_threshold=0.6,
        )

    return _make


@pytest.fixture
def engine(engine_factory):
    return engine_factory()


@pytest.mark.asyncio
async def test_profanity_reply(engine, make_activity):
    reply = await engine.compose_reply(make_activity(text="this is BAD"))

    assert reply.source == ReplySource.PROFANITY
    assert reply.text == "Mind your language."
    assert reply.matched == "bad"


@pytest.mark.asyncio
async def test_filter_runs_before_definitions(engine, make_activity):
    reply = await engine.compose_reply(make_activity(text="what is a bad bot"))
    assert reply.source == ReplySource.PROFANITY


@pytest.mark.asyncio
async def test_definition_reply(engine, make_activity):
    reply = await engine.compose_reply(make_activity(text="What is a bot?"))

    assert reply.source == ReplySource.DEFINITION
    assert reply.text == "A program that chats."
    assert reply.matched == "bot"


@pytest.mark.asyncio
async def test_fallback_without_classifier(engine, make_activity):
    reply = await engine.compose_reply(make_activity(text="how are you"))

    assert reply.source == ReplySource.FALLBACK
    assert reply.text == "No idea."


@pytest.mark.asyncio
async def test_intent_reply(engine_factory, make_activity):
    classifier = StubClassifier("Greeting", 0.9)
    engine = engine_factory(classifier)

    reply = await engine.compose_reply(make_activity(text="hey there"))

    assert reply.source == ReplySource.INTENT
    assert reply.text == "Hello!"
    assert classifier.calls == ["hey there"]


@pytest.mark.asyncio
async def test_low_confidence_intent_falls_back(engine_factory, make_activity):
    engine = engine_factory(StubClassifier("Greeting", 0.3))
    reply = await engine.compose_reply(make_activity(text="hey there"))
    assert reply.source == ReplySource.FALLBACK


@pytest.mark.asyncio
async def test_unknown_intent_falls_back(engine_factory, make_activity):
    engine = engine_factory(StubClassifier("BookFlight", 0.99))
    reply = await engine.compose_reply(make_activity(text="fly me to the moon"))
    assert reply.source == ReplySource.FALLBACK


@pytest.mark.asyncio
async def test_definition_skips_classifier(engine_factory, make_activity):
    classifier = StubClassifier("Greeting", 0.9)
    engine = engine_factory(classifier)

    await engine.compose_reply(make_activity(text="bot"))

    assert classifier.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, "", "   "])
async def test_no_reply_for_empty_text(engine, make_activity, text):
    assert await engine.compose_reply(make_activity(text=text)) is None


@pytest.mark.asyncio
async def test_no_reply_for_non_message(engine, make_activity):
    activity = make_activity(type=ActivityType.TYPING, text=None)
    assert await engine.compose_reply(activity) is None


@pytest.mark.asyncio
async def test_handle_persists_inbound_and_reply(engine, persistence, channel, make_activity):
    inbound = make_activity(text="bot")

    sent = await engine.handle(inbound)

    assert channel.sent == [sent]
    assert sent.text == "A program that chats."
    assert sent.reply_to_id == inbound.id
    assert sent.from_ == inbound.recipient
    assert sent.recipient == inbound.from_
    assert sent.conversation == inbound.conversation

    assert await persistence.find_activity(inbound.id) is not None
    stored_reply = await persistence.find_activity(sent.id)
    assert stored_reply.text == sent.text
    assert stored_reply.reply_to_id == inbound.id

    history = await persistence.get_conversation_history("ConversationAccountId")
    assert [a.id for a in history] == [inbound.id, sent.id]


@pytest.mark.asyncio
async def test_handle_non_message(engine, persistence, channel, make_activity):
    activity = make_activity(type=ActivityType.CONVERSATION_UPDATE, text=None)

    assert await engine.handle(activity) is None
    assert channel.sent == []
    assert await persistence.find_activity(activity.id) is not None


@pytest.mark.asyncio
async def test_storage_failure_stops_reply(engine, store, channel, make_activity):
    with patch.object(store, "insert", AsyncMock(side_effect=RuntimeError("down"))):
        with pytest.raises(StorageError):
            await engine.handle(make_activity(text="bot"))

    assert channel.sent == []


@pytest.mark.asyncio
async def test_channel_failure_propagates(engine, channel, persistence, make_activity):
    inbound = make_activity(text="bot")
    error = ChannelError("connector down", channel="fake")

    with patch.object(channel, "send_activity", AsyncMock(side_effect=error)):
        with pytest.raises(ChannelError):
            await engine.handle(inbound)

    # Inbound is already durable; no reply was recorded
    history = await persistence.get_conversation_history("ConversationAccountId")
    assert [a.id for a in history] == [inbound.id]


@pytest.mark.asyncio
async def test_redelivery_after_channel_failure_is_answered(engine, channel, persistence, make_activity):
    inbound = make_activity(text="bot")
    error = ChannelError("connector down", channel="fake")

    with patch.object(channel, "send_activity", AsyncMock(side_effect=error)):
        with pytest.raises(ChannelError):
            await engine.handle(inbound)

    sent = await engine.handle(inbound)

    assert sent.reply_to_id == inbound.id
    assert channel.sent == [sent]
    history = await persistence.get_conversation_history("ConversationAccountId")
    assert [a.id for a in history] == [inbound.id, sent.id]


@pytest.mark.asyncio
async def test_classifier_failure_propagates(engine_factory, make_activity):
    classifier = StubClassifier("Greeting", 0.9)
    engine = engine_factory(classifier)

    with patch.object(classifier, "classify", AsyncMock(side_effect=ClassificationError("boom"))):
        with pytest.raises(ClassificationError):
            await engine.compose_reply(make_activity(text="hey"))
