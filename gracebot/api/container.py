"""Explicit construction of the bot's services."""

from dataclasses import dataclass

import structlog

from gracebot.core.config import Settings
from gracebot.core.exceptions import ConfigurationError
from gracebot.services.bot import BotEngine
from gracebot.services.channels import BotFrameworkAdapter, ChannelAdapter
from gracebot.services.definitions import DefinitionLookup
from gracebot.services.filters import WordListFilter
from gracebot.services.intent import IntentClassifier, LuisClient
from gracebot.storage import (
    FirestoreRecordStore,
    InMemoryRecordStore,
    PersistenceManager,
    RecordStore,
    SqlRecordStore,
)

logger = structlog.get_logger()


def build_store(settings: Settings) -> RecordStore:
    """Create the record store selected by settings."""
    if settings.storage_backend == "sql":
        return SqlRecordStore(settings.database_url, echo=settings.database_echo)
    if settings.storage_backend == "firestore":
        if not settings.gcp_project_id:
            raise ConfigurationError("Firestore storage requires GCP_PROJECT_ID")
        return FirestoreRecordStore(
            project_id=settings.gcp_project_id,
            collection=settings.firestore_collection,
        )
    return InMemoryRecordStore()


@dataclass
class ServiceContainer:
    """Every long-lived component, built once at startup and passed down."""

    settings: Settings
    store: RecordStore
    persistence: PersistenceManager
    word_filter: WordListFilter
    definitions: DefinitionLookup
    channel: ChannelAdapter
    engine: BotEngine
    classifier: IntentClassifier | None = None

    @classmethod
    def build(
        cls,
        settings: Settings,
        store: RecordStore | None = None,
        channel: ChannelAdapter | None = None,
        classifier: IntentClassifier | None = None,
    ) -> "ServiceContainer":
        """Build all services from settings; explicit arguments override."""
        if store is None:
            store = build_store(settings)
        persistence = PersistenceManager(store)
        word_filter = WordListFilter.from_file(settings.bad_words_path)
        definitions = DefinitionLookup.from_file(settings.definitions_path)

        if channel is None:
            channel = BotFrameworkAdapter(
                app_id=settings.microsoft_app_id,
                app_password=settings.microsoft_app_password,
                token_url=settings.botframework_token_url,
                scope=settings.botframework_scope,
                timeout=settings.channel_timeout_seconds,
            )

        if classifier is None and settings.luis_configured:
            classifier = LuisClient(
                endpoint=settings.luis_endpoint,
                app_id=settings.luis_app_id,
                api_key=settings.luis_api_key,
                slot=settings.luis_slot,
            )

        engine = BotEngine(
            persistence=persistence,
            word_filter=word_filter,
            definitions=definitions,
            channel=channel,
            classifier=classifier,
            profanity_reply=settings.profanity_reply,
            fallback_reply=settings.fallback_reply,
            intent_replies=settings.intent_replies,
            intent_confidence_threshold=settings.intent_confidence_threshold,
        )

        logger.info(
            "Services built",
            storage=type(store).__name__,
            channel=channel.channel_name,
            classifier=type(classifier).__name__ if classifier else None,
        )

        return cls(
            settings=settings,
            store=store,
            persistence=persistence,
            word_filter=word_filter,
            definitions=definitions,
            channel=channel,
            engine=engine,
            classifier=classifier,
        )

    async def startup(self) -> None:
        if isinstance(self.store, SqlRecordStore):
            await self.store.create_schema()

    async def shutdown(self) -> None:
        for resource in (self.channel, self.classifier):
            close = getattr(resource, "close", None)
            if close is not None:
                await close()
        await self.store.close()
