"""Tests for service construction."""

import pytest

from gracebot.api.container import ServiceContainer, build_store
from gracebot.core.config import Settings
from gracebot.core.exceptions import ConfigurationError
from gracebot.services.channels import BotFrameworkAdapter
from gracebot.storage import InMemoryRecordStore, SqlRecordStore


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_default_store_is_memory():
    assert isinstance(build_store(make_settings()), InMemoryRecordStore)


@pytest.mark.asyncio
async def test_sql_store(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'bot.db'}"
    store = build_store(make_settings(storage_backend="sql", database_url=url))

    assert isinstance(store, SqlRecordStore)
    await store.close()


def test_firestore_requires_project():
    with pytest.raises(ConfigurationError):
        build_store(make_settings(storage_backend="firestore", gcp_project_id=""))


@pytest.mark.asyncio
async def test_build_from_settings():
    services = ServiceContainer.build(make_settings())

    assert isinstance(services.store, InMemoryRecordStore)
    assert isinstance(services.channel, BotFrameworkAdapter)
    assert services.classifier is None
    assert "shit" in services.word_filter.words
    assert services.definitions.lookup("Bot") is not None

    await services.shutdown()


def test_explicit_store_is_kept(store, channel):
    services = ServiceContainer.build(make_settings(), store=store, channel=channel)

    assert services.store is store
    assert services.channel is channel
    assert services.persistence.store is store


def test_missing_word_list():
    with pytest.raises(ConfigurationError):
        ServiceContainer.build(make_settings(bad_words_path="/nonexistent/words.txt"))
