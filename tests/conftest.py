"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gracebot.api.container import ServiceContainer
from gracebot.api.main import create_app
from gracebot.core.config import Settings
from gracebot.models import Activity, ActivityType, ChannelAccount, ConversationAccount
from gracebot.services.channels.base import ChannelAdapter
from gracebot.storage import InMemoryRecordStore, PersistenceManager


class FakeChannel(ChannelAdapter):
    """Channel adapter that records outbound activities instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[Activity] = []

    @property
    def channel_name(self) -> str:
        return "fake"

    def parse_activity(self, payload: dict[str, Any]) -> Activity:
        return Activity.model_validate(payload)

    async def send_activity(self, activity: Activity) -> Activity:
        self.sent.append(activity)
        return activity


@pytest.fixture
def make_activity():
    """Factory for fully populated message activities."""

    def _make(reply_to_id: str | None = None, **overrides: Any) -> Activity:
        fields: dict[str, Any] = {
            "id": str(uuid4()),
            "type": ActivityType.MESSAGE,
            "text": "Text",
            "service_url": "https://smba.example.com/emea/",
            "timestamp": datetime.now(timezone.utc),
            "channel_id": "ChannelId",
            "from_": ChannelAccount(id="FromId", name="FromName"),
            "conversation": ConversationAccount(
                id="ConversationAccountId",
                name="ConversationAccountName",
                is_group=False,
            ),
            "recipient": ChannelAccount(id="RecipientId", name="RecipientName"),
            "reply_to_id": reply_to_id,
        }
        fields.update(overrides)
        return Activity(**fields)

    return _make


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, log_format="text", storage_backend="memory")


@pytest.fixture
def store():
    """Create in-memory record store for tests."""
    return InMemoryRecordStore()


@pytest.fixture
def persistence(store):
    return PersistenceManager(store)


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def services(settings, store, channel):
    """Service container wired with the in-memory store and fake channel."""
    return ServiceContainer.build(settings, store=store, channel=channel)


@pytest.fixture
def app(services):
    """Create test application."""
    return create_app(services=services)


@pytest_asyncio.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
