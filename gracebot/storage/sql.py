"""Relational record store backed by SQLAlchemy (async)."""

from typing import Any

import structlog
from sqlalchemy import (
    Boolean,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    insert,
    select,
    text,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from gracebot.core.exceptions import DuplicateRecordError
from gracebot.storage.base import RecordStore
from gracebot.storage.models import ActivityModel

logger = structlog.get_logger()

metadata = MetaData()

activities = Table(
    "activities",
    metadata,
    # Insertion order
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(255), nullable=False, unique=True),
    Column("type", String(64), nullable=False),
    # ISO-8601 keeps microseconds and the UTC offset
    Column("timestamp", String(64), nullable=False),
    Column("text", Text, nullable=True),
    Column("service_url", String(2048), nullable=True),
    Column("channel_id", String(255), nullable=True),
    Column("reply_to_id", String(255), nullable=True),
    Column("from_id", String(255), nullable=True),
    Column("from_name", String(255), nullable=True),
    Column("recipient_id", String(255), nullable=True),
    Column("recipient_name", String(255), nullable=True),
    Column("conversation_id", String(255), nullable=True),
    Column("conversation_name", String(255), nullable=True),
    Column("conversation_is_group", Boolean, nullable=True),
    Index("ix_activities_conversation_seq", "conversation_id", "seq"),
)


class SqlRecordStore(RecordStore):
    """SQL record store.

    Works with any async SQLAlchemy driver; defaults to SQLite via aiosqlite.
    Each ``insert`` runs in its own transaction, so a batch is all or nothing.
    """

    def __init__(
        self,
        database_url: str = "sqlite+aiosqlite:///./gracebot.db",
        echo: bool = False,
        engine: AsyncEngine | None = None,
    ) -> None:
        self._engine = engine or create_async_engine(database_url, echo=echo)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self) -> None:
        """Create the activities table if it doesn't exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Activity schema ready", url=str(self._engine.url))

    async def insert(self, records: list[ActivityModel]) -> None:
        ids = [record.id for record in records]
        if len(set(ids)) != len(ids):
            duplicate = next(i for i in ids if ids.count(i) > 1)
            raise DuplicateRecordError(duplicate)

        try:
            async with self._engine.begin() as conn:
                existing = await conn.execute(
                    select(activities.c.id).where(activities.c.id.in_(ids)).limit(1)
                )
                clash = existing.scalar_one_or_none()
                if clash is not None:
                    raise DuplicateRecordError(clash)

                await conn.execute(insert(activities), [record.to_record() for record in records])
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same id
            raise DuplicateRecordError(ids[0]) from e

        logger.debug("Inserted activity records", count=len(records))

    async def find_by_id(self, record_id: str) -> ActivityModel | None:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                select(activities)
                .where(activities.c.id == record_id)
                .order_by(activities.c.seq)
                .limit(1)
            )
            row = result.mappings().first()

        if row is None:
            return None
        return self._to_model(row)

    async def list_by_conversation(
        self,
        conversation_id: str,
        limit: int = 50,
    ) -> list[ActivityModel]:
        if limit <= 0:
            return []

        async with self._engine.connect() as conn:
            result = await conn.execute(
                select(activities)
                .where(activities.c.conversation_id == conversation_id)
                .order_by(activities.c.seq.desc())
                .limit(limit)
            )
            rows = result.mappings().all()

        # Reverse to get chronological order
        return [self._to_model(row) for row in reversed(rows)]

    async def health_check(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("SQL health check failed", error=str(e))
            return False

    async def close(self) -> None:
        await self._engine.dispose()

    @staticmethod
    def _to_model(row: Any) -> ActivityModel:
        data = dict(row)
        data.pop("seq", None)
        return ActivityModel.model_validate(data)
