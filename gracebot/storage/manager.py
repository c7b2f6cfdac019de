"""Activity persistence on top of a record store."""

import structlog

from gracebot.core.exceptions import StorageError
from gracebot.models import Activity
from gracebot.storage.base import RecordStore
from gracebot.storage.converter import ActivityConverter
from gracebot.storage.models import ActivityModel

logger = structlog.get_logger()


class PersistenceManager:
    """Stores and retrieves activities.

    Stateless: every call opens its own store session, so concurrent units of
    work never share staged records.
    """

    def __init__(self, store: RecordStore, converter: ActivityConverter | None = None) -> None:
        self.store = store
        self.converter = converter or ActivityConverter()

    async def add_activity(self, activity: Activity) -> ActivityModel:
        """Persist an activity and return the committed record.

        Raises:
            ValidationError: If the activity lacks id, type or timestamp.
                Nothing is staged in that case.
            StorageError: If the commit fails. The staged record is rolled
                back and never becomes visible.
        """
        record = self.converter.to_model(activity)

        async with self.store.session() as session:
            session.add(record)
            try:
                await session.commit()
            except StorageError:
                await session.rollback()
                raise
            except Exception as e:
                await session.rollback()
                raise StorageError(
                    f"Failed to commit activity {record.id}: {e}",
                    operation="commit",
                    details={"activity_id": record.id},
                ) from e

        logger.debug(
            "Persisted activity",
            activity_id=record.id,
            conversation_id=record.conversation_id,
            type=record.type,
        )
        return record

    async def find_activity(self, activity_id: str) -> Activity | None:
        """Get a persisted activity by id, or None if it was never stored."""
        record = await self.store.find_by_id(activity_id)
        if record is None:
            return None
        return self.converter.to_activity(record)

    async def get_conversation_history(
        self,
        conversation_id: str,
        limit: int = 50,
    ) -> list[Activity]:
        """Get the most recent activities of a conversation, oldest first."""
        records = await self.store.list_by_conversation(conversation_id, limit=limit)
        return [self.converter.to_activity(record) for record in records]
