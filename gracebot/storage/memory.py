"""In-memory record store for development and testing."""

import asyncio

from gracebot.core.exceptions import DuplicateRecordError
from gracebot.storage.base import RecordStore
from gracebot.storage.models import ActivityModel


class InMemoryRecordStore(RecordStore):
    """In-memory record store implementation for development."""

    def __init__(self) -> None:
        self._records: list[ActivityModel] = []
        self._ids: set[str] = set()
        self._lock = asyncio.Lock()

    async def insert(self, records: list[ActivityModel]) -> None:
        async with self._lock:
            seen = set(self._ids)
            for record in records:
                if record.id in seen:
                    raise DuplicateRecordError(record.id)
                seen.add(record.id)

            # Store copies so later mutation by callers can't leak in
            self._records.extend(record.model_copy() for record in records)
            self._ids = seen

    async def find_by_id(self, record_id: str) -> ActivityModel | None:
        for record in self._records:
            if record.id == record_id:
                return record.model_copy()
        return None

    async def list_by_conversation(
        self,
        conversation_id: str,
        limit: int = 50,
    ) -> list[ActivityModel]:
        records = [r for r in self._records if r.conversation_id == conversation_id]
        if limit <= 0:
            return []
        return [r.model_copy() for r in records[-limit:]]

    async def health_check(self) -> bool:
        return True

    # ==================== Development Helpers ====================

    async def clear_all(self) -> None:
        """Clear all records (for testing)."""
        async with self._lock:
            self._records.clear()
            self._ids.clear()

    def __len__(self) -> int:
        return len(self._records)
