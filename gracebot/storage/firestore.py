"""Firestore record store for production."""

import os
import time
from typing import Any

import structlog

from gracebot.core.exceptions import DuplicateRecordError
from gracebot.storage.base import RecordStore
from gracebot.storage.models import ActivityModel

logger = structlog.get_logger()

INSERTED_AT_FIELD = "_inserted_at"
SEQUENCE_FIELD = "_seq"


class FirestoreRecordStore(RecordStore):
    """Firestore record store implementation for production.

    Collection structure:
    - activities/{activity_id}

    Documents hold the flattened record columns, a server timestamp and a
    client-side sequence. History is ordered by the sequence: it is strictly
    increasing within a process, so records committed in one batch keep
    their order.
    """

    def __init__(
        self,
        project_id: str | None = None,
        collection: str = "activities",
        client: Any | None = None,
    ) -> None:
        self._project_id = project_id
        self._collection = collection
        self._db = client
        self._initialized = client is not None
        self._last_seq = 0

    async def _ensure_initialized(self) -> None:
        """Lazy initialization of Firestore client."""
        if self._initialized:
            return

        try:
            from google.cloud import firestore

            # Check if using emulator
            if os.environ.get("FIRESTORE_EMULATOR_HOST"):
                logger.info("Using Firestore emulator")

            self._db = firestore.AsyncClient(project=self._project_id)
            self._initialized = True
            logger.info("Firestore client initialized", project=self._project_id)
        except Exception as e:
            logger.error("Failed to initialize Firestore", error=str(e))
            raise

    def _next_seq(self) -> int:
        """Nanosecond clock reading, bumped when the clock has not advanced."""
        self._last_seq = max(time.time_ns(), self._last_seq + 1)
        return self._last_seq

    def _activities(self):
        return self._db.collection(self._collection)

    async def insert(self, records: list[ActivityModel]) -> None:
        await self._ensure_initialized()
        from google.api_core.exceptions import AlreadyExists
        from google.cloud import firestore

        batch = self._db.batch()
        for record in records:
            data = record.to_record()
            data[INSERTED_AT_FIELD] = firestore.SERVER_TIMESTAMP
            data[SEQUENCE_FIELD] = self._next_seq()
            batch.create(self._activities().document(record.id), data)

        try:
            await batch.commit()
        except AlreadyExists as e:
            raise DuplicateRecordError(records[0].id if len(records) == 1 else str(e)) from e

    async def find_by_id(self, record_id: str) -> ActivityModel | None:
        await self._ensure_initialized()
        doc = await self._activities().document(record_id).get()
        if not doc.exists:
            return None
        return self._to_model(doc.to_dict())

    async def list_by_conversation(
        self,
        conversation_id: str,
        limit: int = 50,
    ) -> list[ActivityModel]:
        if limit <= 0:
            return []
        await self._ensure_initialized()

        query = (
            self._activities()
            .where("conversation_id", "==", conversation_id)
            .order_by(SEQUENCE_FIELD, direction="DESCENDING")
            .limit(limit)
        )

        docs = await query.get()
        records = [self._to_model(doc.to_dict()) for doc in docs]
        # Reverse to get chronological order
        return list(reversed(records))

    async def health_check(self) -> bool:
        try:
            await self._ensure_initialized()
            await self._db.collection("_health").document("check").get()
            return True
        except Exception as e:
            logger.error("Firestore health check failed", error=str(e))
            return False

    @staticmethod
    def _to_model(data: dict[str, Any]) -> ActivityModel:
        data.pop(INSERTED_AT_FIELD, None)
        data.pop(SEQUENCE_FIELD, None)
        return ActivityModel.model_validate(data)
