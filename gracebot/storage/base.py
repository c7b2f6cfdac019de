"""Abstract base class for activity record stores."""

from abc import ABC, abstractmethod
from types import TracebackType

from gracebot.storage.models import ActivityModel


class RecordSession:
    """Unit of work over a record store.

    Records added to a session are only staged; they become visible to
    readers once ``commit()`` returns. Leaving an ``async with`` block with
    records still staged discards them.
    """

    def __init__(self, store: "RecordStore") -> None:
        self._store = store
        self._staged: list[ActivityModel] = []

    @property
    def pending(self) -> list[ActivityModel]:
        """Records staged but not yet committed."""
        return list(self._staged)

    def add(self, record: ActivityModel) -> None:
        self._staged.append(record)

    async def commit(self) -> None:
        """Atomically append all staged records to the store."""
        if not self._staged:
            return
        await self._store.insert(list(self._staged))
        self._staged.clear()

    async def rollback(self) -> None:
        self._staged.clear()

    async def __aenter__(self) -> "RecordSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._staged:
            await self.rollback()


class RecordStore(ABC):
    """Abstract activity record store interface."""

    def session(self) -> RecordSession:
        """Open a new unit of work."""
        return RecordSession(self)

    # ==================== Write Operations ====================

    @abstractmethod
    async def insert(self, records: list[ActivityModel]) -> None:
        """Append records atomically.

        Raises DuplicateRecordError if any identifier is already stored, in
        which case none of the records are written.
        """
        ...

    # ==================== Read Operations ====================

    @abstractmethod
    async def find_by_id(self, record_id: str) -> ActivityModel | None:
        """Get the first committed record with this identifier."""
        ...

    @abstractmethod
    async def list_by_conversation(
        self,
        conversation_id: str,
        limit: int = 50,
    ) -> list[ActivityModel]:
        """Get the most recent records of a conversation in insertion order."""
        ...

    # ==================== Health Check ====================

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        return None
