"""Storage layer - activity records, conversion and persistence."""

from gracebot.storage.base import RecordSession, RecordStore
from gracebot.storage.converter import ActivityConverter
from gracebot.storage.firestore import FirestoreRecordStore
from gracebot.storage.manager import PersistenceManager
from gracebot.storage.memory import InMemoryRecordStore
from gracebot.storage.models import ActivityModel
from gracebot.storage.sql import SqlRecordStore

__all__ = [
    "ActivityConverter",
    "ActivityModel",
    "FirestoreRecordStore",
    "InMemoryRecordStore",
    "PersistenceManager",
    "RecordSession",
    "RecordStore",
    "SqlRecordStore",
]
