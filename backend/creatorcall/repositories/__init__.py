"""Record store implementations."""

from .memory_record_store import InMemoryRecordStore
from .record_store import RecordStore
from .sql_record_store import SqlAlchemyRecordStore

__all__ = ["InMemoryRecordStore", "RecordStore", "SqlAlchemyRecordStore"]
