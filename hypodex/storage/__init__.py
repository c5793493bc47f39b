"""Storage backends for Hypodex."""

from .index import CorruptionPolicy, IndexBuilder, IndexCache
from .locks import SessionLocks
from .paths import StorageLayout, sanitize_session_id
from .record_store import RecordStore

__all__ = [
    "CorruptionPolicy",
    "IndexBuilder",
    "IndexCache",
    "RecordStore",
    "SessionLocks",
    "StorageLayout",
    "sanitize_session_id",
]
