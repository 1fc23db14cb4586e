"""NodeVault core library - record store and derived views."""

from typing import TYPE_CHECKING

from nodevault.core.errors import (
    EmptyKeywordError,
    PersistenceError,
    RecordValidationError,
    VaultError,
)
from nodevault.core.events import EventLog
from nodevault.core.types import (
    EventKind,
    Record,
    RecordEvent,
    SortField,
    SortOrder,
    VaultStatistics,
)
from nodevault.core.views import compute_statistics, search, sort_records

if TYPE_CHECKING:
    from nodevault.core.factory import build_store
    from nodevault.core.store import (
        JsonFileRecordStore,
        MemoryRecordStore,
        RecordStore,
        SqliteRecordStore,
    )

__all__ = [
    # Stores
    "RecordStore",
    "MemoryRecordStore",
    "JsonFileRecordStore",
    "SqliteRecordStore",
    "build_store",
    # Types
    "EventKind",
    "Record",
    "RecordEvent",
    "SortField",
    "SortOrder",
    "VaultStatistics",
    # Views
    "compute_statistics",
    "search",
    "sort_records",
    # Events
    "EventLog",
    # Errors
    "EmptyKeywordError",
    "PersistenceError",
    "RecordValidationError",
    "VaultError",
]

_STORE_NAMES = (
    "RecordStore",
    "MemoryRecordStore",
    "JsonFileRecordStore",
    "SqliteRecordStore",
)


def __getattr__(name: str):
    if name in _STORE_NAMES:
        from nodevault.core import store

        return getattr(store, name)
    if name == "build_store":
        from nodevault.core.factory import build_store

        return build_store
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
