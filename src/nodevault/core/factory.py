"""Factory for building the configured record store.

The CLI menu and the one-shot commands both call build_store() so they
open the same backend the same way.
"""

from collections.abc import Iterable
from pathlib import Path

from nodevault.core.config import (
    DATABASE_PATH,
    JSON_STORE_PATH,
    NODEVAULT_STORE,
    STORE_BACKENDS,
)
from nodevault.core.errors import RecordValidationError
from nodevault.core.store import (
    JsonFileRecordStore,
    MemoryRecordStore,
    RecordStore,
    SqliteRecordStore,
)
from nodevault.core.types import RecordObserver


def build_store(
    backend: str | None = None,
    path: Path | str | None = None,
    observers: Iterable[RecordObserver] = (),
) -> RecordStore:
    """
    Build a record store.

    Args:
        backend: "memory", "json" or "sqlite" (defaults to NODEVAULT_STORE)
        path: File backing the json/sqlite store (defaults to config)
        observers: Callbacks notified after each mutation

    Returns:
        Record store for the chosen backend

    Raises:
        RecordValidationError: If the backend name is unknown
        PersistenceError: If the backing file cannot be opened
    """
    name = (backend or NODEVAULT_STORE).strip().lower()

    if name == "memory":
        return MemoryRecordStore(observers=observers)
    if name == "json":
        return JsonFileRecordStore(path or JSON_STORE_PATH, observers=observers)
    if name == "sqlite":
        return SqliteRecordStore(path or DATABASE_PATH, observers=observers)

    raise RecordValidationError(
        f"Unknown store backend '{name}' - expected one of: {', '.join(STORE_BACKENDS)}"
    )
