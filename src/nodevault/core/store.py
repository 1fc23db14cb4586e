"""Record store backends.

Every backend owns the canonical list of records and exposes the same
add/list/get/update/delete interface. Ids are assigned by the store,
strictly increasing, and never handed out twice. A missing id is
reported as ``None`` (update, get) or ``False`` (delete); only I/O
failures raise, as PersistenceError, and leave the store unchanged.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Protocol

from nodevault.core.errors import PersistenceError, RecordValidationError
from nodevault.core.types import EventKind, Record, RecordEvent, RecordObserver
from nodevault.storage.db import get_connection, init_db
from nodevault.storage.repos import RecordsRepo

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Interface shared by all record store backends."""

    def add(self, name: str, value: str) -> Record: ...

    def list(self) -> list[Record]: ...

    def get(self, record_id: int) -> Record | None: ...

    def update(self, record_id: int, name: str, value: str) -> Record | None: ...

    def delete(self, record_id: int) -> bool: ...

    def subscribe(self, observer: RecordObserver) -> None: ...

    def close(self) -> None: ...


def _require_fields(name: str | None, value: str | None) -> None:
    if name is None:
        raise RecordValidationError("Record name is required")
    if value is None:
        raise RecordValidationError("Record value is required")


class _ObservableStore:
    """Observer registry shared by the backends."""

    def __init__(self, observers: Iterable[RecordObserver] = ()):
        self._observers: list[RecordObserver] = list(observers)

    def subscribe(self, observer: RecordObserver) -> None:
        """Register an observer for add/update/delete events."""
        self._observers.append(observer)

    def _notify(self, kind: EventKind, record_id: int) -> None:
        event = RecordEvent(kind=kind, record_id=record_id)
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception:
                # An observer must never fail the mutation it observes
                logger.exception(
                    "Observer %r failed on %s event for record %s",
                    observer,
                    kind.value,
                    record_id,
                )


class MemoryRecordStore(_ObservableStore):
    """Record store backed by an in-process list."""

    def __init__(
        self,
        records: Iterable[Record] | None = None,
        observers: Iterable[RecordObserver] = (),
        last_id: int = 0,
    ):
        """
        Initialize memory store.

        Args:
            records: Initial records, in insertion order
            observers: Callbacks notified after each mutation
            last_id: Highest id already issued, if higher than any record's
        """
        super().__init__(observers)
        self._records: list[Record] = list(records or [])
        self._last_id = max([last_id, *(r.id for r in self._records)])

    @property
    def last_id(self) -> int:
        """Highest id issued so far."""
        return self._last_id

    def _persist(self) -> None:
        """Write the current state out. No-op for the memory backend."""

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Apply a mutation, persist it, and roll back if either step fails."""
        records, last_id = list(self._records), self._last_id
        try:
            yield
            self._persist()
        except Exception:
            self._records, self._last_id = records, last_id
            raise

    def _next_timestamp(self) -> datetime:
        now = datetime.now()
        if self._records and self._records[-1].created:
            # Keep creation times non-decreasing if the clock steps back
            return max(now, self._records[-1].created)
        return now

    def _index_of(self, record_id: int) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def add(self, name: str, value: str) -> Record:
        """Create a record with the next id and the current time."""
        _require_fields(name, value)
        with self._transaction():
            self._last_id += 1
            record = Record(
                id=self._last_id,
                name=name,
                value=value,
                created=self._next_timestamp(),
            )
            self._records.append(record)
        self._notify(EventKind.ADD, record.id)
        return record

    def list(self) -> list[Record]:
        """Return a snapshot of all records in insertion order."""
        return list(self._records)

    def get(self, record_id: int) -> Record | None:
        index = self._index_of(record_id)
        return self._records[index] if index is not None else None

    def update(self, record_id: int, name: str, value: str) -> Record | None:
        """Overwrite name and value. Returns None if the id is unknown."""
        _require_fields(name, value)
        index = self._index_of(record_id)
        if index is None:
            return None
        with self._transaction():
            record = replace(self._records[index], name=name, value=value)
            self._records[index] = record
        self._notify(EventKind.UPDATE, record_id)
        return record

    def delete(self, record_id: int) -> bool:
        """Remove a record. Returns False if the id is unknown."""
        index = self._index_of(record_id)
        if index is None:
            return False
        with self._transaction():
            del self._records[index]
        self._notify(EventKind.DELETE, record_id)
        return True

    def close(self) -> None:
        pass


class JsonFileRecordStore(MemoryRecordStore):
    """Memory store that rewrites a JSON file after every mutation.

    The file holds ``{"last_id": n, "records": [...]}``. A bare list of
    records (the backup format) is also accepted on load.
    """

    def __init__(self, path: Path | str, observers: Iterable[RecordObserver] = ()):
        self.path = Path(path)
        records, last_id = self._load()
        super().__init__(records=records, observers=observers, last_id=last_id)

    def _load(self) -> tuple[list[Record], int]:
        if not self.path.exists():
            return [], 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Could not read {self.path}: {exc}") from exc

        if isinstance(data, list):
            raw_records, last_id = data, 0
        elif isinstance(data, dict):
            raw_records, last_id = data.get("records", []), data.get("last_id", 0)
        else:
            raise PersistenceError(
                f"{self.path} must hold an object or a list, got {type(data).__name__}"
            )

        try:
            records = [Record.from_dict(item) for item in raw_records]
            return records, int(last_id or 0)
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Malformed record in {self.path}: {exc}") from exc

    def _persist(self) -> None:
        payload = {
            "last_id": self.last_id,
            "records": [record.to_dict() for record in self._records],
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.error("Failed to write %s", self.path, exc_info=True)
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc


class SqliteRecordStore(_ObservableStore):
    """Record store backed by the ``records`` table of a SQLite database."""

    def __init__(
        self,
        db_path: Path | str,
        observers: Iterable[RecordObserver] = (),
    ):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to SQLite database, created if missing
            observers: Callbacks notified after each mutation
        """
        super().__init__(observers)
        self.db_path = Path(db_path)
        try:
            init_db(self.db_path)
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"Could not open database {self.db_path}: {exc}"
            ) from exc

    @contextmanager
    def _repo(self) -> Iterator[RecordsRepo]:
        try:
            with get_connection(self.db_path) as conn:
                yield RecordsRepo(conn)
        except sqlite3.Error as exc:
            logger.error("SQLite operation failed on %s", self.db_path, exc_info=True)
            raise PersistenceError(f"Database operation failed: {exc}") from exc

    def add(self, name: str, value: str) -> Record:
        _require_fields(name, value)
        with self._repo() as repo:
            record = repo.create(name, value, datetime.now())
        self._notify(EventKind.ADD, record.id)
        return record

    def list(self) -> list[Record]:
        with self._repo() as repo:
            return repo.get_all()

    def get(self, record_id: int) -> Record | None:
        with self._repo() as repo:
            return repo.get_by_id(record_id)

    def update(self, record_id: int, name: str, value: str) -> Record | None:
        _require_fields(name, value)
        with self._repo() as repo:
            if not repo.update(record_id, name, value):
                return None
            record = repo.get_by_id(record_id)
        self._notify(EventKind.UPDATE, record_id)
        return record

    def delete(self, record_id: int) -> bool:
        with self._repo() as repo:
            deleted = repo.delete(record_id)
        if deleted:
            self._notify(EventKind.DELETE, record_id)
        return deleted

    def close(self) -> None:
        pass
