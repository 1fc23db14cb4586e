"""Shared test fixtures and configuration."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime

import pytest

# Keep config's data directory out of the real home directory
os.environ.setdefault("NODEVAULT_DATA_DIR", tempfile.mkdtemp(prefix="nodevault-test-"))

from nodevault.core.events import EventLog  # noqa: E402
from nodevault.core.store import (  # noqa: E402
    JsonFileRecordStore,
    MemoryRecordStore,
    SqliteRecordStore,
)
from nodevault.core.types import Record  # noqa: E402


@pytest.fixture
def event_log():
    """Event log observer with a small history."""
    return EventLog(limit=10)


@pytest.fixture
def memory_store(event_log):
    """Empty in-memory store with an event log attached."""
    return MemoryRecordStore(observers=[event_log])


@pytest.fixture
def json_path(tmp_path):
    return tmp_path / "records.json"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path, event_log):
    """Each store backend in turn, empty, with an event log attached."""
    if request.param == "memory":
        record_store = MemoryRecordStore(observers=[event_log])
    elif request.param == "json":
        record_store = JsonFileRecordStore(
            tmp_path / "records.json", observers=[event_log]
        )
    else:
        record_store = SqliteRecordStore(tmp_path / "test.db", observers=[event_log])
    yield record_store
    record_store.close()


@pytest.fixture
def make_record():
    """Factory for Record objects."""

    def _make_record(
        record_id: int = 1,
        name: str = "Alice",
        value: str = "x1",
        created: datetime | None = datetime(2024, 1, 1, 12, 0, 0),
    ) -> Record:
        return Record(id=record_id, name=name, value=value, created=created)

    return _make_record


@pytest.fixture
def sample_records(make_record):
    """A small snapshot with mixed case names and one missing timestamp."""
    return [
        make_record(1, "charlie", "c", datetime(2024, 3, 1, 9, 0, 0)),
        make_record(2, "Alice", "a", datetime(2024, 1, 15, 8, 30, 0)),
        make_record(3, "bob", "b", None),
        make_record(4, "alice", "a2", datetime(2024, 2, 1, 10, 0, 0)),
        make_record(12, "Dave", "d", datetime(2023, 12, 31, 23, 59, 59)),
    ]
