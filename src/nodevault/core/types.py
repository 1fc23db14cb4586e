"""Shared types and data structures for NodeVault."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Protocol

from pydantic import BaseModel

# Stand-in for records without a usable creation time
EPOCH = datetime(1970, 1, 1)

UNAVAILABLE = "unavailable"

__all__ = [
    "EPOCH",
    "EventKind",
    "Record",
    "RecordEvent",
    "RecordObserver",
    "SortField",
    "SortOrder",
    "UNAVAILABLE",
    "VaultStatistics",
    "parse_created",
]


def parse_created(value: Any) -> datetime | None:
    """Normalize a stored creation time.

    Accepts datetimes and ISO-8601 strings. Timezone-aware values are
    converted to naive local time so every record compares on one clock.
    Anything missing or unparsable becomes None.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _text_field(data: dict[str, Any], key: str) -> str:
    """Read a name/value field, keeping falsy values like 0 as text."""
    value = data.get(key)
    return "" if value is None else str(value)


class SortField(StrEnum):
    """Record fields the sort view can order by."""

    NAME = "name"
    CREATED = "created"


class SortOrder(StrEnum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class EventKind(StrEnum):
    """Kind of record store mutation."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Record:
    """A single stored name/value entry."""

    id: int
    name: str
    value: str
    created: datetime | None = None

    @property
    def created_label(self) -> str:
        """Creation time for display, or N/A when missing."""
        return self.created.isoformat() if self.created else "N/A"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "created": self.created.isoformat() if self.created else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        """Create from dictionary."""
        return cls(
            id=int(data["id"]),
            name=_text_field(data, "name"),
            value=_text_field(data, "value"),
            created=parse_created(data.get("created")),
        )


@dataclass(frozen=True)
class RecordEvent:
    """Notification emitted after a successful store mutation."""

    kind: EventKind
    record_id: int
    timestamp: datetime = field(default_factory=datetime.now)


class RecordObserver(Protocol):
    """Callback signature for store mutation notifications."""

    def __call__(self, event: RecordEvent) -> None:
        pass


class VaultStatistics(BaseModel, frozen=True):
    """Summary figures over a snapshot of records."""

    total: int = 0
    last_modified: datetime = EPOCH
    longest_name: Record | None = None
    earliest: datetime | None = None
    latest: datetime | None = None

    def as_display(self) -> dict[str, str]:
        """Render every figure as text, using 'unavailable' for gaps."""
        longest = (
            f"{self.longest_name.name} (ID: {self.longest_name.id})"
            if self.longest_name
            else UNAVAILABLE
        )
        return {
            "Total Records": str(self.total),
            "Last Modified": self.last_modified.isoformat(),
            "Longest Name": longest,
            "Earliest Record": self.earliest.isoformat()
            if self.earliest
            else UNAVAILABLE,
            "Latest Record": self.latest.isoformat() if self.latest else UNAVAILABLE,
        }
