"""Mutation event log.

EventLog is the default observer attached to a record store. It writes
one line per add/update/delete to the ``nodevault.events`` logger and
keeps the most recent events for the history view.
"""

import logging
from collections import deque

from nodevault.core.config import EVENT_HISTORY_LIMIT
from nodevault.core.types import RecordEvent

logger = logging.getLogger("nodevault.events")


class EventLog:
    """Bounded in-memory history of record store events."""

    def __init__(self, limit: int | None = None):
        self.limit = EVENT_HISTORY_LIMIT if limit is None else limit
        self._events: deque[RecordEvent] = deque(maxlen=max(self.limit, 0))

    def __call__(self, event: RecordEvent) -> None:
        logger.info(
            "Record %s: id=%s at %s",
            event.kind.value,
            event.record_id,
            event.timestamp.isoformat(),
        )
        self._events.append(event)

    def recent(self) -> list[RecordEvent]:
        """Events in the order they happened, oldest first."""
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
