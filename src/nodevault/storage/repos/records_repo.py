"""Records repository - pure data access for record persistence."""

import sqlite3
from datetime import datetime

from nodevault.core.types import Record, parse_created


def _row_to_record(row: sqlite3.Row) -> Record:
    return Record(
        id=row["id"],
        name=row["name"],
        value=row["value"],
        created=parse_created(row["created"]),
    )


class RecordsRepo:
    """Repository for record data access."""

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize records repository.

        Args:
            conn: SQLite connection with row_factory set
        """
        self.conn = conn

    def get_all(self) -> list[Record]:
        """Get all records in insertion order."""
        rows = self.conn.execute(
            "SELECT id, name, value, created FROM records ORDER BY id"
        ).fetchall()
        return [_row_to_record(row) for row in rows]

    def get_by_id(self, record_id: int) -> Record | None:
        """Get a specific record by ID."""
        row = self.conn.execute(
            "SELECT id, name, value, created FROM records WHERE id = ?",
            (record_id,),
        ).fetchone()
        if row:
            return _row_to_record(row)
        return None

    def create(self, name: str, value: str, created: datetime) -> Record:
        """Insert a record and return it with its assigned ID."""
        cursor = self.conn.execute(
            "INSERT INTO records (name, value, created) VALUES (?, ?, ?)",
            (name, value, created.isoformat()),
        )
        return Record(id=cursor.lastrowid, name=name, value=value, created=created)

    def update(self, record_id: int, name: str, value: str) -> bool:
        """Overwrite name and value. Returns False if no row matched."""
        cursor = self.conn.execute(
            "UPDATE records SET name = ?, value = ? WHERE id = ?",
            (name, value, record_id),
        )
        return cursor.rowcount > 0

    def delete(self, record_id: int) -> bool:
        """Delete a record. Returns False if no row matched."""
        cursor = self.conn.execute("DELETE FROM records WHERE id = ?", (record_id,))
        return cursor.rowcount > 0
