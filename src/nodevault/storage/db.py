"""SQLite database helpers for the record store."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from nodevault.core.config import DATABASE_PATH

RECORDS_SCHEMA = """
    CREATE TABLE IF NOT EXISTS records (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL DEFAULT '',
        value TEXT NOT NULL DEFAULT '',
        created TEXT
    )
"""


def _resolve(db_path: Path | str | None) -> Path:
    return Path(db_path) if db_path else DATABASE_PATH


def init_db(db_path: Path | str | None = None) -> None:
    """
    Create the database file and the records table if missing.

    Args:
        db_path: Path to SQLite database (defaults to DATABASE_PATH)
    """
    path = _resolve(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path)
    try:
        conn.execute(RECORDS_SCHEMA)
        conn.commit()
    finally:
        conn.close()


@contextmanager
def get_connection(
    db_path: Path | str | None = None,
) -> Generator[sqlite3.Connection, None, None]:
    """
    Open a connection whose rows can be read by column name.

    The block's changes are committed when it finishes and rolled back
    if it raises.
    """
    conn = sqlite3.connect(_resolve(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
