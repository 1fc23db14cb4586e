"""Storage layer for NodeVault - SQLite database and repositories."""

from nodevault.storage.db import get_connection, init_db
from nodevault.storage.repos import RecordsRepo

__all__ = [
    "get_connection",
    "init_db",
    "RecordsRepo",
]
