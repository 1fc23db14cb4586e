"""Repository classes for data access."""

from nodevault.storage.repos.records_repo import RecordsRepo

__all__ = [
    "RecordsRepo",
]
