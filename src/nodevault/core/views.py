"""Derived views over a snapshot of records: search, sort and statistics.

All functions here are pure. They take any iterable of records, never
touch a store, and return new lists or values.
"""

from collections.abc import Iterable

from nodevault.core.errors import EmptyKeywordError, RecordValidationError
from nodevault.core.types import (
    EPOCH,
    Record,
    SortField,
    SortOrder,
    VaultStatistics,
)


def search(records: Iterable[Record], keyword: str) -> list[Record]:
    """
    Find records whose ID or name contains the keyword, ignoring case.

    Args:
        records: Snapshot to search
        keyword: Text to look for; surrounding whitespace is ignored

    Returns:
        Matching records in their original order (possibly empty)

    Raises:
        EmptyKeywordError: If the keyword is empty or only whitespace
    """
    needle = (keyword or "").strip().casefold()
    if not needle:
        raise EmptyKeywordError()

    return [
        record
        for record in records
        if needle in str(record.id) or needle in record.name.casefold()
    ]


def _parse_choice(value, choices: type, label: str):
    if isinstance(value, choices):
        return value
    try:
        return choices(str(value).strip().lower())
    except ValueError:
        allowed = "/".join(choice.value for choice in choices)
        raise RecordValidationError(
            f"Invalid {label} '{value}' - expected {allowed}"
        ) from None


def sort_records(
    records: Iterable[Record],
    field: SortField | str = SortField.NAME,
    order: SortOrder | str = SortOrder.ASC,
) -> list[Record]:
    """
    Sort records by name (case-insensitive) or creation time.

    Records without a creation time sort as the epoch. The sort is
    stable in both directions: ties keep their original relative order.

    Raises:
        RecordValidationError: If field or order is not recognised
    """
    sort_field = _parse_choice(field, SortField, "sort field")
    sort_order = _parse_choice(order, SortOrder, "sort order")

    if sort_field is SortField.NAME:

        def key(record: Record):
            return record.name.casefold()

    else:

        def key(record: Record):
            return record.created or EPOCH

    return sorted(records, key=key, reverse=sort_order is SortOrder.DESC)


def compute_statistics(records: Iterable[Record]) -> VaultStatistics:
    """Summarize a snapshot. An empty snapshot gives zeroed figures."""
    snapshot = list(records)
    if not snapshot:
        return VaultStatistics()

    longest = snapshot[0]
    for record in snapshot[1:]:
        # Strictly longer only, so the first record wins a tie
        if len(record.name) > len(longest.name):
            longest = record

    timestamps = [record.created for record in snapshot if record.created]

    return VaultStatistics(
        total=len(snapshot),
        last_modified=max(timestamps, default=EPOCH),
        longest_name=longest,
        earliest=min(timestamps) if timestamps else None,
        latest=max(timestamps) if timestamps else None,
    )
