"""Text export and JSON backup artifacts."""

import json
import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from nodevault.core.errors import PersistenceError
from nodevault.core.types import Record

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILE_NAME = "export.txt"

_COUNT_PATTERN = re.compile(r"^Total Records: (\d+)$", re.MULTILINE)


def format_record_line(index: int, record: Record) -> str:
    """Render one record as a numbered export line."""
    return (
        f"{index}. ID: {record.id} | Name: {record.name} | "
        f"Value: {record.value} | Created: {record.created_label}"
    )


def render_export(
    records: Iterable[Record],
    generated_at: datetime,
    file_name: str = DEFAULT_EXPORT_FILE_NAME,
) -> str:
    """Render the human-readable export: a header, then one line per record."""
    snapshot = list(records)
    header = (
        "Vault Export\n"
        f"Date: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"Total Records: {len(snapshot)}\n"
        f"File: {file_name}\n\n"
    )
    lines = [format_record_line(i, r) for i, r in enumerate(snapshot, 1)]
    return header + "\n".join(lines)


def read_export_count(text: str) -> int:
    """Read the record count back from an export header."""
    match = _COUNT_PATTERN.search(text)
    if not match:
        raise ValueError("Export text has no 'Total Records' header")
    return int(match.group(1))


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to write %s", path, exc_info=True)
        raise PersistenceError(f"Could not write {path}: {exc}") from exc


def export_records(
    records: Iterable[Record],
    directory: Path | str,
    file_name: str = DEFAULT_EXPORT_FILE_NAME,
) -> Path:
    """
    Write the text export, replacing any previous one.

    Returns:
        Path of the written file

    Raises:
        PersistenceError: If the file cannot be written
    """
    path = Path(directory) / file_name
    _write_text(path, render_export(records, datetime.now(), file_name))
    logger.info("Exported vault to %s", path)
    return path


def render_backup(records: Iterable[Record]) -> str:
    """Serialize a full snapshot as pretty-printed JSON."""
    return json.dumps([record.to_dict() for record in records], indent=2)


def backup_file_name(now: datetime | None = None) -> str:
    """Build a backup name like ``backup_2024-05-01T12-30-45.json`` (UTC)."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    stamp = moment.replace(tzinfo=None).isoformat(timespec="seconds")
    return f"backup_{stamp.replace(':', '-')}.json"


def backup_records(
    records: Iterable[Record],
    directory: Path | str,
    now: datetime | None = None,
) -> Path:
    """
    Write a timestamped JSON snapshot into the backup directory.

    Two backups within the same second get a numeric suffix instead of
    overwriting each other.

    Returns:
        Path of the written file

    Raises:
        PersistenceError: If the file cannot be written
    """
    backup_dir = Path(directory)
    name = backup_file_name(now)
    path = backup_dir / name
    counter = 1
    while path.exists():
        path = backup_dir / f"{Path(name).stem}_{counter}.json"
        counter += 1

    _write_text(path, render_backup(records))
    logger.info("Backup created: %s", path.name)
    return path
