"""Tests for nodevault.core.export."""

import json
from datetime import datetime, timezone

import pytest

from nodevault.core.errors import PersistenceError
from nodevault.core.export import (
    backup_file_name,
    backup_records,
    export_records,
    read_export_count,
    render_backup,
    render_export,
)
from nodevault.core.store import MemoryRecordStore
from nodevault.core.types import Record

GENERATED_AT = datetime(2024, 5, 1, 12, 30, 45)


class TestRenderExport:
    """Tests for the text export format."""

    def test_header_and_lines(self, make_record):
        records = [
            make_record(1, "Alice", "x1", datetime(2024, 1, 1, 12, 0, 0)),
            make_record(2, "Bob", "x2", None),
        ]

        text = render_export(records, GENERATED_AT, "export.txt")

        assert text == (
            "Vault Export\n"
            "Date: 2024-05-01 12:30:45\n"
            "Total Records: 2\n"
            "File: export.txt\n"
            "\n"
            "1. ID: 1 | Name: Alice | Value: x1 | Created: 2024-01-01T12:00:00\n"
            "2. ID: 2 | Name: Bob | Value: x2 | Created: N/A"
        )

    def test_deterministic(self, sample_records):
        assert render_export(sample_records, GENERATED_AT) == render_export(
            sample_records, GENERATED_AT
        )

    def test_count_round_trip(self):
        """Header count read back equals the number of stored records."""
        store = MemoryRecordStore()
        for i in range(3):
            store.add(f"name{i}", "v")

        text = render_export(store.list(), GENERATED_AT)

        assert read_export_count(text) == len(store.list())

    def test_empty_snapshot_has_header_only(self):
        text = render_export([], GENERATED_AT)

        assert read_export_count(text) == 0
        assert text.endswith("File: export.txt\n\n")

    def test_read_count_without_header(self):
        with pytest.raises(ValueError):
            read_export_count("nothing here")


class TestExportRecords:
    """Tests for writing the export file."""

    def test_writes_file(self, tmp_path, sample_records):
        path = export_records(sample_records, tmp_path)

        assert path == tmp_path / "export.txt"
        assert read_export_count(path.read_text()) == len(sample_records)

    def test_overwrites_previous_export(self, tmp_path, sample_records):
        export_records(sample_records, tmp_path)
        path = export_records(sample_records[:1], tmp_path)

        assert read_export_count(path.read_text()) == 1

    def test_write_failure_raises(self, tmp_path, sample_records):
        """A file where the directory should be makes the write fail."""
        blocker = tmp_path / "blocked"
        blocker.write_text("")

        with pytest.raises(PersistenceError):
            export_records(sample_records, blocker)


class TestBackup:
    """Tests for JSON backups."""

    def test_file_name_from_utc_timestamp(self):
        now = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)

        assert backup_file_name(now) == "backup_2024-05-01T12-30-45.json"

    def test_render_backup_full_fidelity(self, sample_records):
        data = json.loads(render_backup(sample_records))

        assert [Record.from_dict(item) for item in data] == sample_records

    def test_render_backup_is_pretty_printed(self, make_record):
        assert '\n  {\n    "id": 1' in render_backup([make_record()])

    def test_backup_records_writes_snapshot(self, tmp_path, sample_records):
        now = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)

        path = backup_records(sample_records, tmp_path / "backups", now=now)

        assert path.name == "backup_2024-05-01T12-30-45.json"
        assert len(json.loads(path.read_text())) == len(sample_records)

    def test_backup_names_are_unique(self, tmp_path, sample_records):
        """Two backups in the same second do not overwrite each other."""
        now = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)

        first = backup_records(sample_records, tmp_path, now=now)
        second = backup_records(sample_records[:1], tmp_path, now=now)

        assert first != second
        assert second.name == "backup_2024-05-01T12-30-45_1.json"
        assert len(json.loads(first.read_text())) == len(sample_records)

    def test_backup_write_failure_raises(self, tmp_path, sample_records):
        blocker = tmp_path / "blocked"
        blocker.write_text("")

        with pytest.raises(PersistenceError):
            backup_records(sample_records, blocker)
