"""Tests for nodevault.core.views."""

from datetime import datetime

import pytest

from nodevault.core.errors import EmptyKeywordError, RecordValidationError
from nodevault.core.types import EPOCH, SortField, SortOrder
from nodevault.core.views import compute_statistics, search, sort_records


class TestSearch:
    """Tests for search()."""

    def test_matches_name_case_insensitive(self, sample_records):
        matches = search(sample_records, "ALICE")

        assert [r.id for r in matches] == [2, 4]

    def test_matches_id_substring(self, sample_records):
        """Keyword '2' matches id 2 and id 12."""
        matches = search(sample_records, "2")

        assert [r.id for r in matches] == [2, 12]

    def test_strips_keyword(self, sample_records):
        assert [r.id for r in search(sample_records, "  bob ")] == [3]

    def test_no_match_returns_empty_list(self, sample_records):
        assert search(sample_records, "zzz") == []

    @pytest.mark.parametrize("keyword", ["", "   ", None])
    def test_empty_keyword_raises(self, sample_records, keyword):
        """An empty keyword is an error, never 'match everything'."""
        with pytest.raises(EmptyKeywordError):
            search(sample_records, keyword)

    def test_empty_keyword_is_validation_error(self, sample_records):
        with pytest.raises(RecordValidationError):
            search(sample_records, "")

    def test_restartable(self, sample_records):
        """Repeated calls on the same input give the same answer."""
        assert search(sample_records, "a") == search(sample_records, "a")

    def test_accepts_iterator(self, sample_records):
        matches = search(iter(sample_records), "dave")

        assert [r.id for r in matches] == [12]


class TestSortRecords:
    """Tests for sort_records()."""

    def test_name_asc_case_insensitive_and_stable(self, sample_records):
        """'Alice' (id 2) stays before 'alice' (id 4)."""
        ordered = sort_records(sample_records, "name", "asc")

        assert [r.id for r in ordered] == [2, 4, 3, 1, 12]
        names = [r.name.casefold() for r in ordered]
        assert names == sorted(names)

    def test_name_desc_reverses_distinct_keys_keeps_ties(self, sample_records):
        ordered = sort_records(sample_records, SortField.NAME, SortOrder.DESC)

        assert [r.id for r in ordered] == [12, 1, 3, 2, 4]

    def test_created_asc_missing_is_earliest(self, sample_records):
        ordered = sort_records(sample_records, "created", "asc")

        assert [r.id for r in ordered] == [3, 12, 2, 4, 1]

    def test_created_desc(self, sample_records):
        ordered = sort_records(sample_records, "created", "desc")

        assert [r.id for r in ordered] == [1, 4, 2, 12, 3]

    def test_accepts_mixed_case_choices(self, sample_records):
        ordered = sort_records(sample_records, " Name ", "ASC")

        assert ordered[0].id == 2

    def test_does_not_modify_input(self, sample_records):
        before = list(sample_records)
        sort_records(sample_records, "name", "desc")

        assert sample_records == before

    @pytest.mark.parametrize(
        "sort_field,order",
        [("value", "asc"), ("id", "desc"), ("name", "up"), ("created", "")],
    )
    def test_invalid_choice_raises(self, sample_records, sort_field, order):
        with pytest.raises(RecordValidationError):
            sort_records(sample_records, sort_field, order)

    def test_empty_input(self):
        assert sort_records([], "name", "asc") == []


class TestComputeStatistics:
    """Tests for compute_statistics()."""

    def test_empty_snapshot(self):
        """No records gives zeroed figures and unavailable bounds."""
        stats = compute_statistics([])

        assert stats.total == 0
        assert stats.last_modified == EPOCH
        assert stats.longest_name is None
        assert stats.earliest is None
        assert stats.latest is None
        display = stats.as_display()
        assert display["Earliest Record"] == "unavailable"
        assert display["Latest Record"] == "unavailable"

    def test_figures(self, sample_records):
        stats = compute_statistics(sample_records)

        assert stats.total == 5
        assert stats.last_modified == datetime(2024, 3, 1, 9, 0, 0)
        assert stats.earliest == datetime(2023, 12, 31, 23, 59, 59)
        assert stats.latest == datetime(2024, 3, 1, 9, 0, 0)

    def test_longest_name_first_on_tie(self, make_record):
        records = [
            make_record(1, "abc"),
            make_record(2, "abcde"),
            make_record(3, "vwxyz"),
        ]

        assert compute_statistics(records).longest_name.id == 2

    def test_no_valid_timestamps(self, make_record):
        """Records without creation times leave bounds unavailable."""
        records = [make_record(1, created=None), make_record(2, created=None)]

        stats = compute_statistics(records)

        assert stats.total == 2
        assert stats.last_modified == EPOCH
        assert stats.earliest is None
        assert stats.as_display()["Latest Record"] == "unavailable"
