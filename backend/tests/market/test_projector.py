"""Tests for the sorted view projector."""

import pytest

from quoteboard.market.models import SortKey, TickRecord
from quoteboard.market.projector import SortedProjector, project


def _records(*lasts: str) -> list[TickRecord]:
    return [TickRecord(id=f"S{i}", last=last) for i, last in enumerate(lasts)]


class TestProject:
    """Unit tests for project()."""

    def test_descending_by_field(self):
        """Test that larger values come first."""
        ordered = project(_records("5.00", "10.00", "1.00"), "last")
        assert [r.last for r in ordered] == ["10.00", "5.00", "1.00"]

    def test_numeric_not_lexical(self):
        """Test that values compare as numbers, not strings."""
        ordered = project(_records("9.00", "10.00", "100.00"), SortKey.LAST)
        assert [r.last for r in ordered] == ["100.00", "10.00", "9.00"]

    def test_nan_always_last(self):
        """Test that NaN markers sort after every number."""
        ordered = project(_records("NaN", "2.00", "NaN", "-1.00", "3.00"), "last")
        assert [r.last for r in ordered] == ["3.00", "2.00", "-1.00", "NaN", "NaN"]

    def test_ties_keep_input_order(self):
        """Test that equal values keep their relative order."""
        ordered = project(_records("1.00", "1.00", "1.00"), "last")
        assert [r.id for r in ordered] == ["S0", "S1", "S2"]

    def test_sort_by_other_field(self):
        """Test sorting by a non-default field."""
        records = [TickRecord(id="A", bid="1.00"), TickRecord(id="B", bid="2.00")]
        assert [r.id for r in project(records, "bid")] == ["B", "A"]

    def test_input_not_mutated(self):
        """Test that project returns a new list and leaves the input alone."""
        records = _records("1.00", "2.00")
        ordered = project(records, "last")
        assert ordered is not records
        assert [r.last for r in records] == ["1.00", "2.00"]

    def test_empty(self):
        """Test projecting an empty snapshot."""
        assert project([], "last") == []

    def test_unknown_key(self):
        """Test that unknown fields are rejected."""
        with pytest.raises(ValueError):
            project(_records("1.00"), "volume")


class TestSortedProjector:
    """Unit tests for memoization in SortedProjector."""

    def test_reuses_previous_ordering(self):
        """Test that the same snapshot and key return the cached result."""
        projector = SortedProjector()
        records = _records("1.00", "2.00")
        first = projector(records, "last")
        assert projector(records, SortKey.LAST) is first

    def test_recomputes_on_new_snapshot(self):
        """Test that a new snapshot list triggers a recompute."""
        projector = SortedProjector()
        first = projector(_records("1.00", "2.00"), "last")
        second = projector(_records("3.00", "2.00"), "last")
        assert second is not first
        assert second[0].last == "3.00"

    def test_recomputes_on_new_key(self):
        """Test that a sort key change triggers a recompute."""
        projector = SortedProjector()
        records = [TickRecord(id="A", bid="2.00", last="1.00"), TickRecord(id="B", bid="1.00", last="2.00")]
        assert [r.id for r in projector(records, "last")] == ["B", "A"]
        assert [r.id for r in projector(records, "bid")] == ["A", "B"]
