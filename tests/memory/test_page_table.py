"""Tests for the hashed page table.

Resident pages are kept in ``page % table_size`` buckets, with
collisions chained.  Entries only exist while a page is resident.
"""

import pytest

from py_mmu.memory import DuplicateMappingError, HashedPageTable

TABLE_SIZE = 4


class TestLookupAndInsert:
    """Verify mapping and lookup."""

    def test_lookup_missing_returns_none(self) -> None:
        """A page that was never inserted should not be found."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        assert pt.lookup(3) is None

    def test_insert_then_lookup(self) -> None:
        """An inserted page should map to its frame."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        frame = 7
        pt.insert(2, frame)
        assert pt.lookup(2) == frame

    def test_colliding_pages_share_a_bucket(self) -> None:
        """Pages that hash to the same bucket should both be found."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(1, 10)
        pt.insert(1 + TABLE_SIZE, 11)
        pt.insert(1 + 2 * TABLE_SIZE, 12)
        assert pt.lookup(1) == 10
        assert pt.lookup(1 + TABLE_SIZE) == 11
        assert pt.lookup(1 + 2 * TABLE_SIZE) == 12
        assert pt.chain_lengths() == [0, 3, 0, 0]

    def test_duplicate_insert_raises(self) -> None:
        """Mapping an already resident page should raise."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(0, 0)
        with pytest.raises(DuplicateMappingError, match="already mapped"):
            pt.insert(0, 1)

    def test_lookup_has_no_side_effects(self) -> None:
        """Lookups should not change the table."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(5, 1)
        pt.lookup(5)
        pt.lookup(6)
        assert len(pt) == 1

    def test_invalid_table_size(self) -> None:
        """A non-positive bucket count should be rejected."""
        with pytest.raises(ValueError, match="positive"):
            HashedPageTable(table_size=0)


class TestRemove:
    """Verify unlinking entries."""

    def test_remove_unmaps(self) -> None:
        """A removed page should no longer be found."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(3, 2)
        pt.remove(3)
        assert pt.lookup(3) is None
        assert len(pt) == 0

    def test_remove_missing_is_noop(self) -> None:
        """Removing an absent page should do nothing."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(1, 0)
        pt.remove(9)
        assert len(pt) == 1

    def test_remove_keeps_chain_neighbours(self) -> None:
        """Removing one chained page should leave the others intact."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(2, 0)
        pt.insert(2 + TABLE_SIZE, 1)
        pt.remove(2)
        assert pt.lookup(2 + TABLE_SIZE) == 1
        assert pt.chain_lengths()[2] == 1

    def test_emptied_bucket_is_cleared(self) -> None:
        """A bucket whose chain empties should report length 0."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(0, 0)
        pt.remove(0)
        assert pt.chain_lengths() == [0] * TABLE_SIZE

    def test_reinsert_after_remove(self) -> None:
        """A page removed and inserted again should be found again."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(6, 1)
        pt.remove(6)
        pt.insert(6, 3)
        expected = 3
        assert pt.lookup(6) == expected


class TestReverseLookupAndEntries:
    """Verify reverse lookup and entry listing."""

    def test_page_for_frame(self) -> None:
        """Reverse lookup should find the page owning a frame."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(9, 2)
        pt.insert(4, 0)
        expected = 9
        assert pt.page_for_frame(2) == expected

    def test_page_for_free_frame_is_none(self) -> None:
        """Reverse lookup on an unmapped frame should return None."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        assert pt.page_for_frame(0) is None

    def test_entries_sorted_by_page(self) -> None:
        """Entries should come back ordered by page number."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(7, 0)
        pt.insert(1, 1)
        pt.insert(4, 2)
        assert [e.page_number for e in pt.entries()] == [1, 4, 7]
        assert all(e.valid for e in pt.entries())

    def test_contains(self) -> None:
        """Membership should reflect residency."""
        pt = HashedPageTable(table_size=TABLE_SIZE)
        pt.insert(3, 0)
        assert 3 in pt
        assert 4 not in pt
