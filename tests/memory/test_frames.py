"""Tests for the frame allocator.

The allocator keeps one record per physical frame and hands out the
lowest-numbered free frame.  A full memory is signalled by ``None``,
which is the trigger for page replacement rather than an error.
"""

import pytest

from py_mmu.memory import FrameAllocator

NUM_FRAMES = 4


class TestFrameAllocatorCreation:
    """Verify the initial state of the allocator."""

    def test_all_frames_free_initially(self) -> None:
        """A new allocator should have every frame free."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        assert fa.free_count == NUM_FRAMES
        assert fa.allocated_count == 0

    def test_total_frames(self) -> None:
        """The total frame count should be stored."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        assert fa.total_frames == NUM_FRAMES

    def test_frames_lists_every_slot(self) -> None:
        """Frames should return one unallocated record per slot."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        frames = fa.frames()
        assert [f.frame_number for f in frames] == list(range(NUM_FRAMES))
        assert not any(f.allocated for f in frames)


class TestAllocateFree:
    """Verify lowest-free-first allocation."""

    def test_allocates_in_order(self) -> None:
        """Frames should be handed out 0, 1, 2, ..."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        got = [fa.allocate_free() for _ in range(NUM_FRAMES)]
        assert got == list(range(NUM_FRAMES))

    def test_returns_none_when_full(self) -> None:
        """A full allocator should return None, not raise."""
        fa = FrameAllocator(num_frames=1)
        fa.allocate_free()
        assert fa.allocate_free() is None

    def test_reuses_lowest_freed_frame(self) -> None:
        """After a free, the lowest free frame should be reused first."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        for _ in range(NUM_FRAMES):
            fa.allocate_free()
        fa.free(2)
        fa.free(1)
        expected = 1
        assert fa.allocate_free() == expected

    def test_marks_allocated(self) -> None:
        """An allocated frame should report as allocated."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        frame = fa.allocate_free()
        assert frame is not None
        assert fa.is_allocated(frame)
        assert fa.allocated_count == 1

    def test_capacity_never_exceeded(self) -> None:
        """The allocated count should never exceed the frame count."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        for _ in range(NUM_FRAMES * 2):
            fa.allocate_free()
        assert fa.allocated_count == NUM_FRAMES


class TestFree:
    """Verify returning frames to the pool."""

    def test_free_makes_frame_available(self) -> None:
        """A freed frame should no longer be allocated."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        frame = fa.allocate_free()
        assert frame is not None
        fa.free(frame)
        assert not fa.is_allocated(frame)
        assert fa.free_count == NUM_FRAMES

    def test_double_free_raises(self) -> None:
        """Freeing an unallocated frame should raise ValueError."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        with pytest.raises(ValueError, match="not allocated"):
            fa.free(0)

    def test_unknown_frame_raises(self) -> None:
        """Freeing a frame outside the range should raise ValueError."""
        fa = FrameAllocator(num_frames=NUM_FRAMES)
        with pytest.raises(ValueError, match="out of range"):
            fa.free(NUM_FRAMES)
