"""Frame allocator — which physical frames are in use.

Physical memory is split into fixed-size **frames**, each the same size
as a virtual page.  The allocator keeps one ``Frame`` record per slot and
hands out the lowest-numbered free one on request.

When every frame is occupied, ``allocate_free()`` returns ``None``
rather than raising: a full memory is the normal trigger for page
replacement, not an error.

Why a list of records instead of a free set?
    The lowest-free-first scan makes allocation order deterministic
    (frame 0, then 1, ...), which keeps FIFO replacement reproducible
    and easy to follow in a dump.
"""

from dataclasses import dataclass


@dataclass
class Frame:
    """One physical frame slot.

    Attributes:
        frame_number: Index of the frame in physical memory.
        allocated: Whether a resident page currently owns the frame.

    """

    frame_number: int
    allocated: bool = False


class FrameAllocator:
    """Track the allocation state of every physical frame."""

    def __init__(self, *, num_frames: int) -> None:
        """Create an allocator with all frames free.

        Args:
            num_frames: Number of physical frames to manage.

        """
        self._frames: list[Frame] = [Frame(frame_number=i) for i in range(num_frames)]
        self._allocated = 0

    @property
    def total_frames(self) -> int:
        """Return the number of physical frames."""
        return len(self._frames)

    @property
    def allocated_count(self) -> int:
        """Return the number of frames currently allocated."""
        return self._allocated

    @property
    def free_count(self) -> int:
        """Return the number of frames currently free."""
        return len(self._frames) - self._allocated

    def is_allocated(self, frame_number: int) -> bool:
        """Return True if the frame is owned by a resident page."""
        return self._frame(frame_number).allocated

    def frames(self) -> list[Frame]:
        """Return a copy of every frame record, in frame order."""
        return [Frame(frame_number=f.frame_number, allocated=f.allocated) for f in self._frames]

    def allocate_free(self) -> int | None:
        """Claim the lowest-numbered free frame.

        Returns:
            The frame number, or None if every frame is allocated.

        """
        for frame in self._frames:
            if not frame.allocated:
                frame.allocated = True
                self._allocated += 1
                return frame.frame_number
        return None

    def free(self, frame_number: int) -> None:
        """Return a frame to the free pool.

        Raises:
            ValueError: If the frame is unknown or already free.

        """
        frame = self._frame(frame_number)
        if not frame.allocated:
            msg = f"Frame {frame_number} is not allocated"
            raise ValueError(msg)
        frame.allocated = False
        self._allocated -= 1

    def _frame(self, frame_number: int) -> Frame:
        if not 0 <= frame_number < len(self._frames):
            msg = f"Frame {frame_number} out of range (0..{len(self._frames) - 1})"
            raise ValueError(msg)
        return self._frames[frame_number]
