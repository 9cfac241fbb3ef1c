"""FIFO eviction queue — the order in which frames were allocated.

Every time a frame is handed to a page, its number is appended to the
back of the queue.  When memory is full, the frame at the front (the one
allocated longest ago) is the victim.  Accesses never reorder the queue:
replacement order depends only on allocation time, which is exactly
what distinguishes FIFO from LRU.

A reused victim frame is enqueued again at the back, so its position
resets to "most recently allocated".
"""

from collections import deque

from py_mmu.memory.errors import QueueUnderflowError


class EvictionQueue:
    """First-in, first-out record of frame allocations."""

    def __init__(self) -> None:
        """Create an empty queue."""
        self._queue: deque[int] = deque()

    def enqueue(self, frame_number: int) -> None:
        """Record that a frame was just allocated."""
        self._queue.append(frame_number)

    def dequeue(self) -> int:
        """Remove and return the oldest allocated frame.

        Raises:
            QueueUnderflowError: If no frames are queued.

        """
        if not self._queue:
            msg = "No frames to evict: eviction queue is empty"
            raise QueueUnderflowError(msg)
        return self._queue.popleft()

    def peek(self) -> int | None:
        """Return the next victim without removing it (None if empty)."""
        return self._queue[0] if self._queue else None

    def snapshot(self) -> list[int]:
        """Return the queued frame numbers, oldest first."""
        return list(self._queue)

    def __len__(self) -> int:
        """Return the number of queued frames."""
        return len(self._queue)
