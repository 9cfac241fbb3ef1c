"""Byte storage — the backing store and physical memory.

Two flat byte buffers take part in paging:

- **BackingStore** — the authoritative content of every virtual page,
  resident or not.  In a real OS this is the disk image a page is read
  from on a fault.  It is filled once at start-up and never resized.
- **PhysicalMemory** — the simulated RAM.  Only frames that currently
  hold a resident page carry meaningful bytes.

Both are addressed in page-sized blocks: ``read_page`` / ``load_frame``
move exactly one page at a time.
"""

from py_mmu.memory.errors import AllocationExhaustedError


def _provision(size: int, what: str) -> bytearray:
    """Allocate a zeroed buffer, translating allocation failures."""
    try:
        return bytearray(size)
    except (MemoryError, OverflowError) as e:
        msg = f"Cannot provision {what} of {size} bytes: {e}"
        raise AllocationExhaustedError(msg) from e


class BackingStore:
    """Authoritative byte content for the whole virtual address space."""

    def __init__(self, *, size: int, page_size: int, content: bytes | None = None) -> None:
        """Create a backing store, optionally pre-filled.

        Args:
            size: Size of the virtual address space in bytes.
            page_size: Size of one page in bytes.
            content: Initial bytes; must be exactly ``size`` long.
                Zero-filled when omitted.

        Raises:
            ValueError: If content has the wrong length.
            AllocationExhaustedError: If the buffer cannot be allocated.

        """
        if content is not None and len(content) != size:
            msg = f"Backing store content must be {size} bytes, got {len(content)}"
            raise ValueError(msg)
        self._page_size = page_size
        self._data = _provision(size, "backing store")
        if content is not None:
            self._data[:] = content

    @property
    def size(self) -> int:
        """Return the size in bytes."""
        return len(self._data)

    def read_page(self, page_number: int) -> bytes:
        """Return the bytes of one virtual page."""
        start = page_number * self._page_size
        return bytes(self._data[start : start + self._page_size])


class PhysicalMemory:
    """Simulated RAM, divided into page-sized frames."""

    def __init__(self, *, size: int, page_size: int) -> None:
        """Create zero-filled physical memory.

        Raises:
            AllocationExhaustedError: If the buffer cannot be allocated.

        """
        self._page_size = page_size
        self._data = _provision(size, "physical memory")

    @property
    def size(self) -> int:
        """Return the size in bytes."""
        return len(self._data)

    def load_frame(self, frame_number: int, data: bytes) -> None:
        """Copy one page of data into a frame."""
        start = frame_number * self._page_size
        self._data[start : start + self._page_size] = data

    def frame_bytes(self, frame_number: int) -> bytes:
        """Return the current content of a frame."""
        start = frame_number * self._page_size
        return bytes(self._data[start : start + self._page_size])

    def read(self, address: int, size: int = 1) -> bytes:
        """Return ``size`` bytes starting at a physical address."""
        return bytes(self._data[address : address + size])
