"""Hashed page table — page number to frame number, with chaining.

A flat page table needs one slot per virtual page.  A **hashed** page
table instead keeps a fixed number of buckets and places each resident
page in bucket ``page_number % table_size``.  Pages that land in the
same bucket share a **chain** (here, a plain list of entries).

This decouples the table's size from the address space: with 256
virtual pages and 64 buckets, each chain holds at most a handful of
entries, because only resident pages are stored and there are never
more resident pages than physical frames.

Lookup cost is O(chain length).  Entries exist only while their page
is resident; eviction unlinks the entry rather than clearing a flag.

Example with 4 buckets::

    bucket 0: [page 0 → frame 0] → [page 64 → frame 3]
    bucket 1: [page 1 → frame 1]
    bucket 2: (empty)
    bucket 3: [page 7 → frame 2]
"""

from dataclasses import dataclass

from py_mmu.memory.errors import DuplicateMappingError


@dataclass
class PageTableEntry:
    """A resident page's mapping.

    Attributes:
        page_number: The virtual page number.
        frame_number: The physical frame holding the page.
        valid: True while the mapping is live.

    """

    page_number: int
    frame_number: int
    valid: bool = True


class HashedPageTable:
    """Map resident page numbers to frame numbers through bucket chains."""

    def __init__(self, *, table_size: int) -> None:
        """Create a page table with the given number of buckets.

        Args:
            table_size: Number of hash buckets (must be positive).

        Raises:
            ValueError: If table_size is not positive.

        """
        if table_size <= 0:
            msg = f"Table size must be positive, got {table_size}"
            raise ValueError(msg)
        self._table_size = table_size
        # An empty bucket is None rather than an empty list.
        self._buckets: list[list[PageTableEntry] | None] = [None] * table_size
        self._count = 0

    @property
    def table_size(self) -> int:
        """Return the number of hash buckets."""
        return self._table_size

    def bucket_index(self, page_number: int) -> int:
        """Return the bucket a page hashes to."""
        return page_number % self._table_size

    def lookup(self, page_number: int) -> int | None:
        """Return the frame holding a page, or None if it isn't resident."""
        entry = self._find(page_number)
        return None if entry is None else entry.frame_number

    def insert(self, page_number: int, frame_number: int) -> None:
        """Install a mapping for a non-resident page.

        Raises:
            DuplicateMappingError: If the page already has a valid entry.

        """
        if self._find(page_number) is not None:
            msg = f"Page {page_number} is already mapped"
            raise DuplicateMappingError(msg)
        index = self.bucket_index(page_number)
        chain = self._buckets[index]
        if chain is None:
            chain = []
            self._buckets[index] = chain
        chain.append(PageTableEntry(page_number=page_number, frame_number=frame_number))
        self._count += 1

    def remove(self, page_number: int) -> None:
        """Unlink a page's entry (no-op if the page isn't resident).

        The frame is not freed here; the caller pairs this with a
        ``FrameAllocator.free()``.
        """
        index = self.bucket_index(page_number)
        chain = self._buckets[index]
        if chain is None:
            return
        for position, entry in enumerate(chain):
            if entry.valid and entry.page_number == page_number:
                del chain[position]
                entry.valid = False
                self._count -= 1
                break
        if not chain:
            self._buckets[index] = None

    def page_for_frame(self, frame_number: int) -> int | None:
        """Reverse lookup: return the page occupying a frame, if any."""
        for chain in self._buckets:
            if chain is None:
                continue
            for entry in chain:
                if entry.valid and entry.frame_number == frame_number:
                    return entry.page_number
        return None

    def entries(self) -> list[PageTableEntry]:
        """Return copies of all resident entries, sorted by page number."""
        found = [
            PageTableEntry(page_number=e.page_number, frame_number=e.frame_number)
            for chain in self._buckets
            if chain is not None
            for e in chain
            if e.valid
        ]
        return sorted(found, key=lambda e: e.page_number)

    def chain_lengths(self) -> list[int]:
        """Return the length of every bucket's chain, in bucket order."""
        return [0 if chain is None else len(chain) for chain in self._buckets]

    def __contains__(self, page_number: object) -> bool:
        """Return True if the page is resident."""
        return isinstance(page_number, int) and self._find(page_number) is not None

    def __len__(self) -> int:
        """Return the number of resident pages."""
        return self._count

    def _find(self, page_number: int) -> PageTableEntry | None:
        chain = self._buckets[self.bucket_index(page_number)]
        if chain is None:
            return None
        for entry in chain:
            if entry.valid and entry.page_number == page_number:
                return entry
        return None
