"""Memory system — address translation with demand paging.

The ``MemorySystem`` plays the part of the MMU plus the kernel's page
fault handler.  It owns every piece of paging state:

- a ``HashedPageTable`` (page → frame),
- a ``FrameAllocator`` (which frames are in use),
- an ``EvictionQueue`` (FIFO allocation order),
- the ``BackingStore`` and ``PhysicalMemory`` byte buffers.

Translation::

    virtual address  →  (page number, offset)
    page table[page] →  frame number           (hit)
                     →  page fault → resolve   (miss)
    physical address →  frame * page_size + offset

Fault resolution is two-phase and runs in one pass:

    1. **Reclaim** — if no frame is free, dequeue the oldest frame,
       unmap the page living there, and free the frame.
    2. **Allocate** — claim a free frame, copy the page in from the
       backing store, map it, and enqueue the frame.

Pages move between exactly two states: unmapped → mapped on a fault,
mapped → unmapped on eviction.  A single lock covers the whole
sequence, so a concurrent caller never sees a frame that is freed but
not yet reused.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn

from py_mmu.config import MemoryConfig
from py_mmu.logging import Logger, LogLevel
from py_mmu.memory.errors import (
    AddressOutOfRangeError,
    AllocationExhaustedError,
    DuplicateMappingError,
    InvariantViolationError,
)
from py_mmu.memory.fifo import EvictionQueue
from py_mmu.memory.frames import FrameAllocator
from py_mmu.memory.page_table import HashedPageTable
from py_mmu.memory.storage import BackingStore, PhysicalMemory

if TYPE_CHECKING:
    from py_mmu.memory.frames import Frame
    from py_mmu.memory.page_table import PageTableEntry

_SOURCE = "mmu"


@dataclass(frozen=True)
class Translation:
    """The outcome of translating one virtual address.

    Attributes:
        virtual_address: The address that was translated.
        page_number: Virtual page containing the address.
        offset: Byte offset within the page.
        frame_number: Frame the page occupies after translation.
        physical_address: The translated address.
        hit: True if the page was already resident.
        evicted_page: Page removed to make room, or None.

    """

    virtual_address: int
    page_number: int
    offset: int
    frame_number: int
    physical_address: int
    hit: bool
    evicted_page: int | None = None


@dataclass(frozen=True)
class MemoryStats:
    """Counters describing how translations went."""

    faults: int = 0
    hits: int = 0
    evictions: int = 0

    @property
    def accesses(self) -> int:
        """Return the total number of translations."""
        return self.faults + self.hits

    @property
    def hit_rate(self) -> float:
        """Return hits as a percentage of accesses (0.0 if none)."""
        if self.accesses == 0:
            return 0.0
        return self.hits / self.accesses * 100


class MemorySystem:
    """Owner of all paging state; translates addresses on demand.

    Usage::

        system = MemorySystem.initialize(
            virtual_size=1024, physical_size=256, page_size=4
        )
        system.translate(0)  # page fault, returns 0
        system.translate(1)  # hit, returns 1

    """

    def __init__(
        self,
        config: MemoryConfig | None = None,
        *,
        content: bytes | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Provision a memory system for the given geometry.

        Args:
            config: Memory geometry (defaults to ``MemoryConfig()``).
            content: Initial backing-store bytes (zero-filled if omitted).
            logger: Event log to write to (a fresh one if omitted).

        Raises:
            ConfigError: If the geometry is invalid.
            AllocationExhaustedError: If a buffer, the page table, or the
                frame allocator cannot be allocated.

        """
        self._config = (config or MemoryConfig()).validate()
        self._logger = logger if logger is not None else Logger()
        self._lock = threading.Lock()

        cfg = self._config
        self._backing: BackingStore | None = BackingStore(
            size=cfg.virtual_size, page_size=cfg.page_size, content=content
        )
        self._physical: PhysicalMemory | None = PhysicalMemory(
            size=cfg.physical_size, page_size=cfg.page_size
        )
        try:
            self._frames: FrameAllocator | None = FrameAllocator(num_frames=cfg.num_frames)
            self._page_table: HashedPageTable | None = HashedPageTable(table_size=cfg.buckets)
        except (MemoryError, OverflowError) as e:
            msg = f"Cannot provision page table or frame allocator: {e!r}"
            raise AllocationExhaustedError(msg) from e
        self._queue: EvictionQueue | None = EvictionQueue()

        self._faults = 0
        self._hits = 0
        self._evictions = 0

        self._logger.log(LogLevel.INFO, f"Memory system initialised: {cfg.describe()}", source=_SOURCE)

    @classmethod
    def initialize(
        cls,
        *,
        virtual_size: int,
        physical_size: int,
        page_size: int,
        table_size: int | None = None,
        content: bytes | None = None,
        logger: Logger | None = None,
    ) -> MemorySystem:
        """Build a memory system from raw sizes.

        Raises:
            ConfigError: If the geometry is invalid.
            AllocationExhaustedError: If provisioning fails.

        """
        config = MemoryConfig(
            virtual_size=virtual_size,
            physical_size=physical_size,
            page_size=page_size,
            table_size=table_size,
        )
        return cls(config, content=content, logger=logger)

    # -- Read-only views -------------------------------------------------------

    @property
    def config(self) -> MemoryConfig:
        """Return the memory geometry."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the event log."""
        return self._logger

    @property
    def is_shut_down(self) -> bool:
        """Return True once ``shutdown()`` has released the buffers."""
        return self._page_table is None

    def stats(self) -> MemoryStats:
        """Return the fault and hit counters."""
        return MemoryStats(faults=self._faults, hits=self._hits, evictions=self._evictions)

    def resident_entries(self) -> list[PageTableEntry]:
        """Return the resident page table entries, sorted by page."""
        return self._require()[0].entries()

    def frames(self) -> list[Frame]:
        """Return every frame record."""
        return self._require()[1].frames()

    def fifo_order(self) -> list[int]:
        """Return allocated frames, oldest first."""
        return self._require()[2].snapshot()

    def next_victim(self) -> int | None:
        """Return the frame FIFO would evict next, or None if none is allocated."""
        return self._require()[2].peek()

    def frame_of(self, page_number: int) -> int | None:
        """Return the frame holding a page, or None if not resident."""
        return self._require()[0].lookup(page_number)

    def chain_lengths(self) -> list[int]:
        """Return the page table's bucket chain lengths."""
        return self._require()[0].chain_lengths()

    # -- Translation -----------------------------------------------------------

    def translate(self, virtual_address: int) -> int:
        """Translate a virtual address to a physical address.

        Raises:
            AddressOutOfRangeError: If the address is outside the
                virtual address space.

        """
        return self.access(virtual_address).physical_address

    def access(self, virtual_address: int) -> Translation:
        """Translate a virtual address and report how it went.

        A resident page counts as a hit.  Otherwise the access counts as
        a fault and the page is brought in, evicting the oldest resident
        page if memory is full.

        Raises:
            AddressOutOfRangeError: If the address is outside the
                virtual address space.
            RuntimeError: If the system has been shut down.

        """
        self._check_address(virtual_address)
        with self._lock:
            return self._access(virtual_address)

    def resolve_fault(self, page_number: int) -> int:
        """Bring a non-resident page into memory and return its frame.

        Raises:
            AddressOutOfRangeError: If the page number is out of range.
            DuplicateMappingError: If the page is already resident.

        """
        if not _is_int(page_number) or not 0 <= page_number < self._config.num_pages:
            msg = f"Page {page_number} outside 0..{self._config.num_pages - 1}"
            raise AddressOutOfRangeError(msg)
        with self._lock:
            if page_number in self._require()[0]:
                msg = f"Page {page_number} is already mapped"
                raise DuplicateMappingError(msg)
            frame, _ = self._resolve_fault(page_number)
        return frame

    def read(self, virtual_address: int, size: int = 1) -> bytes:
        """Translate an address and read bytes from physical memory.

        The read must stay within one page.

        Raises:
            AddressOutOfRangeError: If the address is out of range.
            ValueError: If the read is empty or crosses a page boundary.

        """
        offset = virtual_address % self._config.page_size if _is_int(virtual_address) else 0
        if size <= 0:
            msg = f"Read size must be positive, got {size}"
            raise ValueError(msg)
        if offset + size > self._config.page_size:
            msg = f"Read of {size} bytes at offset {offset} crosses a page boundary"
            raise ValueError(msg)
        self._check_address(virtual_address)
        with self._lock:
            physical_address = self._access(virtual_address).physical_address
            return self._require_storage()[1].read(physical_address, size)

    def backing_page(self, page_number: int) -> bytes:
        """Return a page's authoritative content from the backing store."""
        return self._require_storage()[0].read_page(page_number)

    def frame_bytes(self, frame_number: int) -> bytes:
        """Return the current content of a physical frame."""
        return self._require_storage()[1].frame_bytes(frame_number)

    # -- Lifecycle ---------------------------------------------------------------

    def shutdown(self) -> None:
        """Release all buffers and structures (no-op if already shut down)."""
        with self._lock:
            if self._page_table is None:
                return
            self._backing = None
            self._physical = None
            self._frames = None
            self._page_table = None
            self._queue = None
        self._logger.log(LogLevel.INFO, "Memory system shut down", source=_SOURCE)

    def check_invariants(self) -> None:
        """Verify that page table, frames and FIFO queue agree.

        Raises:
            InvariantViolationError: On the first inconsistency found.

        """
        with self._lock:
            page_table, frames, queue = self._require()
            entries = page_table.entries()
            mapped_frames = [e.frame_number for e in entries]
            allocated = {f.frame_number for f in frames.frames() if f.allocated}
            if frames.allocated_count + frames.free_count != frames.total_frames:
                self._violation("allocated and free frame counts do not add up")

            for entry in entries:
                if not 0 <= entry.page_number < self._config.num_pages:
                    self._violation(f"page {entry.page_number} out of range")
                if not 0 <= entry.frame_number < self._config.num_frames:
                    self._violation(f"frame {entry.frame_number} out of range")
            if len(set(mapped_frames)) != len(mapped_frames):
                self._violation("a frame is mapped by more than one page")
            for frame in mapped_frames:
                if not frames.is_allocated(frame):
                    self._violation(f"mapped frame {frame} is not allocated")
            if set(mapped_frames) != allocated:
                self._violation(
                    f"mapped frames {sorted(mapped_frames)} != allocated frames {sorted(allocated)}"
                )
            order = queue.snapshot()
            if len(order) != frames.allocated_count or set(order) != allocated:
                self._violation(f"FIFO queue {order} != allocated frames {sorted(allocated)}")

    # -- Internals ---------------------------------------------------------------

    def _access(self, virtual_address: int) -> Translation:
        """Look up or fault in the page for a checked address.  Lock must be held."""
        page_size = self._config.page_size
        page_number = virtual_address // page_size
        offset = virtual_address % page_size

        frame = self._require()[0].lookup(page_number)
        evicted: int | None = None
        if frame is not None:
            self._hits += 1
            hit = True
        else:
            self._faults += 1
            hit = False
            frame, evicted = self._resolve_fault(page_number)

        return Translation(
            virtual_address=virtual_address,
            page_number=page_number,
            offset=offset,
            frame_number=frame,
            physical_address=frame * page_size + offset,
            hit=hit,
            evicted_page=evicted,
        )

    def _resolve_fault(self, page_number: int) -> tuple[int, int | None]:
        """Reclaim a frame if needed, then load the page.  Lock must be held."""
        page_table, frames, queue = self._require()
        backing, physical = self._require_storage()

        evicted: int | None = None
        frame = frames.allocate_free()
        if frame is None:
            victim = queue.dequeue()
            victim_page = page_table.page_for_frame(victim)
            if victim_page is None:
                self._violation(f"victim frame {victim} has no resident page")
            page_table.remove(victim_page)
            frames.free(victim)
            self._evictions += 1
            evicted = victim_page
            self._logger.log(
                LogLevel.INFO,
                f"Evicted page {victim_page} from frame {victim}",
                source=_SOURCE,
            )
            frame = frames.allocate_free()
            if frame is None:
                self._violation("no free frame after eviction")

        physical.load_frame(frame, backing.read_page(page_number))
        page_table.insert(page_number, frame)
        queue.enqueue(frame)
        self._logger.log(
            LogLevel.DEBUG,
            f"Page fault: page {page_number} loaded into frame {frame}",
            source=_SOURCE,
        )
        return frame, evicted

    def _check_address(self, virtual_address: int) -> None:
        if not _is_int(virtual_address) or not 0 <= virtual_address < self._config.virtual_size:
            msg = (
                f"Virtual address {virtual_address!r} outside address space "
                f"0..{self._config.virtual_size - 1}"
            )
            raise AddressOutOfRangeError(msg)

    def _require(self) -> tuple[HashedPageTable, FrameAllocator, EvictionQueue]:
        if self._page_table is None or self._frames is None or self._queue is None:
            msg = "Memory system has been shut down"
            raise RuntimeError(msg)
        return self._page_table, self._frames, self._queue

    def _require_storage(self) -> tuple[BackingStore, PhysicalMemory]:
        if self._backing is None or self._physical is None:
            msg = "Memory system has been shut down"
            raise RuntimeError(msg)
        return self._backing, self._physical

    def _violation(self, detail: str) -> NoReturn:
        self._logger.log(LogLevel.ERROR, f"Invariant violated: {detail}", source=_SOURCE)
        msg = f"Invariant violated: {detail}"
        raise InvariantViolationError(msg)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
