"""Memory subsystem — frames, hashed page table, FIFO eviction, translation.

Re-exports public symbols so callers can write::

    from py_mmu.memory import MemorySystem, HashedPageTable
"""

from py_mmu.memory.errors import (
    AddressOutOfRangeError,
    AllocationExhaustedError,
    DuplicateMappingError,
    InvariantViolationError,
    MmuError,
    QueueUnderflowError,
)
from py_mmu.memory.fifo import EvictionQueue
from py_mmu.memory.frames import Frame, FrameAllocator
from py_mmu.memory.mmu import MemoryStats, MemorySystem, Translation
from py_mmu.memory.page_table import HashedPageTable, PageTableEntry
from py_mmu.memory.storage import BackingStore, PhysicalMemory

__all__ = [
    "AddressOutOfRangeError",
    "AllocationExhaustedError",
    "BackingStore",
    "DuplicateMappingError",
    "EvictionQueue",
    "Frame",
    "FrameAllocator",
    "HashedPageTable",
    "InvariantViolationError",
    "MemoryStats",
    "MemorySystem",
    "MmuError",
    "PageTableEntry",
    "PhysicalMemory",
    "QueueUnderflowError",
    "Translation",
]
