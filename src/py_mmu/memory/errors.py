"""Errors raised by the memory-management unit.

Every error here reflects either invalid input or a broken invariant.
None of them is transient, so nothing in the MMU retries: the error is
raised at the point of detection and the caller decides whether to
abort or report.

Hierarchy::

    MmuError
    ├── AddressOutOfRangeError    bad virtual address (caller's fault)
    ├── AllocationExhaustedError  buffers could not be provisioned
    ├── QueueUnderflowError       FIFO dequeue with nothing allocated
    ├── DuplicateMappingError     page installed twice
    └── InvariantViolationError   consistency check failed
"""


class MmuError(Exception):
    """Base class for all memory-management errors."""


class AddressOutOfRangeError(MmuError):
    """Raise when a virtual address lies outside the address space."""


class AllocationExhaustedError(MmuError):
    """Raise when the memory system cannot be provisioned at start-up."""


class QueueUnderflowError(MmuError):
    """Raise when a victim is requested from an empty eviction queue."""


class DuplicateMappingError(MmuError):
    """Raise when a page that is already resident is mapped again."""


class InvariantViolationError(MmuError):
    """Raise when page table, frames, and FIFO queue disagree."""
