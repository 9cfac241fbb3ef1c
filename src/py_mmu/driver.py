"""Demo driver — random memory traffic and console reports.

The driver is the thin layer that turns a ``MemorySystem`` into
something you can watch:

- ``build_system`` fills the backing store with seeded random bytes.
- ``simulate_accesses`` fires random virtual addresses at the MMU.
- The ``format_*`` helpers render translations, statistics, the page
  table, frame occupancy and the FIFO queue as plain text.

Every helper is pure (returns strings, no I/O), so the console entry
point and the web dashboard can share them and tests can check them.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from py_mmu.config import MemoryConfig
from py_mmu.memory.mmu import MemorySystem

if TYPE_CHECKING:
    from py_mmu.logging import Logger
    from py_mmu.memory.mmu import MemoryStats, Translation


def build_system(
    config: MemoryConfig | None = None,
    *,
    seed: int | None = None,
    logger: Logger | None = None,
) -> MemorySystem:
    """Create a memory system whose backing store holds random bytes.

    Args:
        config: Memory geometry (defaults to ``MemoryConfig()``).
        seed: Seed for the content generator; None for fresh randomness.
        logger: Event log to attach.

    """
    cfg = (config or MemoryConfig()).validate()
    content = random.Random(seed).randbytes(cfg.virtual_size)
    return MemorySystem(cfg, content=content, logger=logger)


def random_addresses(virtual_size: int, count: int, *, seed: int | None = None) -> list[int]:
    """Return ``count`` random addresses in ``[0, virtual_size)``."""
    if count < 0:
        msg = f"Access count must not be negative, got {count}"
        raise ValueError(msg)
    rng = random.Random(seed)
    return [rng.randrange(virtual_size) for _ in range(count)]


def simulate_accesses(
    system: MemorySystem,
    count: int,
    *,
    seed: int | None = None,
) -> list[Translation]:
    """Translate ``count`` random addresses in order.

    Args:
        system: The memory system to drive.
        count: Number of accesses to make.
        seed: Seed for the address generator.

    Returns:
        One ``Translation`` per access, in order.

    """
    addresses = random_addresses(system.config.virtual_size, count, seed=seed)
    return [system.access(address) for address in addresses]


def format_translation(translation: Translation) -> str:
    """Render one translation as ``Virtual Address: v => Physical Address: p``."""
    if translation.hit:
        outcome = "hit"
    elif translation.evicted_page is None:
        outcome = "fault"
    else:
        outcome = f"fault, evicted page {translation.evicted_page}"
    return (
        f"Virtual Address: {translation.virtual_address} => "
        f"Physical Address: {translation.physical_address} ({outcome})"
    )


def format_statistics(stats: MemoryStats) -> str:
    """Render fault/hit counters and the hit rate."""
    lines = [
        "Memory Statistics:",
        f"Page Faults: {stats.faults}",
        f"Hits: {stats.hits}",
        f"Evictions: {stats.evictions}",
        f"Hit Rate: {stats.hit_rate:.2f}%",
    ]
    return "\n".join(lines)


def format_page_table(system: MemorySystem) -> str:
    """Render the resident page table entries."""
    entries = system.resident_entries()
    lines = ["Page Table:", "Page\tFrame\tValid"]
    lines.extend(
        f"{e.page_number}\t{e.frame_number}\t{'Yes' if e.valid else 'No'}"
        for e in entries
    )
    if not entries:
        lines.append("(no resident pages)")
    return "\n".join(lines)


def format_frames(system: MemorySystem) -> str:
    """Render frame occupancy with the page that owns each frame."""
    owners = {e.frame_number: e.page_number for e in system.resident_entries()}
    lines = ["Frames:", "Frame\tPage"]
    for frame in system.frames():
        owner = owners.get(frame.frame_number)
        lines.append(f"{frame.frame_number}\t{'-' if owner is None else owner}")
    return "\n".join(lines)


def format_fifo(system: MemorySystem) -> str:
    """Render the FIFO queue, oldest frame first."""
    order = system.fifo_order()
    if not order:
        return "FIFO queue (oldest first): (empty)"
    body = " <- ".join(str(frame) for frame in order)
    return f"FIFO queue (oldest first): {body}\nNext victim: frame {system.next_victim()}"
