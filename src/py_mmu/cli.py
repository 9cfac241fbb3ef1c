"""Console entry point — run a paging simulation and print the results.

This is the ``py-mmu`` command.  It builds a memory system, fires a
batch of random virtual addresses at it, and prints one line per
translation followed by the statistics::

    $ py-mmu --accesses 5 --seed 1
    Virtual Address: 137 => Physical Address: 1 (fault)
    ...
    Memory Statistics:
    Page Faults: 5
    Hits: 0
    ...

The argument parsing and output assembly live in ``run()``, which
returns an exit code and writes to the given streams so it can be
tested without a subprocess.
"""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from py_mmu.config import ConfigError, MemoryConfig, load_config
from py_mmu.driver import (
    build_system,
    format_fifo,
    format_frames,
    format_page_table,
    format_statistics,
    format_translation,
    random_addresses,
)
from py_mmu.logging import Logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO

DEFAULT_ACCESSES = 20
LOG_CAPACITY = 1000
EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for ``py-mmu``."""
    parser = argparse.ArgumentParser(
        prog="py-mmu",
        description="Simulate demand paging with FIFO page replacement.",
    )
    parser.add_argument(
        "-n",
        "--accesses",
        type=int,
        default=DEFAULT_ACCESSES,
        help=f"number of random memory accesses (default {DEFAULT_ACCESSES})",
    )
    parser.add_argument("-s", "--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="JSON file with the memory geometry"
    )
    parser.add_argument(
        "--dump", action="store_true", help="print page table, frames and FIFO queue"
    )
    parser.add_argument("--log", action="store_true", help="print the MMU event log")
    parser.add_argument(
        "--check", action="store_true", help="verify paging invariants after every access"
    )
    return parser


def run(
    argv: Sequence[str] | None = None,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run one simulation and return the process exit code."""
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config is not None else MemoryConfig()
        if args.accesses < 0:
            msg = f"--accesses must not be negative, got {args.accesses}"
            raise ConfigError(msg)
    except ConfigError as e:
        print(f"py-mmu: {e}", file=err)
        return EXIT_CONFIG_ERROR

    # Content and traffic draw from separate streams of one seeded generator.
    rng = random.Random(args.seed)
    logger = Logger(capacity=LOG_CAPACITY)
    system = build_system(config, seed=rng.getrandbits(32), logger=logger)
    addresses = random_addresses(
        config.virtual_size, args.accesses, seed=rng.getrandbits(32)
    )
    print(config.describe(), file=out)

    try:
        for address in addresses:
            print(format_translation(system.access(address)), file=out)
            if args.check:
                system.check_invariants()

        print(file=out)
        print(format_statistics(system.stats()), file=out)

        if args.dump:
            for section in (
                format_page_table(system),
                format_frames(system),
                format_fifo(system),
            ):
                print(file=out)
                print(section, file=out)

        if args.log:
            print(file=out)
            for entry in logger.entries:
                print(entry, file=out)
    finally:
        system.shutdown()
    return EXIT_OK


def main() -> None:
    """Console script entry point for ``py-mmu``."""
    sys.exit(run())
