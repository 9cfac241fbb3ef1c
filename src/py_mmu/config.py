"""Memory geometry configuration.

A memory system is described by four numbers:

- **virtual_size** — bytes in the virtual address space.
- **physical_size** — bytes of simulated RAM.
- **page_size** — bytes per page (and per frame).
- **table_size** — hash buckets in the page table.  Defaults to the
  number of frames, since there are never more resident pages than
  frames.

The defaults reproduce the classic teaching setup: 1024 bytes of
virtual memory, 256 bytes of RAM and 4-byte pages, i.e. 256 pages
competing for 64 frames.

Configurations can also be read from a JSON file::

    {"virtual_size": 4096, "physical_size": 512, "page_size": 16}

Missing keys fall back to the defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

DEFAULT_VIRTUAL_SIZE = 1024
DEFAULT_PHYSICAL_SIZE = 256
DEFAULT_PAGE_SIZE = 4

_KEYS = ("virtual_size", "physical_size", "page_size", "table_size")


class ConfigError(ValueError):
    """Raise when a memory configuration is invalid or unreadable."""


@dataclass(frozen=True)
class MemoryConfig:
    """Immutable description of the memory geometry."""

    virtual_size: int = DEFAULT_VIRTUAL_SIZE
    physical_size: int = DEFAULT_PHYSICAL_SIZE
    page_size: int = DEFAULT_PAGE_SIZE
    table_size: int | None = None

    @property
    def num_pages(self) -> int:
        """Return the number of virtual pages."""
        return self.virtual_size // self.page_size

    @property
    def num_frames(self) -> int:
        """Return the number of physical frames."""
        return self.physical_size // self.page_size

    @property
    def buckets(self) -> int:
        """Return the effective page-table bucket count."""
        return self.num_frames if self.table_size is None else self.table_size

    def validate(self) -> MemoryConfig:
        """Check the geometry and return self.

        Raises:
            ConfigError: If a size is not a positive integer, or the
                page size does not divide both memory sizes.

        """
        for name in ("virtual_size", "physical_size", "page_size"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise ConfigError(msg)
        if self.table_size is not None and (not _is_int(self.table_size) or self.table_size <= 0):
            msg = f"table_size must be a positive integer, got {self.table_size!r}"
            raise ConfigError(msg)
        for name in ("virtual_size", "physical_size"):
            if getattr(self, name) % self.page_size:
                msg = f"page_size {self.page_size} does not divide {name} {getattr(self, name)}"
                raise ConfigError(msg)
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MemoryConfig:
        """Build a validated config from a dict, using defaults for missing keys.

        Raises:
            ConfigError: On unknown keys or an invalid geometry.

        """
        unknown = sorted(set(data) - set(_KEYS))
        if unknown:
            msg = f"Unknown config keys: {', '.join(unknown)}"
            raise ConfigError(msg)
        return cls(**{k: data[k] for k in _KEYS if k in data}).validate()

    def describe(self) -> str:
        """Return a one-line human-readable summary."""
        return (
            f"{self.virtual_size} B virtual ({self.num_pages} pages), "
            f"{self.physical_size} B physical ({self.num_frames} frames), "
            f"page size {self.page_size} B, {self.buckets} buckets"
        )


def load_config(path: Path) -> MemoryConfig:
    """Load a memory configuration from a JSON file.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object,
            or describes an invalid geometry.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load config: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"Config must be a JSON object, got {type(data).__name__}"
        raise ConfigError(msg)
    return MemoryConfig.from_mapping(data)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
