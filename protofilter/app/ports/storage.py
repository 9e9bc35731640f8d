"""Storage port interface for generated output."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class StoragePort(Protocol):
    """Port interface for storage operations.

    Side effects: Reads/writes files (offline).
    """

    def read_bytes(self, path: Path) -> bytes:
        """Read a binary file such as a serialized descriptor set."""
        ...

    def write_text(self, path: Path, content: str) -> None:
        """Write ``content`` to ``path``, creating parent directories."""
        ...
