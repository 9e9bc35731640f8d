"""Filesystem-backed storage port implementation."""

from __future__ import annotations

from pathlib import Path

from protofilter.app.ports import StoragePort


class FileSystemStorageAdapter(StoragePort):
    """Adapter that performs direct filesystem operations."""

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def write_text(self, path: Path, content: str) -> None:
        destination = Path(path)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(content, encoding="utf-8")
