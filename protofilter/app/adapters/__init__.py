"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .descriptor import DescriptorSchemaAdapter, read_permission
from .storage import FileSystemStorageAdapter

__all__ = [
    "DescriptorSchemaAdapter",
    "FileSystemStorageAdapter",
    "read_permission",
]
