"""Process-wide mapping from permission identifiers to bit indices."""

from __future__ import annotations

import logging

from protofilter.runtime.bitset import BitSet
from protofilter.runtime.locking import ReadWriteLock

logger = logging.getLogger(__name__)


class PermissionRegistry:
    """Assign dense, stable indices to permission identifiers.

    Indices start at 0 and follow first-registration order. Once assigned an
    index never changes and is never reused; there is no removal. Generated
    modules register their permissions at import time, possibly from several
    threads, so reads share a lock and first registrations take it
    exclusively.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._ids: dict[str, int] = {}
        self._order: list[str] = []

    def register(self, permission: str) -> int:
        """Return the index for ``permission``, allocating one if needed."""
        with self._lock.read_locked():
            index = self._ids.get(permission)
        if index is not None:
            return index

        with self._lock.write_locked():
            # Another writer may have won between the two locks.
            index = self._ids.get(permission)
            if index is not None:
                return index
            index = len(self._order)
            self._ids[permission] = index
            self._order.append(permission)

        logger.debug("Registered permission %r as index %d", permission, index)
        return index

    def lookup(self, permission: str) -> tuple[int, bool]:
        """Return ``(index, True)`` for a known permission, else ``(-1, False)``."""
        with self._lock.read_locked():
            index = self._ids.get(permission)
        if index is None:
            return -1, False
        return index, True

    def permissions(self) -> list[str]:
        """Return registered identifiers ordered by index."""
        with self._lock.read_locked():
            return list(self._order)

    def __contains__(self, permission: object) -> bool:
        with self._lock.read_locked():
            return permission in self._ids

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._order)


registry = PermissionRegistry()
register = registry.register
lookup = registry.lookup


def mask_for(*permissions: str, registry: PermissionRegistry = registry) -> BitSet:
    """Build a mask granting ``permissions``.

    Identifiers are registered rather than looked up so a mask built before
    the generated module that uses them is imported still lines up.
    """
    return BitSet.from_indices(registry.register(permission) for permission in permissions)
