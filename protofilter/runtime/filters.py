"""Process-wide table of generated redaction functions."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from protofilter.runtime.bitset import BitSet

logger = logging.getLogger(__name__)

FilterFunc = Callable[[Any, BitSet], None]

_lock = threading.Lock()
_filters: dict[str, FilterFunc] = {}


def register_filter(full_name: str, func: FilterFunc) -> None:
    """Record ``func`` as the redaction function for message ``full_name``.

    Called by generated modules at import. Re-importing a module replaces the
    previous entry.
    """
    with _lock:
        _filters[full_name] = func
    logger.debug("Registered filter for %s", full_name)


def get_filter(full_name: str) -> FilterFunc | None:
    """Return the redaction function for ``full_name`` if one is loaded."""
    with _lock:
        return _filters.get(full_name)


def filter_fields(message: Any, mask: BitSet) -> bool:
    """Redact ``message`` in place using whichever generated filter applies.

    Returns False when no loaded module defines a filter for the message
    type, which means none of its fields carry a permission.
    """
    func = get_filter(message.DESCRIPTOR.full_name)
    if func is None:
        return False
    func(message, mask)
    return True
