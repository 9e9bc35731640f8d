"""Runtime support imported by generated filter modules."""

from protofilter.runtime.bitset import BitSet
from protofilter.runtime.filters import filter_fields, get_filter, register_filter
from protofilter.runtime.registry import (
    PermissionRegistry,
    lookup,
    mask_for,
    register,
    registry,
)

__all__ = [
    "BitSet",
    "PermissionRegistry",
    "filter_fields",
    "get_filter",
    "lookup",
    "mask_for",
    "register",
    "register_filter",
    "registry",
]
