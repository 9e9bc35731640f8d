"""Port interfaces for the protofilter application layer.

Services depend on these protocols, never on concrete implementations.
"""

__all__ = [
    "SchemaReaderPort",
    "StoragePort",
]

from protofilter.app.ports.schema import SchemaReaderPort
from protofilter.app.ports.storage import StoragePort
