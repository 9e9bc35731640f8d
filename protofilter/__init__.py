"""protofilter - permission-based field redaction for Protocol Buffers.

A ``protoc`` plugin that generates Python filter modules, plus the runtime
registry and bit-set masks those modules use.
"""

__version__ = "0.1.0"
__author__ = "protofilter Contributors"

from protofilter.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
