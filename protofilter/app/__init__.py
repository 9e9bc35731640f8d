"""Application layer for protofilter.

Services orchestrate code generation; descriptor decoding and filesystem
access are delegated to adapters via port interfaces.
"""

__all__ = [
    "AnnotatedFieldRow",
    "GeneratorService",
]

from protofilter.app.generator_service import AnnotatedFieldRow, GeneratorService
