"""Schema reader port interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from google.protobuf.descriptor_pb2 import FileDescriptorProto

from protofilter.codegen.model import FileSpec


class SchemaReaderPort(Protocol):
    """Port interface for turning compiler descriptors into the schema model."""

    def read_file(self, proto: FileDescriptorProto) -> FileSpec:
        """Resolve ``proto`` into a :class:`FileSpec` with permission annotations."""
        ...

    def read_files(
        self,
        protos: Sequence[FileDescriptorProto],
        targets: Sequence[str],
    ) -> list[FileSpec]:
        """Resolve the files named in ``targets``, in that order.

        Raises:
            UnknownFileError: If a target is not among ``protos``.
        """
        ...
