"""Generator service: compiler request in, generated filter modules out.

A run is all-or-nothing. Any failure while reading parameters or resolving
files is reported through ``CodeGeneratorResponse.error`` and the response
then carries no files, so ``protoc`` fails the whole invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse
from google.protobuf.descriptor_pb2 import FileDescriptorSet
from google.protobuf.message import DecodeError
from pydantic import BaseModel

from protofilter.app.ports import SchemaReaderPort, StoragePort
from protofilter.codegen.classifier import classify
from protofilter.codegen.emitter import render_file
from protofilter.codegen.model import FileSpec
from protofilter.config import GeneratorOptions, Settings, get_settings
from protofilter.errors import GenerationError

logger = logging.getLogger(__name__)

SchemaReaderFactory = Callable[[int], SchemaReaderPort]


class AnnotatedFieldRow(BaseModel):
    """One annotated field as reported by ``protofilter inspect``."""

    file: str
    message: str
    field: str
    permission: str
    category: str
    zero_value: str


class GeneratorService:
    """Orchestrates descriptor resolution, emission and output."""

    def __init__(
        self,
        *,
        schema_reader_factory: SchemaReaderFactory,
        storage_port: StoragePort,
        settings: Settings | None = None,
    ) -> None:
        self._schema_reader_factory = schema_reader_factory
        self.storage = storage_port
        self._settings = settings or get_settings()

    def generate(self, request: CodeGeneratorRequest) -> CodeGeneratorResponse:
        """Produce the response for ``request`` without raising on bad input."""
        response = CodeGeneratorResponse()
        response.supported_features = CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

        try:
            options = GeneratorOptions.from_parameter(request.parameter, self._settings)
            reader = self._schema_reader_factory(options.extension)
            files = reader.read_files(request.proto_file, request.file_to_generate)
            rendered = [render_file(file, options) for file in files]
        except GenerationError as exc:
            logger.error("Generation failed: %s", exc)
            response.error = str(exc)
            return response

        for generated in rendered:
            if generated is None:
                continue
            out = response.file.add()
            out.name = generated.name
            out.content = generated.content

        logger.info(
            "Generated %d file(s) for %d requested file(s)",
            len(response.file),
            len(request.file_to_generate),
        )
        return response

    def generate_bytes(self, data: bytes) -> bytes:
        """Run the plugin protocol on a serialized request."""
        try:
            request = CodeGeneratorRequest.FromString(data)
        except DecodeError as exc:
            logger.error("Could not decode CodeGeneratorRequest: %s", exc)
            response = CodeGeneratorResponse(error=f"Invalid CodeGeneratorRequest: {exc}")
            return response.SerializeToString()
        return self.generate(request).SerializeToString()

    def load_descriptor_set(self, path: Path) -> FileDescriptorSet:
        """Read a ``FileDescriptorSet`` written by ``protoc --descriptor_set_out``.

        Raises:
            GenerationError: If the file is not a valid descriptor set.
        """
        try:
            return FileDescriptorSet.FromString(self.storage.read_bytes(path))
        except DecodeError as exc:
            raise GenerationError(f"Not a FileDescriptorSet: {path}") from exc

    def build_request(
        self,
        descriptor_set: FileDescriptorSet,
        *,
        targets: Sequence[str] = (),
        parameter: str = "",
    ) -> CodeGeneratorRequest:
        """Wrap a descriptor set in a request, as ``protoc`` would.

        Without explicit ``targets`` every file in the set is generated.
        """
        request = CodeGeneratorRequest(parameter=parameter)
        request.proto_file.extend(descriptor_set.file)
        request.file_to_generate.extend(targets or [f.name for f in descriptor_set.file])
        return request

    def write_response(self, response: CodeGeneratorResponse, output_dir: Path) -> list[Path]:
        """Write the files of a successful response below ``output_dir``.

        Raises:
            GenerationError: If the response carries an error.
        """
        if response.HasField("error"):
            raise GenerationError(response.error)

        written = []
        for generated in response.file:
            destination = output_dir / generated.name
            self.storage.write_text(destination, generated.content)
            written.append(destination)
        return written

    def read_files(self, descriptor_set: FileDescriptorSet, parameter: str = "") -> list[FileSpec]:
        options = GeneratorOptions.from_parameter(parameter, self._settings)
        reader = self._schema_reader_factory(options.extension)
        return reader.read_files(descriptor_set.file, [f.name for f in descriptor_set.file])

    def describe(self, files: Sequence[FileSpec]) -> list[AnnotatedFieldRow]:
        """List every annotated field with the zero value it is redacted to."""
        rows = []
        for file in files:
            for message in file.messages:
                for field in message.annotated_fields:
                    zero = classify(field)
                    rows.append(
                        AnnotatedFieldRow(
                            file=file.name,
                            message=message.full_name,
                            field=field.name,
                            permission=field.permission or "",
                            category=zero.name.lower(),
                            zero_value=zero.value,
                        )
                    )
        return rows
