"""Resolve compiler descriptors into the code generator's schema model."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FieldOptions,
    FileDescriptorProto,
)
from google.protobuf.unknown_fields import UnknownFieldSet

from protofilter.app.ports import SchemaReaderPort
from protofilter.codegen.model import FieldKind, FieldSpec, FileSpec, MessageSpec
from protofilter.config import DEFAULT_PERMISSION_EXTENSION
from protofilter.errors import GenerationError, UnknownFileError

logger = logging.getLogger(__name__)

WIRETYPE_LENGTH_DELIMITED = 2

_KIND_BY_TYPE: dict[int, FieldKind] = {
    FieldDescriptorProto.TYPE_STRING: FieldKind.STRING,
    FieldDescriptorProto.TYPE_BYTES: FieldKind.BYTES,
    FieldDescriptorProto.TYPE_BOOL: FieldKind.BOOL,
    FieldDescriptorProto.TYPE_ENUM: FieldKind.ENUM,
    FieldDescriptorProto.TYPE_MESSAGE: FieldKind.MESSAGE,
    FieldDescriptorProto.TYPE_GROUP: FieldKind.MESSAGE,
}


def read_permission(options: FieldOptions, extension: int) -> str | None:
    """Return the permission stored in field option number ``extension``.

    The plugin does not import the options module, so the extension normally
    arrives as an unknown field. If some other import registered it, it shows
    up as a regular extension instead; both are handled.
    """
    for descriptor, value in options.ListFields():
        if descriptor.is_extension and descriptor.number == extension:
            return str(value)

    permission: str | None = None
    for unknown in UnknownFieldSet(options):
        if unknown.field_number != extension:
            continue
        if unknown.wire_type != WIRETYPE_LENGTH_DELIMITED:
            logger.warning("Ignoring non-string value for field option %d", extension)
            continue
        # Last occurrence wins, as with any singular protobuf field.
        try:
            permission = bytes(unknown.data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise GenerationError(f"Field option {extension} is not valid UTF-8") from exc
    return permission


class DescriptorSchemaAdapter(SchemaReaderPort):
    """Build :class:`FileSpec` values from ``FileDescriptorProto`` messages."""

    def __init__(self, extension: int = DEFAULT_PERMISSION_EXTENSION) -> None:
        self._extension = extension

    @property
    def extension(self) -> int:
        return self._extension

    def read_files(
        self,
        protos: Sequence[FileDescriptorProto],
        targets: Sequence[str],
    ) -> list[FileSpec]:
        by_name = {proto.name: proto for proto in protos}
        files = []
        for target in targets:
            proto = by_name.get(target)
            if proto is None:
                raise UnknownFileError(f"File to generate not found in request: {target}")
            files.append(self.read_file(proto))
        return files

    def read_file(self, proto: FileDescriptorProto) -> FileSpec:
        explicit_presence = proto.syntax in ("", "proto2")
        messages = tuple(
            self._walk(proto.message_type, proto.package, "", explicit_presence)
        )
        logger.debug("Read %s: %d message(s)", proto.name, len(messages))
        return FileSpec(name=proto.name, package=proto.package, messages=messages)

    def _walk(
        self,
        descriptors: Sequence[DescriptorProto],
        scope: str,
        prefix: str,
        explicit_presence: bool,
    ) -> Iterator[MessageSpec]:
        for descriptor in descriptors:
            if descriptor.options.map_entry:
                continue
            name = f"{prefix}{descriptor.name}"
            full_name = f"{scope}.{name}" if scope else name
            map_entries = {
                f".{full_name}.{nested.name}"
                for nested in descriptor.nested_type
                if nested.options.map_entry
            }
            fields = tuple(
                self._read_field(field, descriptor, map_entries, explicit_presence)
                for field in descriptor.field
            )
            yield MessageSpec(name=name, full_name=full_name, fields=fields)
            yield from self._walk(descriptor.nested_type, scope, f"{name}.", explicit_presence)

    def _read_field(
        self,
        field: FieldDescriptorProto,
        message: DescriptorProto,
        map_entries: set[str],
        explicit_presence: bool,
    ) -> FieldSpec:
        repeated = field.label == FieldDescriptorProto.LABEL_REPEATED
        is_map = repeated and field.type_name in map_entries
        optional = field.proto3_optional or (
            explicit_presence and field.label == FieldDescriptorProto.LABEL_OPTIONAL
        )
        oneof = None
        if field.HasField("oneof_index") and not field.proto3_optional:
            oneof = message.oneof_decl[field.oneof_index].name

        permission = None
        if field.HasField("options"):
            try:
                permission = read_permission(field.options, self._extension)
            except GenerationError as exc:
                raise GenerationError(f"{message.name}.{field.name}: {exc}") from exc

        return FieldSpec(
            name=field.name,
            kind=_KIND_BY_TYPE.get(field.type, FieldKind.NUMERIC),
            number=field.number,
            is_list=repeated and not is_map,
            is_map=is_map,
            has_optional_keyword=optional,
            oneof=oneof,
            permission=permission,
        )
