"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from google.protobuf import descriptor_pool, message_factory
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FieldOptions,
    FileDescriptorProto,
    FileDescriptorSet,
)

from protofilter.config import DEFAULT_PERMISSION_EXTENSION, Settings

F = FieldDescriptorProto


def _varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def encode_permission_options(
    permission: str | bytes, extension: int = DEFAULT_PERMISSION_EXTENSION
) -> FieldOptions:
    """FieldOptions carrying ``permission`` as protoc would serialize it.

    Raw bytes are written as given, which allows malformed payloads.
    """
    data = permission if isinstance(permission, bytes) else permission.encode("utf-8")
    raw = _varint((extension << 3) | 2) + _varint(len(data)) + data
    return FieldOptions.FromString(raw)


def add_field(
    message: DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    *,
    permission: str | None = None,
    label: int = F.LABEL_OPTIONAL,
    type_name: str | None = None,
    oneof_index: int | None = None,
    proto3_optional: bool = False,
) -> FieldDescriptorProto:
    field = message.field.add(name=name, number=number, type=field_type, label=label)
    if type_name is not None:
        field.type_name = type_name
    if oneof_index is not None:
        field.oneof_index = oneof_index
    if proto3_optional:
        field.proto3_optional = True
    if permission is not None:
        field.options.CopyFrom(encode_permission_options(permission))
    return field


def build_test_proto() -> FileDescriptorProto:
    proto = FileDescriptorProto(name="testdata/test.proto", package="test", syntax="proto3")

    message = proto.message_type.add(name="TestMessage")
    add_field(message, "PrivateField", 1, F.TYPE_STRING, permission="test.private")
    add_field(message, "SecretNumber", 2, F.TYPE_INT32, permission="test.private")
    add_field(message, "PublicField", 3, F.TYPE_STRING)

    other = proto.message_type.add(name="Test2Message")
    add_field(other, "Name", 1, F.TYPE_STRING)
    return proto


def build_optional_proto() -> FileDescriptorProto:
    proto = FileDescriptorProto(
        name="testdata/optional.proto", package="test.optional", syntax="proto3"
    )
    message = proto.message_type.add(name="OptionalMessage")
    add_field(
        message,
        "SecretOptional",
        1,
        F.TYPE_STRING,
        permission="test.optional",
        oneof_index=0,
        proto3_optional=True,
    )
    message.oneof_decl.add(name="_SecretOptional")
    return proto


def build_kitchen_sink_proto() -> FileDescriptorProto:
    """Every field category, a keyword field name and a nested message."""
    proto = FileDescriptorProto(name="demo/v1/account.proto", package="demo.v1", syntax="proto3")

    status = proto.enum_type.add(name="Status")
    status.value.add(name="STATUS_UNKNOWN", number=0)
    status.value.add(name="STATUS_ACTIVE", number=1)

    address = proto.message_type.add(name="Address")
    add_field(address, "city", 1, F.TYPE_STRING)

    account = proto.message_type.add(name="Account")
    add_field(account, "email", 1, F.TYPE_STRING, permission="account.email")
    add_field(account, "avatar", 2, F.TYPE_BYTES, permission="account.avatar")
    add_field(account, "admin", 3, F.TYPE_BOOL, permission="account.admin")
    add_field(
        account, "status", 4, F.TYPE_ENUM, permission="account.status", type_name=".demo.v1.Status"
    )
    add_field(account, "score", 5, F.TYPE_DOUBLE, permission="account.score")
    add_field(
        account, "tags", 6, F.TYPE_STRING, permission="account.tags", label=F.LABEL_REPEATED
    )
    add_field(
        account,
        "labels",
        7,
        F.TYPE_MESSAGE,
        permission="account.labels",
        label=F.LABEL_REPEATED,
        type_name=".demo.v1.Account.LabelsEntry",
    )
    add_field(
        account,
        "address",
        8,
        F.TYPE_MESSAGE,
        permission="account.address",
        type_name=".demo.v1.Address",
    )
    add_field(account, "phone", 9, F.TYPE_STRING, permission="account.phone", oneof_index=0)
    add_field(account, "fax", 10, F.TYPE_STRING, oneof_index=0)
    add_field(account, "from", 11, F.TYPE_STRING, permission="account.from")
    add_field(account, "display_name", 12, F.TYPE_STRING)
    account.oneof_decl.add(name="contact")

    entry = account.nested_type.add(name="LabelsEntry")
    entry.options.map_entry = True
    add_field(entry, "key", 1, F.TYPE_STRING)
    add_field(entry, "value", 2, F.TYPE_STRING)

    secret = account.nested_type.add(name="Secret")
    add_field(secret, "token", 1, F.TYPE_STRING, permission="account.token")
    return proto


@pytest.fixture
def test_proto() -> FileDescriptorProto:
    return build_test_proto()


@pytest.fixture
def optional_proto() -> FileDescriptorProto:
    return build_optional_proto()


@pytest.fixture
def kitchen_sink_proto() -> FileDescriptorProto:
    return build_kitchen_sink_proto()


@pytest.fixture
def descriptor_set() -> FileDescriptorSet:
    """Descriptor set with one annotated, one optional and one plain file."""
    plain = FileDescriptorProto(name="testdata/plain.proto", package="plain", syntax="proto3")
    add_field(plain.message_type.add(name="Plain"), "name", 1, F.TYPE_STRING)
    return FileDescriptorSet(file=[build_test_proto(), build_optional_proto(), plain])


@pytest.fixture
def message_classes() -> Callable[[FileDescriptorProto], dict[str, Any]]:
    """Build concrete message classes for a descriptor in a private pool."""

    def build(proto: FileDescriptorProto) -> dict[str, Any]:
        pool = descriptor_pool.DescriptorPool()
        pool.AddSerializedFile(proto.SerializeToString())
        file_descriptor = pool.FindFileByName(proto.name)
        classes: dict[str, Any] = {}

        def collect(descriptors: Any) -> None:
            for descriptor in descriptors:
                if descriptor.GetOptions().map_entry:
                    continue
                classes[descriptor.full_name] = message_factory.GetMessageClass(descriptor)
                collect(descriptor.nested_types)

        collect(file_descriptor.message_types_by_name.values())
        return classes

    return build


@pytest.fixture
def load_generated() -> Callable[[str, str], dict[str, Any]]:
    """Execute generated module source and return its namespace."""

    def load(content: str, name: str = "<generated>") -> dict[str, Any]:
        namespace: dict[str, Any] = {"__name__": name.replace("/", ".").removesuffix(".py")}
        exec(compile(content, name, "exec"), namespace)
        return namespace

    return load


@pytest.fixture
def override_settings() -> Generator[Settings, None, None]:
    """Provide isolated protofilter settings scoped to tests."""

    import protofilter.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(_env_file=None)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings
