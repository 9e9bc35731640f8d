"""Resolved schema description consumed by the code generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FieldKind(str, Enum):
    """Underlying value kind of a field, independent of cardinality."""

    STRING = "string"
    BYTES = "bytes"
    BOOL = "bool"
    NUMERIC = "numeric"
    ENUM = "enum"
    MESSAGE = "message"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One field of a message with its permission annotation, if any."""

    name: str
    kind: FieldKind
    number: int = 0
    is_list: bool = False
    is_map: bool = False
    has_optional_keyword: bool = False
    oneof: str | None = None
    permission: str | None = None


@dataclass(frozen=True, slots=True)
class MessageSpec:
    """A message type; ``name`` is its dotted path inside the file."""

    name: str
    full_name: str
    fields: tuple[FieldSpec, ...] = ()

    @property
    def annotated_fields(self) -> tuple[FieldSpec, ...]:
        """Fields carrying a permission, in declaration order."""
        return tuple(f for f in self.fields if f.permission is not None)


@dataclass(frozen=True, slots=True)
class FileSpec:
    """A proto file and every message it declares, nested ones flattened."""

    name: str
    package: str = ""
    messages: tuple[MessageSpec, ...] = field(default_factory=tuple)

    @property
    def has_annotations(self) -> bool:
        return any(message.annotated_fields for message in self.messages)
