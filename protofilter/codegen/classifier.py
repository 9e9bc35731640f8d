"""Zero-value policy for redacted fields.

Every field category maps to exactly one zero value:

- string → ``""``, bytes → ``b""``
- numeric and enum → ``0``, bool → ``False``
- list, map and singular message → absent
- explicit ``optional`` and oneof members → absent, whatever the scalar kind

List and map detection wins over the value kind; optional and oneof
membership win over the scalar default. Absent fields are cleared with
``ClearField`` since protobuf messages cannot hold ``None``.
"""

from __future__ import annotations

import keyword
from enum import Enum

from protofilter.codegen.model import FieldKind, FieldSpec


class ZeroValue(str, Enum):
    """Cleared state of a field, valued by its Python literal."""

    EMPTY_STRING = '""'
    EMPTY_BYTES = 'b""'
    ZERO = "0"
    FALSE = "False"
    ABSENT = "None"


_SCALAR_ZERO: dict[FieldKind, ZeroValue] = {
    FieldKind.STRING: ZeroValue.EMPTY_STRING,
    FieldKind.BYTES: ZeroValue.EMPTY_BYTES,
    FieldKind.BOOL: ZeroValue.FALSE,
    FieldKind.NUMERIC: ZeroValue.ZERO,
    FieldKind.ENUM: ZeroValue.ZERO,
    FieldKind.MESSAGE: ZeroValue.ABSENT,
}


def needs_redaction(field: FieldSpec) -> bool:
    """Return True when ``field`` carries a permission annotation."""
    return field.permission is not None


def classify(field: FieldSpec) -> ZeroValue:
    """Return the zero value used to redact ``field``."""
    if field.is_list or field.is_map:
        return ZeroValue.ABSENT
    if field.has_optional_keyword or field.oneof is not None:
        return ZeroValue.ABSENT
    return _SCALAR_ZERO[field.kind]


def zero_value_literal(field: FieldSpec) -> str:
    """Return the Python literal for the cleared state of ``field``."""
    return classify(field).value


def build_zero_value_stmt(field: FieldSpec, receiver: str = "x") -> str:
    """Render the statement that clears ``field`` on ``receiver``.

    Example:
        >>> build_zero_value_stmt(FieldSpec(name="MyString", kind=FieldKind.STRING))
        'x.MyString = ""'
    """
    zero = classify(field)
    if zero is ZeroValue.ABSENT:
        return f'{receiver}.ClearField("{field.name}")'
    if keyword.iskeyword(field.name):
        return f'setattr({receiver}, "{field.name}", {zero.value})'
    return f"{receiver}.{field.name} = {zero.value}"
