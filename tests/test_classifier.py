"""Tests for the zero-value classifier."""

from __future__ import annotations

import pytest

from protofilter.codegen import (
    FieldKind,
    FieldSpec,
    ZeroValue,
    build_zero_value_stmt,
    classify,
    needs_redaction,
    zero_value_literal,
)


@pytest.mark.parametrize(
    ("field", "expected"),
    [
        (FieldSpec(name="MyString", kind=FieldKind.STRING), 'x.MyString = ""'),
        (FieldSpec(name="MyBytes", kind=FieldKind.BYTES), 'x.MyBytes = b""'),
        (FieldSpec(name="MyInt", kind=FieldKind.NUMERIC), "x.MyInt = 0"),
        (FieldSpec(name="MyEnum", kind=FieldKind.ENUM), "x.MyEnum = 0"),
        (FieldSpec(name="MyBool", kind=FieldKind.BOOL), "x.MyBool = False"),
        (
            FieldSpec(name="MyList", kind=FieldKind.STRING, is_list=True),
            'x.ClearField("MyList")',
        ),
        (
            FieldSpec(name="MyMap", kind=FieldKind.MESSAGE, is_map=True),
            'x.ClearField("MyMap")',
        ),
        (FieldSpec(name="MyMessage", kind=FieldKind.MESSAGE), 'x.ClearField("MyMessage")'),
        (
            FieldSpec(name="MyOptional", kind=FieldKind.STRING, has_optional_keyword=True),
            'x.ClearField("MyOptional")',
        ),
        (
            FieldSpec(name="MyOneof", kind=FieldKind.STRING, oneof="choice"),
            'x.ClearField("MyOneof")',
        ),
    ],
    ids=["string", "bytes", "int", "enum", "bool", "list", "map", "message", "optional", "oneof"],
)
def test_build_zero_value_stmt(field: FieldSpec, expected: str) -> None:
    assert build_zero_value_stmt(field) == expected


@pytest.mark.parametrize("kind", [FieldKind.STRING, FieldKind.NUMERIC, FieldKind.BOOL])
def test_optional_and_oneof_override_scalar_defaults(kind: FieldKind) -> None:
    optional = FieldSpec(name="f", kind=kind, has_optional_keyword=True)
    member = FieldSpec(name="f", kind=kind, oneof="group")

    assert classify(optional) is ZeroValue.ABSENT
    assert classify(member) is ZeroValue.ABSENT
    assert zero_value_literal(optional) == "None"


@pytest.mark.parametrize("kind", list(FieldKind))
def test_list_and_map_take_precedence_over_kind(kind: FieldKind) -> None:
    assert classify(FieldSpec(name="f", kind=kind, is_list=True)) is ZeroValue.ABSENT
    assert classify(FieldSpec(name="f", kind=kind, is_map=True)) is ZeroValue.ABSENT


def test_every_kind_has_a_zero_value() -> None:
    literals = {kind: zero_value_literal(FieldSpec(name="f", kind=kind)) for kind in FieldKind}

    assert literals == {
        FieldKind.STRING: '""',
        FieldKind.BYTES: 'b""',
        FieldKind.BOOL: "False",
        FieldKind.NUMERIC: "0",
        FieldKind.ENUM: "0",
        FieldKind.MESSAGE: "None",
    }


def test_needs_redaction_only_when_annotated() -> None:
    assert needs_redaction(FieldSpec(name="f", kind=FieldKind.STRING, permission="p"))
    assert not needs_redaction(FieldSpec(name="f", kind=FieldKind.STRING))


def test_keyword_field_names_use_setattr() -> None:
    field = FieldSpec(name="from", kind=FieldKind.STRING)

    assert build_zero_value_stmt(field) == 'setattr(x, "from", "")'
    assert build_zero_value_stmt(FieldSpec(name="class", kind=FieldKind.MESSAGE)) == (
        'x.ClearField("class")'
    )


def test_custom_receiver() -> None:
    field = FieldSpec(name="count", kind=FieldKind.NUMERIC)

    assert build_zero_value_stmt(field, receiver="msg") == "msg.count = 0"
