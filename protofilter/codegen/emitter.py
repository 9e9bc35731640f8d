"""Emit Python filter modules for permission-annotated messages.

For a proto file with at least one annotated field the emitter writes one
module containing:

1. an index slot per annotated field, ``_PERM_IDX_<Message>_<field>``;
2. ``_register_permissions()``, which registers each distinct permission once
   and stores the resulting index in its slots;
3. one ``filter_<message>(x, mask)`` function per qualifying message that
   clears every annotated field whose slot is missing from ``mask``;
4. a ``FILTERS`` table and ``filter_fields`` dispatcher.

Slots are filled when the module is imported, not at generation time: the
registry is shared with every other generated module loaded in the process,
so indices are only known at runtime.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, replace
from pathlib import PurePosixPath

from protofilter.codegen.classifier import build_zero_value_stmt, needs_redaction
from protofilter.codegen.model import FieldSpec, FileSpec, MessageSpec
from protofilter.config import GeneratorOptions

logger = logging.getLogger(__name__)

GENERATOR_NAME = "protoc-gen-pyfilter"
INDENT = "    "

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """Convert a dotted message path to a snake_case identifier.

    Example:
        >>> snake_case("Outer.HTTPRequest")
        'outer_http_request'
    """
    parts = (_CAMEL_BOUNDARY.sub("_", part) for part in name.split("."))
    return "_".join(parts).lower()


def slot_name(message: MessageSpec, field: FieldSpec) -> str:
    return f"_PERM_IDX_{message.name.replace('.', '_')}_{field.name}"


@dataclass(frozen=True, slots=True)
class FieldSlot:
    """An annotated field and the module global holding its index."""

    field: FieldSpec
    slot: str
    permission: str


@dataclass(frozen=True, slots=True)
class MessageUnit:
    """Generated surface for one message: slots plus its filter function."""

    message: MessageSpec
    function_name: str
    slots: tuple[FieldSlot, ...]

    def render_declarations(self) -> list[str]:
        return [f"{slot.slot} = -1" for slot in self.slots]

    def render_filter(self) -> list[str]:
        lines = [
            f"def {self.function_name}(x: Message, mask: BitSet) -> None:",
            f'{INDENT}"""Clear fields of {self.message.full_name} that ``mask`` does not grant."""',
        ]
        for slot in self.slots:
            lines.append(f"{INDENT}if not mask.has({slot.slot}):")
            lines.append(f"{INDENT * 2}{build_zero_value_stmt(slot.field)}")
        return lines


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    """Name and content of one emitted module."""

    name: str
    content: str


def emit_message(message: MessageSpec) -> MessageUnit | None:
    """Plan the generated surface for ``message``.

    Returns None when no field is annotated: such messages get no slots and
    no filter function.
    """
    slots = tuple(
        FieldSlot(field=field, slot=slot_name(message, field), permission=field.permission or "")
        for field in message.fields
        if needs_redaction(field)
    )
    if not slots:
        return None
    return MessageUnit(
        message=message,
        function_name=f"filter_{snake_case(message.name)}",
        slots=slots,
    )


def output_filename(file: FileSpec, options: GeneratorOptions) -> str:
    """Derive the generated module path for ``file``.

    ``testdata/test.proto`` becomes ``testdata/test_filter.py``. With
    ``paths=import`` the directory follows the proto package instead.
    """
    source = PurePosixPath(file.name)
    basename = f"{source.stem}{options.suffix}.py"
    if options.paths == "import" and file.package:
        return str(PurePosixPath(*file.package.split(".")) / basename)
    return str(source.with_name(basename))


def _claim(name: str, seen: set[str]) -> str:
    candidate = name
    counter = 2
    while candidate in seen:
        candidate = f"{name}_{counter}"
        counter += 1
    seen.add(candidate)
    return candidate


def _unique_units(units: list[MessageUnit]) -> list[MessageUnit]:
    """Give every function and slot a module-unique name.

    Distinct messages can flatten to the same identifier (``Outer.Inner`` and
    ``Outer_Inner``), and so can slots (``A.b_c`` and ``A_b.c``). Later
    claimants get a numeric suffix. ``filter_fields`` is taken by the
    dispatcher.
    """
    functions: set[str] = {"filter_fields"}
    slot_names: set[str] = set()
    result = []
    for unit in units:
        slots = tuple(replace(slot, slot=_claim(slot.slot, slot_names)) for slot in unit.slots)
        result.append(
            replace(unit, function_name=_claim(unit.function_name, functions), slots=slots)
        )
    return result


def _render_registration(units: list[MessageUnit]) -> list[str]:
    lines = ["def _register_permissions() -> None:"]
    for unit in units:
        lines.extend(f"{INDENT}global {slot.slot}" for slot in unit.slots)

    locals_by_permission: dict[str, str] = {}
    for unit in units:
        for slot in unit.slots:
            local = locals_by_permission.get(slot.permission)
            if local is None:
                local = f"perm_{len(locals_by_permission)}"
                locals_by_permission[slot.permission] = local
                lines.append(f"{INDENT}{local} = registry.register({json.dumps(slot.permission)})")
            lines.append(f"{INDENT}{slot.slot} = {local}")
    return lines


def render_file(file: FileSpec, options: GeneratorOptions) -> GeneratedFile | None:
    """Render the filter module for ``file``, or None if nothing is annotated."""
    units = _unique_units(
        [unit for unit in (emit_message(message) for message in file.messages) if unit]
    )
    if not units:
        logger.debug("Skipping %s: no annotated fields", file.name)
        return None

    lines = [
        f"# Code generated by {GENERATOR_NAME}. DO NOT EDIT.",
        f"# source: {file.name}",
        f'"""Permission filters for messages declared in {file.name}."""',
        "",
        "from google.protobuf.message import Message",
        "",
        f"from {options.runtime} import BitSet, register_filter, registry",
        "",
    ]
    for unit in units:
        lines.extend(unit.render_declarations())
    lines.extend(["", ""])
    lines.extend(_render_registration(units))

    for unit in units:
        lines.extend(["", ""])
        lines.extend(unit.render_filter())

    lines.extend(["", "", "FILTERS = {"])
    lines.extend(
        f"{INDENT}{json.dumps(unit.message.full_name)}: {unit.function_name}," for unit in units
    )
    lines.extend(
        [
            "}",
            "",
            "",
            "def filter_fields(x: Message, mask: BitSet) -> None:",
            f'{INDENT}"""Apply the filter for the type of ``x``, if this module defines one."""',
            f"{INDENT}func = FILTERS.get(x.DESCRIPTOR.full_name)",
            f"{INDENT}if func is not None:",
            f"{INDENT * 2}func(x, mask)",
            "",
            "",
            "_register_permissions()",
            "for _name, _func in FILTERS.items():",
            f"{INDENT}register_filter(_name, _func)",
            "",
        ]
    )

    name = output_filename(file, options)
    logger.info(
        "Generated %s with %d filter(s) and %d annotated field(s)",
        name,
        len(units),
        sum(len(unit.slots) for unit in units),
    )
    return GeneratedFile(name=name, content="\n".join(lines))
