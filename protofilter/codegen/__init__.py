"""Code generation: schema model, zero-value classifier and module emitter."""

from protofilter.codegen.classifier import (
    ZeroValue,
    build_zero_value_stmt,
    classify,
    needs_redaction,
    zero_value_literal,
)
from protofilter.codegen.emitter import (
    GeneratedFile,
    MessageUnit,
    emit_message,
    output_filename,
    render_file,
)
from protofilter.codegen.model import FieldKind, FieldSpec, FileSpec, MessageSpec

__all__ = [
    "FieldKind",
    "FieldSpec",
    "FileSpec",
    "GeneratedFile",
    "MessageSpec",
    "MessageUnit",
    "ZeroValue",
    "build_zero_value_stmt",
    "classify",
    "emit_message",
    "needs_redaction",
    "output_filename",
    "render_file",
    "zero_value_literal",
]
