"""Argument schemas: validation of tool input and ``inputSchema`` rendering."""

from toolserve.schema.argument_schema import ArgumentSchema, FieldSpec, render_input_schema
from toolserve.schema.types import FieldType

__all__ = [
    "ArgumentSchema",
    "FieldSpec",
    "FieldType",
    "render_input_schema",
]
