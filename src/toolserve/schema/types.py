"""Primitive field types understood by :class:`ArgumentSchema`."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import StrictBool, StrictFloat, StrictInt, StrictStr


class FieldType(str, Enum):
    """JSON Schema type names usable for argument fields."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


# Strict validators: "1" is not an integer, 1 is not a string.
SCALAR_VALIDATORS: dict[FieldType, Any] = {
    FieldType.STRING: StrictStr,
    FieldType.INTEGER: StrictInt,
    FieldType.NUMBER: StrictFloat,
    FieldType.BOOLEAN: StrictBool,
}


def coerce_field_type(value: FieldType | str) -> FieldType:
    try:
        return FieldType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in FieldType)
        msg = f"Unknown field type {value!r} (expected one of: {allowed})"
        raise ValueError(msg) from None
