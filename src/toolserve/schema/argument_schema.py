"""Declarative description of a tool's expected input.

A schema is built with a small chaining API and serves two purposes:
validating the ``arguments`` of a ``tools/call`` request and rendering the
``inputSchema`` returned by ``tools/list``.

Usage::

    schema = ArgumentSchema()
    schema.required("name").filled("string").describe("User name")
    schema.optional("limit").value("integer")

    user = schema.required("user").object()
    user.required("first_name").filled("string")
    user.required("last_name").filled("string")

Validation is delegated to a pydantic model compiled from the field tree.
It only accepts or rejects; the returned argument set holds the caller's
own values for the declared keys.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    conlist,
    create_model,
)

from toolserve.errors import ArgumentValidationError
from toolserve.schema.types import SCALAR_VALIDATORS, FieldType, coerce_field_type


class FieldSpec:
    """A single declared field. Builder methods return ``self`` so calls chain."""

    def __init__(self, key: str, *, required: bool, owner: ArgumentSchema) -> None:
        self.key = key
        self.required = required
        self.field_type: FieldType | None = None
        self.non_empty = False
        self.nullable = False
        self.description: str | None = None
        self.items: FieldType | None = None
        self.children: ArgumentSchema | None = None
        self._owner = owner

    def __repr__(self) -> str:
        kind = self.field_type.value if self.field_type else "any"
        flag = "required" if self.required else "optional"
        return f"FieldSpec({self.key!r}, {kind}, {flag})"

    def filled(self, field_type: FieldType | str = FieldType.STRING) -> FieldSpec:
        """Typed value that must also be non-empty (strings, arrays and objects)."""
        self._set_type(field_type)
        self.non_empty = True
        return self

    def value(self, field_type: FieldType | str) -> FieldSpec:
        """Typed value; ``null`` is rejected."""
        self._set_type(field_type)
        return self

    def maybe(self, field_type: FieldType | str) -> FieldSpec:
        """Typed value that may also be ``null``."""
        self._set_type(field_type)
        self.nullable = True
        return self

    def array(self, items: FieldType | str | None = None, *, filled: bool = False) -> FieldSpec:
        self._set_type(FieldType.ARRAY)
        self.items = coerce_field_type(items) if items is not None else None
        self.non_empty = filled
        return self

    def object(self) -> ArgumentSchema:
        """Declare a nested object and return its (empty) child schema."""
        self._set_type(FieldType.OBJECT)
        self.children = ArgumentSchema(parent=self._owner)
        return self.children

    # dry-schema style alias
    hash = object

    def describe(self, text: str) -> FieldSpec:
        self.description = text
        self._owner.invalidate()
        return self

    def _set_type(self, field_type: FieldType | str) -> None:
        self.field_type = coerce_field_type(field_type)
        self._owner.invalidate()

    # -- wire rendering ------------------------------------------------------

    def to_wire(self, *, include_description: bool) -> dict[str, Any]:
        wire: dict[str, Any] = {}
        if self.field_type is FieldType.OBJECT and self.children is not None:
            # Nested fields never carry their descriptions.
            wire = self.children.render(include_descriptions=False)
        elif self.field_type is not None:
            wire["type"] = self.field_type.value
            if self.field_type is FieldType.ARRAY and self.items is not None:
                wire["items"] = {"type": self.items.value}
        if include_description and self.description:
            wire["description"] = self.description
        return wire

    # -- validation ----------------------------------------------------------

    def annotation(self) -> Any:
        base: Any
        if self.field_type is None:
            base = Any
        elif self.field_type is FieldType.OBJECT:
            base = self.children.compile() if self.children is not None else dict[str, Any]
            if self.non_empty:
                base = Annotated[base, BeforeValidator(_require_filled_object)]
        elif self.field_type is FieldType.ARRAY:
            item = SCALAR_VALIDATORS.get(self.items, Any) if self.items else Any
            base = conlist(item, min_length=1) if self.non_empty else list[item]
        else:
            base = SCALAR_VALIDATORS[self.field_type]
            if self.non_empty and self.field_type is FieldType.STRING:
                base = Annotated[base, StringConstraints(min_length=1)]
        if self.nullable:
            base = Optional[base]
        return base


def _require_filled_object(value: Any) -> Any:
    if isinstance(value, Mapping) and not value:
        msg = "Dictionary should have at least 1 item"
        raise ValueError(msg)
    return value


class ArgumentSchema:
    """An ordered tree of :class:`FieldSpec`."""

    def __init__(self, *, parent: ArgumentSchema | None = None) -> None:
        self._fields: dict[str, FieldSpec] = {}
        self._parent = parent
        self._model: type[BaseModel] | None = None

    @classmethod
    def build(cls, fn: Callable[[ArgumentSchema], object]) -> ArgumentSchema:
        """Create a schema and let *fn* declare its fields."""
        schema = cls()
        fn(schema)
        return schema

    def __repr__(self) -> str:
        return f"ArgumentSchema({list(self._fields.values())!r})"

    def __len__(self) -> int:
        return len(self._fields)

    @property
    def fields(self) -> list[FieldSpec]:
        return list(self._fields.values())

    def required(self, key: str) -> FieldSpec:
        return self._add(key, required=True)

    def optional(self, key: str) -> FieldSpec:
        return self._add(key, required=False)

    def _add(self, key: str, *, required: bool) -> FieldSpec:
        if not key:
            msg = "Field key must be a non-empty string"
            raise ValueError(msg)
        spec = FieldSpec(key, required=required, owner=self)
        self._fields[key] = spec
        self.invalidate()
        return spec

    def invalidate(self) -> None:
        """Drop the compiled validator here and in every enclosing schema."""
        self._model = None
        if self._parent is not None:
            self._parent.invalidate()

    # -- wire rendering ------------------------------------------------------

    def to_wire_schema(self) -> dict[str, Any]:
        """Render the ``inputSchema`` object for ``tools/list``."""
        return self.render(include_descriptions=True)

    def render(self, *, include_descriptions: bool) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                spec.key: spec.to_wire(include_description=include_descriptions)
                for spec in self._fields.values()
            },
            "required": [spec.key for spec in self._fields.values() if spec.required],
        }

    # -- validation ----------------------------------------------------------

    def compile(self) -> type[BaseModel]:
        """Return (and cache) the pydantic model validating this schema."""
        if self._model is None:
            definitions: dict[str, Any] = {}
            for index, spec in enumerate(self._fields.values()):
                # Keys may not be valid identifiers, so fields are addressed by alias.
                if spec.required:
                    definitions[f"field_{index}"] = (spec.annotation(), Field(alias=spec.key))
                else:
                    definitions[f"field_{index}"] = (spec.annotation(), Field(default=None, alias=spec.key))
            self._model = create_model(
                "Arguments",
                __config__=ConfigDict(extra="ignore"),
                **definitions,
            )
        return self._model

    def validate(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        """Check *arguments* and return the declared subset of them.

        Raises:
            ArgumentValidationError: On the first missing, empty or mistyped field.
        """
        try:
            self.compile().model_validate(dict(arguments))
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "arguments"
            raise ArgumentValidationError(field, error["msg"]) from exc
        return {key: arguments[key] for key in self._fields if key in arguments}


def render_input_schema(schema: ArgumentSchema | None) -> dict[str, Any]:
    """Wire ``inputSchema`` for *schema*; tools without one accept any object."""
    if schema is None:
        return {"type": "object", "properties": {}}
    return schema.to_wire_schema()
