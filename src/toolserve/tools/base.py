"""ToolDefinition protocol: the interface every registered tool satisfies.

The registry and the server only ever talk to tools through this protocol.
:class:`FunctionTool` is the stock implementation wrapping a plain callable;
any other object exposing the same methods registers just as well.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from toolserve.schema.argument_schema import ArgumentSchema


@runtime_checkable
class ToolDefinition(Protocol):
    """A named, schema-described, independently invocable capability."""

    def name(self) -> str: ...

    def description(self) -> str: ...

    def argument_schema(self) -> ArgumentSchema | None:
        """Schema for ``arguments``; ``None`` accepts any object."""
        ...

    def annotations(self) -> Mapping[str, Any] | None:
        """Presentation hints (``title``, ``read_only_hint``, ...), passed through as-is."""
        ...

    def invoke(self, arguments: dict[str, Any]) -> Any:
        """Run the tool with already-validated *arguments*."""
        ...


class ToolOutput(BaseModel):
    """What a tool call produced, plus metadata to attach to the response.

    Handlers may return one directly to set ``meta``; any other return
    value is wrapped with empty metadata.
    """

    content: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def wrap(cls, value: Any) -> ToolOutput:
        if isinstance(value, ToolOutput):
            return value
        return cls(content=value)


class FunctionTool:
    """A tool backed by a callable taking keyword arguments.

    Usage::

        schema = ArgumentSchema()
        schema.required("name").filled("string").describe("User name")

        greet = FunctionTool(
            "greet",
            lambda name: f"Hello, {name}!",
            description="Greets a user",
            schema=schema,
            annotations={"read_only_hint": True},
        )
    """

    def __init__(
        self,
        name: str,
        handler: Callable[..., Any],
        *,
        description: str = "",
        schema: ArgumentSchema | None = None,
        annotations: Mapping[str, Any] | None = None,
    ) -> None:
        self._name = name
        self._handler = handler
        self._description = description
        self._schema = schema
        self._annotations = dict(annotations) if annotations else None

    def __repr__(self) -> str:
        return f"FunctionTool({self._name!r})"

    def name(self) -> str:
        return self._name

    def description(self) -> str:
        return self._description

    def argument_schema(self) -> ArgumentSchema | None:
        return self._schema

    def annotations(self) -> Mapping[str, Any] | None:
        return self._annotations

    def invoke(self, arguments: dict[str, Any]) -> Any:
        return self._handler(**arguments)


def tool(
    name: str | None = None,
    *,
    description: str | None = None,
    schema: ArgumentSchema | None = None,
    annotations: Mapping[str, Any] | None = None,
) -> Callable[[Callable[..., Any]], FunctionTool]:
    """Decorator turning a function into a :class:`FunctionTool`.

    The name defaults to the function name with underscores replaced by
    dashes, the description to the first paragraph of its docstring.
    """

    def decorator(fn: Callable[..., Any]) -> FunctionTool:
        doc = inspect.getdoc(fn) or ""
        return FunctionTool(
            name or fn.__name__.replace("_", "-"),
            fn,
            description=description if description is not None else doc.split("\n\n", 1)[0],
            schema=schema,
            annotations=annotations,
        )

    return decorator


def render_annotations(annotations: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Translate annotation keys to wire naming (``read_only_hint`` -> ``readOnlyHint``).

    Returns ``None`` for an empty or missing set so the key can be omitted.
    """
    if not annotations:
        return None
    return {to_camel(key): value for key, value in annotations.items()}
