"""ToolRegistry: ordered name-to-tool map with validated invocation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from toolserve.errors import ToolExecutionError, ToolNotFoundError
from toolserve.tools.base import ToolDefinition, ToolOutput
from toolserve.utils.telemetry import ATTR_TOOL_NAME, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ToolRegistry:
    """Maintains registered tools in insertion order.

    Lookups are exact and case-sensitive. Registering a name that already
    exists replaces the earlier definition.

    Usage::

        registry = ToolRegistry()
        registry.register(greet)

        registry.list()                                  # [greet]
        output = registry.invoke("greet", {"name": "World"})
        output.content                                   # "Hello, World!"
    """

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self.register_all(tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(list(self._tools.values()))

    def register(self, tool: ToolDefinition) -> None:
        """Add *tool*, overwriting any tool with the same name."""
        name = tool.name()
        if not name:
            msg = "Tool name must be a non-empty string"
            raise ValueError(msg)
        if name in self._tools:
            logger.debug("Replacing registered tool %s", name)
        self._tools[name] = tool

    def register_all(self, tools: Iterable[ToolDefinition]) -> None:
        for tool in tools:
            self.register(tool)

    def unregister(self, name: str) -> bool:
        """Remove *name*; returns whether it was registered."""
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def lookup(self, name: str) -> ToolDefinition:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def list(self) -> list[ToolDefinition]:
        """All tools in registration order."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def invoke(self, name: str, arguments: dict[str, Any]) -> ToolOutput:
        """Validate *arguments* against the tool's schema and call it.

        Raises:
            ToolNotFoundError: *name* is not registered.
            ArgumentValidationError: *arguments* do not match the schema.
            ToolExecutionError: The tool's handler raised.
        """
        tool = self.lookup(name)
        schema = tool.argument_schema()
        validated = schema.validate(arguments) if schema is not None else dict(arguments)

        with _tracer.start_as_current_span("toolserve.tool.invoke") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                value = tool.invoke(validated)
            except Exception as exc:
                logger.exception("Tool %s raised during invocation", name)
                span.record_exception(exc)
                raise ToolExecutionError(name, str(exc)) from exc

        return ToolOutput.wrap(value)
