"""toolserve: request-handling core for MCP-style tool servers."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from toolserve.schema.argument_schema import ArgumentSchema as ArgumentSchema
    from toolserve.server.server import Server as Server
    from toolserve.tools.base import FunctionTool as FunctionTool
    from toolserve.tools.base import tool as tool
    from toolserve.tools.registry import ToolRegistry as ToolRegistry

_EXPORTS = {
    "ArgumentSchema": "toolserve.schema.argument_schema",
    "Server": "toolserve.server.server",
    "FunctionTool": "toolserve.tools.base",
    "tool": "toolserve.tools.base",
    "ToolRegistry": "toolserve.tools.registry",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'toolserve' has no attribute {name!r}")
