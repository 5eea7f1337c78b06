"""Tool layer: the tool interface and the registry."""

from toolserve.tools.base import FunctionTool, ToolDefinition, ToolOutput, render_annotations, tool
from toolserve.tools.registry import ToolRegistry

__all__ = [
    "FunctionTool",
    "ToolDefinition",
    "ToolOutput",
    "ToolRegistry",
    "render_annotations",
    "tool",
]
