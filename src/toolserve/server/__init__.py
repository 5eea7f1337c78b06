"""Request dispatcher and its stdio transport."""

from toolserve.server.server import DEFAULT_CAPABILITIES, ResponseSink, Server, ToolErrorPolicy
from toolserve.server.transport import StdioTransport

__all__ = [
    "DEFAULT_CAPABILITIES",
    "ResponseSink",
    "Server",
    "StdioTransport",
    "ToolErrorPolicy",
]
