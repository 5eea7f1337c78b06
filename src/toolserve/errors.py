"""Shared error types for the request-handling core.

Every error that can surface on the wire carries the JSON-RPC ``code`` it is
reported with; the :class:`~toolserve.server.server.Server` turns them into
exactly one ``send_error`` call.
"""

from __future__ import annotations

from toolserve.protocol.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
)


class ToolserveError(Exception):
    """Base error for all toolserve failures."""


class RpcError(ToolserveError):
    """An error reported to the client as a JSON-RPC error object."""

    code: int = INTERNAL_ERROR


class ProtocolError(RpcError):
    """Unparsable JSON or a malformed envelope."""

    code = INVALID_REQUEST

    def __init__(self, message: str = "Invalid Request") -> None:
        super().__init__(message)


class MethodNotFoundError(RpcError):
    """The request named a method outside the dispatch table."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvocationError(RpcError):
    """A ``tools/call`` request could not be carried out."""

    code = INVALID_PARAMS


class MissingToolNameError(InvocationError):
    def __init__(self) -> None:
        super().__init__("Invalid params: missing tool name")


class InvalidArgumentsError(InvocationError):
    def __init__(self) -> None:
        super().__init__("Invalid params: arguments must be an object")


class ToolNotFoundError(InvocationError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class ArgumentValidationError(InvocationError):
    """Supplied arguments do not satisfy the tool's argument schema."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid arguments: {field}: {reason}")


class ToolExecutionError(InvocationError):
    """The tool's own handler failed."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Tool execution failed: {name}" + (f": {detail}" if detail else ""))


class ReservedMetadataError(ToolserveError):
    """A metadata map used a key with a reserved prefix."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Metadata key uses a reserved prefix: {key!r}")
