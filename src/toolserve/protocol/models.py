"""JSON-RPC 2.0 messages as exchanged with MCP clients.

Implements the envelope used for tool discovery (``tools/list``) and
execution (``tools/call``), plus the fixed error codes clients key on.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, field_validator

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"

# Error codes are part of the wire contract; do not renumber.
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Strict so ids are echoed exactly as sent; `true` is not an id.
RequestId = StrictInt | StrictFloat | StrictStr | None

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """An inbound request or notification.

    ``id`` is ``None`` for notifications. ``params`` stays a raw mapping;
    each method handler interprets its own parameters.
    """

    model_config = ConfigDict(extra="ignore")

    jsonrpc: StrictStr
    method: StrictStr
    id: RequestId = None
    params: dict[str, Any] = {}

    @field_validator("params", mode="before")
    @classmethod
    def _null_params(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            wire["data"] = self.data
        return wire


class JsonRpcResponse(BaseModel):
    """A successful JSON-RPC 2.0 response."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    result: Any = None

    def to_wire(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "result": self.result}


class JsonRpcErrorResponse(BaseModel):
    """A failed JSON-RPC 2.0 response; ``id`` is ``None`` when unknown."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    error: JsonRpcError

    def to_wire(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "error": self.error.to_wire()}
