"""Server: parses inbound JSON-RPC text and routes it to method handlers.

Each call to :meth:`Server.handle_request` is one synchronous exchange: it
ends in exactly one call to :meth:`Server.send_result` or
:meth:`Server.send_error`, or in neither for notifications and for
responses arriving from the peer. No state survives between exchanges.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from toolserve.errors import (
    InvalidArgumentsError,
    InvocationError,
    MethodNotFoundError,
    MissingToolNameError,
    ProtocolError,
    RpcError,
)
from toolserve.metadata import format_meta_field, merge_meta_fields
from toolserve.protocol.models import (
    INTERNAL_ERROR,
    PROTOCOL_VERSION,
    JsonRpcError,
    JsonRpcErrorResponse,
    JsonRpcRequest,
    JsonRpcResponse,
    RequestId,
)
from toolserve.schema.argument_schema import render_input_schema
from toolserve.tools.base import ToolDefinition, render_annotations
from toolserve.tools.registry import ToolRegistry
from toolserve.utils.telemetry import ATTR_RPC_ERROR_CODE, ATTR_RPC_ID, ATTR_RPC_METHOD, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

ResponseSink = Callable[[dict[str, Any]], None]
"""Receives every envelope the server emits (e.g. to write it to stdout)."""

DEFAULT_CAPABILITIES: dict[str, Any] = {"tools": {"listChanged": False}}


class ToolErrorPolicy(str, Enum):
    """How argument-validation and handler failures in ``tools/call`` surface.

    ``protocol_error`` answers with a JSON-RPC ``-32602`` error;
    ``result`` answers with a normal result whose ``isError`` is true.
    """

    PROTOCOL_ERROR = "protocol_error"
    RESULT = "result"


class Server:
    """MCP-style tool server core.

    Usage::

        server = Server("demo", "1.0.0", sink=print)
        server.register_tool(greet)
        server.handle_request('{"jsonrpc": "2.0", "method": "ping", "id": 1}')
    """

    def __init__(
        self,
        name: str,
        version: str,
        *,
        registry: ToolRegistry | None = None,
        capabilities: Mapping[str, Any] | None = None,
        tool_error_policy: ToolErrorPolicy = ToolErrorPolicy.PROTOCOL_ERROR,
        metadata: Mapping[str, Any] | None = None,
        sink: ResponseSink | None = None,
    ) -> None:
        self.name = name
        self.version = version
        self.registry = registry if registry is not None else ToolRegistry()
        self.capabilities: dict[str, Any] = (
            dict(capabilities) if capabilities is not None else dict(DEFAULT_CAPABILITIES)
        )
        self.tool_error_policy = ToolErrorPolicy(tool_error_policy)
        # Attached to every successful tools/call; tool output meta wins on collisions.
        self.metadata: dict[str, Any] = dict(metadata) if metadata else {}
        self.sink = sink

        self._methods: dict[str, Callable[[JsonRpcRequest], dict[str, Any]]] = {
            "ping": self._handle_ping,
            "initialize": self._handle_initialize,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }
        self._notifications: dict[str, Callable[[JsonRpcRequest], None]] = {
            "notifications/initialized": self._handle_initialized,
        }

    @property
    def methods(self) -> list[str]:
        """Request methods this server answers."""
        return list(self._methods)

    @property
    def notifications(self) -> list[str]:
        """Notification methods this server acts on."""
        return list(self._notifications)

    @property
    def tools(self) -> Mapping[str, ToolDefinition]:
        """Read-only view of registered tools by name."""
        return MappingProxyType({tool.name(): tool for tool in self.registry.list()})

    def register_tool(self, tool: ToolDefinition) -> None:
        self.registry.register(tool)
        logger.debug("Registered tool %s", tool.name())

    def register_tools(self, *tools: ToolDefinition) -> None:
        for tool in tools:
            self.register_tool(tool)

    # ------------------------------------------------------------------
    # Output primitives
    # ------------------------------------------------------------------

    def send_result(
        self,
        result: dict[str, Any],
        id: RequestId,
        *,
        metadata: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Emit a result envelope; ``_meta`` is added only when non-empty."""
        payload = dict(result)
        meta = format_meta_field(metadata)
        if meta is not None:
            payload["_meta"] = meta
        return self._emit(JsonRpcResponse(id=id, result=payload).to_wire())

    def send_error(self, code: int, message: str, id: Any) -> dict[str, Any]:
        """Emit an error envelope; *id* is echoed as received, even when malformed."""
        error = JsonRpcError(code=code, message=message)
        return self._emit(JsonRpcErrorResponse(id=id, error=error).to_wire())

    def _emit(self, envelope: dict[str, Any]) -> dict[str, Any]:
        if self.sink is not None:
            self.sink(envelope)
        return envelope

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle_request(self, text: str | bytes) -> dict[str, Any] | None:
        """Process one inbound message.

        Returns the envelope that was emitted, or ``None`` when the message
        needed no reply.
        """
        try:
            message = json.loads(text)
        except (TypeError, ValueError):
            logger.warning("Rejected unparsable message")
            return self.send_error(ProtocolError.code, "Invalid Request", None)

        if not isinstance(message, dict):
            logger.warning("Rejected non-object message")
            return self.send_error(ProtocolError.code, "Invalid Request", None)

        if "method" not in message and ("result" in message or "error" in message):
            logger.debug("Ignoring response from peer (id=%r)", message.get("id"))
            return None

        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError:
            raw_id = message.get("id")
            logger.warning("Rejected malformed envelope (id=%r)", raw_id)
            return self.send_error(ProtocolError.code, "Invalid Request", raw_id)

        if request.is_notification:
            self._dispatch_notification(request)
            return None

        return self._dispatch(request)

    def _dispatch_notification(self, request: JsonRpcRequest) -> None:
        handler = self._notifications.get(request.method)
        if handler is None:
            logger.debug("Ignoring notification %s", request.method)
            return
        with _tracer.start_as_current_span("toolserve.notification") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            try:
                handler(request)
            except Exception:
                logger.exception("Notification handler for %s failed", request.method)

    def _dispatch(self, request: JsonRpcRequest) -> dict[str, Any]:
        with _tracer.start_as_current_span("toolserve.request") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            span.set_attribute(ATTR_RPC_ID, str(request.id))
            handler = self._methods.get(request.method)
            try:
                if handler is None:
                    raise MethodNotFoundError(request.method)
                return handler(request)
            except RpcError as exc:
                logger.info("Request %r (%s) failed: %s", request.id, request.method, exc)
                span.set_attribute(ATTR_RPC_ERROR_CODE, exc.code)
                return self.send_error(exc.code, str(exc), request.id)
            except Exception:
                logger.exception("Unhandled error while processing %s", request.method)
                span.set_attribute(ATTR_RPC_ERROR_CODE, INTERNAL_ERROR)
                return self.send_error(INTERNAL_ERROR, "Internal error", request.id)

    # ------------------------------------------------------------------
    # Method handlers
    # ------------------------------------------------------------------

    def _handle_ping(self, request: JsonRpcRequest) -> dict[str, Any]:
        return self.send_result({}, request.id)

    def _handle_initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        client = request.params.get("clientInfo")
        if isinstance(client, dict):
            logger.info("Client %s %s connected", client.get("name"), client.get("version"))
        return self.send_result(
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": self.capabilities,
                "serverInfo": {"name": self.name, "version": self.version},
            },
            request.id,
        )

    def _handle_initialized(self, request: JsonRpcRequest) -> None:
        logger.debug("Client finished initialization")

    def _handle_tools_list(self, request: JsonRpcRequest) -> dict[str, Any]:
        return self.send_result(
            {"tools": [self.render_tool(tool) for tool in self.registry.list()]},
            request.id,
        )

    def _handle_tools_call(self, request: JsonRpcRequest) -> dict[str, Any]:
        name = request.params.get("name")
        if not isinstance(name, str) or not name.strip():
            raise MissingToolNameError

        # Raises ToolNotFoundError before any argument handling.
        self.registry.lookup(name)

        arguments = request.params.get("arguments")
        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, dict):
            raise InvalidArgumentsError

        try:
            output = self.registry.invoke(name, arguments)
        except InvocationError as exc:
            if self.tool_error_policy is ToolErrorPolicy.RESULT:
                logger.info("Tool %s failed: %s", name, exc)
                return self.send_result(_text_result(str(exc), is_error=True), request.id, metadata={})
            raise

        metadata = merge_meta_fields(self.metadata, output.meta)
        return self.send_result(_text_result(stringify(output.content)), request.id, metadata=metadata)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @staticmethod
    def render_tool(tool: ToolDefinition) -> dict[str, Any]:
        """Wire description of *tool* as listed by ``tools/list``."""
        rendered: dict[str, Any] = {
            "name": tool.name(),
            "description": tool.description(),
            "inputSchema": render_input_schema(tool.argument_schema()),
        }
        annotations = render_annotations(tool.annotations())
        if annotations is not None:
            rendered["annotations"] = annotations
        return rendered


def stringify(value: Any) -> str:
    """Text form of a tool's return value for a ``text`` content part."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def _text_result(text: str, *, is_error: bool = False) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}
