"""Tests for the error hierarchy and the codes it carries."""

from __future__ import annotations

import pytest

from toolserve.errors import (
    ArgumentValidationError,
    InvalidArgumentsError,
    InvocationError,
    MethodNotFoundError,
    MissingToolNameError,
    ProtocolError,
    RpcError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolserveError,
)


class TestCodes:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ProtocolError(), -32600),
            (MethodNotFoundError("x"), -32601),
            (MissingToolNameError(), -32602),
            (InvalidArgumentsError(), -32602),
            (ToolNotFoundError("x"), -32602),
            (ArgumentValidationError("f", "bad"), -32602),
            (ToolExecutionError("x"), -32602),
            (RpcError("boom"), -32603),
        ],
    )
    def test_code(self, error: RpcError, code: int) -> None:
        assert error.code == code
        assert isinstance(error, ToolserveError)


class TestMessages:
    def test_protocol_error_default(self) -> None:
        assert str(ProtocolError()) == "Invalid Request"

    def test_method_not_found(self) -> None:
        err = MethodNotFoundError("tools/run")
        assert str(err) == "Method not found: tools/run"
        assert err.method == "tools/run"

    def test_tool_not_found(self) -> None:
        assert str(ToolNotFoundError("greet")) == "Tool not found: greet"

    def test_argument_validation(self) -> None:
        err = ArgumentValidationError("user.name", "Field required")
        assert str(err) == "Invalid arguments: user.name: Field required"
        assert err.field == "user.name"
        assert err.reason == "Field required"

    def test_execution_without_detail(self) -> None:
        assert str(ToolExecutionError("greet")) == "Tool execution failed: greet"

    def test_execution_with_detail(self) -> None:
        assert str(ToolExecutionError("greet", "boom")) == "Tool execution failed: greet: boom"

    def test_invocation_errors_share_a_base(self) -> None:
        for err in (MissingToolNameError(), ToolNotFoundError("x"), ToolExecutionError("x")):
            assert isinstance(err, InvocationError)
