"""Tests for ToolRegistry."""

from __future__ import annotations

import pytest

from toolserve.errors import ArgumentValidationError, ToolExecutionError, ToolNotFoundError
from toolserve.schema import ArgumentSchema
from toolserve.tools import FunctionTool, ToolOutput, ToolRegistry


def _echo(name: str = "echo") -> FunctionTool:
    schema = ArgumentSchema()
    schema.required("text").filled("string")
    return FunctionTool(name, lambda text: text, schema=schema)


class TestRegistration:
    def test_register_and_get(self) -> None:
        registry = ToolRegistry()
        t = _echo()
        registry.register(t)
        assert registry.get("echo") is t
        assert "echo" in registry
        assert len(registry) == 1

    def test_insertion_order(self) -> None:
        registry = ToolRegistry([_echo("b"), _echo("a"), _echo("c")])
        assert registry.names() == ["b", "a", "c"]
        assert [t.name() for t in registry] == ["b", "a", "c"]

    def test_reregistration_overwrites_in_place(self) -> None:
        first, second = _echo("x"), _echo("x")
        registry = ToolRegistry([first, _echo("y")])
        registry.register(second)
        assert registry.get("x") is second
        assert registry.names() == ["x", "y"]

    def test_lookup_is_case_sensitive(self) -> None:
        registry = ToolRegistry([_echo("Echo")])
        assert registry.get("echo") is None

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            ToolRegistry().register(FunctionTool("", lambda: None))

    def test_unregister(self) -> None:
        registry = ToolRegistry([_echo()])
        assert registry.unregister("echo") is True
        assert registry.unregister("echo") is False
        assert len(registry) == 0

    def test_lookup_missing(self) -> None:
        with pytest.raises(ToolNotFoundError, match="Tool not found: nope"):
            ToolRegistry().lookup("nope")

    def test_list_is_a_copy(self) -> None:
        registry = ToolRegistry([_echo()])
        registry.list().clear()
        assert len(registry) == 1


class TestInvoke:
    def test_invoke(self) -> None:
        output = ToolRegistry([_echo()]).invoke("echo", {"text": "hi"})
        assert output == ToolOutput(content="hi")

    def test_undeclared_arguments_not_passed(self) -> None:
        output = ToolRegistry([_echo()]).invoke("echo", {"text": "hi", "other": 1})
        assert output.content == "hi"

    def test_schemaless_tool_gets_arguments_as_is(self) -> None:
        registry = ToolRegistry([FunctionTool("kw", lambda **kwargs: sorted(kwargs))])
        assert registry.invoke("kw", {"b": 1, "a": 2}).content == ["a", "b"]

    def test_validation_failure(self) -> None:
        with pytest.raises(ArgumentValidationError, match="text"):
            ToolRegistry([_echo()]).invoke("echo", {"text": ""})

    def test_handler_not_called_on_invalid_arguments(self) -> None:
        calls: list[str] = []
        schema = ArgumentSchema()
        schema.required("text").filled()
        registry = ToolRegistry([FunctionTool("t", calls.append, schema=schema)])
        with pytest.raises(ArgumentValidationError):
            registry.invoke("t", {})
        assert calls == []

    def test_handler_failure_wrapped(self) -> None:
        def fail(text: str) -> str:
            raise KeyError(text)

        schema = ArgumentSchema()
        schema.required("text").filled()
        registry = ToolRegistry([FunctionTool("fail", fail, schema=schema)])
        with pytest.raises(ToolExecutionError) as exc_info:
            registry.invoke("fail", {"text": "k"})
        assert exc_info.value.name == "fail"
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_unknown_tool(self) -> None:
        with pytest.raises(ToolNotFoundError):
            ToolRegistry().invoke("missing", {})

    def test_output_meta_preserved(self) -> None:
        registry = ToolRegistry([FunctionTool("m", lambda: ToolOutput(content="x", meta={"a": 1}))])
        assert registry.invoke("m", {}).meta == {"a": 1}
