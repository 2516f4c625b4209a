"""Unit tests for the tool wrapper and executor."""

from __future__ import annotations

import json

import pytest
from pydantic import BaseModel

from flowbuilder.tools.base import Tool, ToolResult
from flowbuilder.tools.executor import ToolExecutor


class EchoInput(BaseModel):
    text: str
    times: int = 1


def echo(params: EchoInput) -> str:
    return params.text * params.times


async def async_echo(params: EchoInput) -> dict[str, str]:
    return {"echo": params.text}


def fail(params: EchoInput) -> None:
    raise RuntimeError("boom")


def _tool(func=echo, name: str = "echo") -> Tool:
    return Tool(name=name, description="Repeat text", input_model=EchoInput, func=func)


class TestToolResult:
    """Tests for ToolResult rendering."""

    def test_ok_keeps_call_id(self) -> None:
        result = ToolResult.ok("t", {"n": 1}, tool_call_id="call-1")

        assert result.success is True
        assert result.tool_call_id == "call-1"
        assert json.loads(result.content()) == {"n": 1}

    def test_failed_generates_id(self) -> None:
        result = ToolResult.failed("t", "bad")

        assert result.success is False
        assert result.tool_call_id
        assert json.loads(result.content()) == {"error": "bad"}

    def test_anthropic_block_marks_errors(self) -> None:
        ok = ToolResult.ok("t", "fine", tool_call_id="toolu_1").to_anthropic_block()
        bad = ToolResult.failed("t", "bad", tool_call_id="toolu_2").to_anthropic_block()

        assert ok == {"type": "tool_result", "tool_use_id": "toolu_1", "content": '"fine"'}
        assert bad["is_error"] is True

    def test_openai_message(self) -> None:
        message = ToolResult.ok("t", [1, 2], tool_call_id="call_7").to_openai_message()

        assert message == {"role": "tool", "tool_call_id": "call_7", "content": "[1, 2]"}


class TestTool:
    """Tests for Tool execution and schemas."""

    @pytest.mark.asyncio
    async def test_sync_function(self) -> None:
        result = await _tool().execute(text="ab", times=2)

        assert result.success is True
        assert result.result == "abab"

    @pytest.mark.asyncio
    async def test_async_function(self) -> None:
        tool = _tool(async_echo)

        assert tool.is_async is True
        result = await tool.execute(tool_call_id="call-3", text="hi")
        assert result.result == {"echo": "hi"}
        assert result.tool_call_id == "call-3"

    @pytest.mark.asyncio
    async def test_invalid_arguments(self) -> None:
        result = await _tool().execute(times="many")

        assert result.success is False
        assert result.error.startswith("Invalid arguments:")

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_result(self) -> None:
        result = await _tool(fail).execute(text="x")

        assert result.success is False
        assert result.error == "boom"

    def test_schemas(self) -> None:
        tool = _tool()

        openai = tool.to_openai_schema()
        anthropic = tool.to_anthropic_schema()

        assert openai["type"] == "function"
        assert openai["function"]["parameters"]["required"] == ["text"]
        assert set(anthropic["input_schema"]["properties"]) == {"text", "times"}
        assert "title" not in anthropic["input_schema"]


class TestToolExecutor:
    """Tests for ToolExecutor."""

    def test_register_rejects_duplicates(self) -> None:
        executor = ToolExecutor([_tool()])

        with pytest.raises(ValueError, match="already registered"):
            executor.register(_tool())
        assert "echo" in executor
        assert executor.tool_names == ["echo"]

    @pytest.mark.asyncio
    async def test_json_text_arguments(self) -> None:
        executor = ToolExecutor([_tool()])

        result = await executor.execute("echo", '{"text": "a", "times": 3}', "call-9")

        assert result.result == "aaa"
        assert result.tool_call_id == "call-9"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", ["{not json", "[1, 2]"])
    async def test_malformed_arguments(self, arguments: str) -> None:
        result = await ToolExecutor([_tool()]).execute("echo", arguments)

        assert result.success is False
        assert result.error.startswith("Invalid arguments:")

    @pytest.mark.asyncio
    async def test_unknown_tool(self) -> None:
        result = await ToolExecutor().execute("nope")

        assert result.success is False
        assert result.error == "Tool 'nope' not found"

    @pytest.mark.asyncio
    async def test_openai_tool_calls(self) -> None:
        executor = ToolExecutor([_tool()])
        calls = [
            {"id": "call_1", "type": "function", "function": {"name": "echo", "arguments": '{"text": "x"}'}},
            {"id": "call_2", "type": "function", "function": {"name": "other", "arguments": "{}"}},
        ]

        results = await executor.execute_openai_calls(calls)

        assert [r.tool_call_id for r in results] == ["call_1", "call_2"]
        assert [r.success for r in results] == [True, False]

    @pytest.mark.asyncio
    async def test_anthropic_tool_use_blocks(self) -> None:
        executor = ToolExecutor([_tool()])
        content = [
            {"type": "text", "text": "Let me check."},
            {"type": "tool_use", "id": "toolu_1", "name": "echo", "input": {"text": "y", "times": 2}},
        ]

        results = await executor.execute_anthropic_blocks(content)

        assert len(results) == 1
        assert results[0].result == "yy"

    def test_schema_exports(self) -> None:
        executor = ToolExecutor([_tool()])

        assert executor.to_openai_tools()[0]["function"]["name"] == "echo"
        assert executor.to_anthropic_tools()[0]["name"] == "echo"
