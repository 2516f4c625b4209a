"""Dispatch of provider tool calls to registered tools."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from flowbuilder.logging import get_logger
from flowbuilder.tools.base import Tool, ToolResult


def _parse_arguments(raw: str | Mapping[str, Any] | None) -> dict[str, Any]:
    # OpenAI sends arguments as JSON text, Anthropic as an object.
    if raw is None or raw == "":
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Tool arguments must be a JSON object")
    return parsed


class ToolExecutor:
    """Holds the tools offered to a model and runs the calls it makes.

    Example:
        >>> executor = ToolExecutor([builder.as_tool()])
        >>> result = await executor.execute("workflow_builder", {"action": "list"})
        >>> result.result["total"]
        3
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {tool.name: tool for tool in tools}

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    async def execute(
        self,
        name: str,
        arguments: str | Mapping[str, Any] | None = None,
        tool_call_id: str | None = None,
    ) -> ToolResult:
        """Run one tool call.

        Args:
            name: Tool name chosen by the model.
            arguments: Call arguments, as a mapping or as JSON text.
            tool_call_id: Provider id echoed back in the result.

        Returns:
            ToolResult. Unknown tools and malformed arguments produce a
            failed result instead of an exception.
        """
        tool = self._tools.get(name)
        if tool is None:
            get_logger().warning("Unknown tool requested", tool=name)
            return ToolResult.failed(name, f"Tool '{name}' not found", tool_call_id)

        try:
            kwargs = _parse_arguments(arguments)
        except ValueError as e:
            get_logger().warning("Malformed tool arguments", tool=name, error=str(e))
            return ToolResult.failed(name, f"Invalid arguments: {e}", tool_call_id)

        return await tool.execute(tool_call_id=tool_call_id, **kwargs)

    async def execute_openai_calls(self, tool_calls: Iterable[Mapping[str, Any]]) -> list[ToolResult]:
        """Run ``message.tool_calls`` entries from a chat completion in order."""
        results = []
        for call in tool_calls:
            function = call.get("function", {})
            results.append(
                await self.execute(function.get("name", ""), function.get("arguments"), call.get("id"))
            )
        return results

    async def execute_anthropic_blocks(self, content: Iterable[Mapping[str, Any]]) -> list[ToolResult]:
        """Run the ``tool_use`` blocks of a messages API response in order."""
        results = []
        for block in content:
            if block.get("type") != "tool_use":
                continue
            results.append(await self.execute(block["name"], block.get("input"), block.get("id")))
        return results

    def to_openai_tools(self) -> list[dict[str, Any]]:
        return [tool.to_openai_schema() for tool in self._tools.values()]

    def to_anthropic_tools(self) -> list[dict[str, Any]]:
        return [tool.to_anthropic_schema() for tool in self._tools.values()]
