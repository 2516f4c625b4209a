"""Tool wrapper exposed to LLM providers."""

from __future__ import annotations

import inspect
import json
from typing import Any, Awaitable, Callable
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ToolResult(BaseModel):
    """Outcome of one tool call, ready to be sent back to the model."""

    tool_call_id: str = Field(default_factory=lambda: str(uuid4()))
    tool_name: str
    success: bool
    result: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, tool_name: str, result: Any, tool_call_id: str | None = None) -> ToolResult:
        return cls(
            tool_call_id=tool_call_id or str(uuid4()),
            tool_name=tool_name,
            success=True,
            result=result,
        )

    @classmethod
    def failed(cls, tool_name: str, error: str, tool_call_id: str | None = None) -> ToolResult:
        return cls(
            tool_call_id=tool_call_id or str(uuid4()),
            tool_name=tool_name,
            success=False,
            error=error,
        )

    def content(self) -> str:
        """JSON text for the tool message of the next model turn."""
        if not self.success:
            return json.dumps({"error": self.error})
        return json.dumps(self.result, default=str)

    def to_anthropic_block(self) -> dict[str, Any]:
        block: dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": self.tool_call_id,
            "content": self.content(),
        }
        if not self.success:
            block["is_error"] = True
        return block

    def to_openai_message(self) -> dict[str, Any]:
        return {
            "role": "tool",
            "tool_call_id": self.tool_call_id,
            "content": self.content(),
        }


class Tool(BaseModel):
    """A callable whose arguments are described by a Pydantic model.

    Keyword arguments are validated into one ``input_model`` instance and
    handed to ``func``. The exported provider schemas are the model's JSON
    schema with aliases, so the model sees camelCase field names.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    input_model: type[BaseModel]
    func: Callable[[Any], Any] | Callable[[Any], Awaitable[Any]]

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.func)

    async def execute(self, tool_call_id: str | None = None, **kwargs: Any) -> ToolResult:
        """Validate ``kwargs`` and call the wrapped function.

        Validation failures and exceptions from ``func`` are returned as a
        failed :class:`ToolResult` rather than raised.
        """
        try:
            params = self.input_model.model_validate(kwargs)
        except ValidationError as e:
            return ToolResult.failed(self.name, f"Invalid arguments: {e}", tool_call_id)

        try:
            if self.is_async:
                result = await self.func(params)
            else:
                result = self.func(params)
        except Exception as e:
            return ToolResult.failed(self.name, str(e), tool_call_id)
        return ToolResult.ok(self.name, result, tool_call_id)

    def input_schema(self) -> dict[str, Any]:
        schema = self.input_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return schema

    def to_openai_schema(self) -> dict[str, Any]:
        """Function-calling definition for chat completions."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema(),
            },
        }

    def to_anthropic_schema(self) -> dict[str, Any]:
        """Tool definition for the messages API."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema(),
        }
