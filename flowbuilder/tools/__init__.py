"""Tool framework and the workflow builder tool."""

from flowbuilder.tools.base import Tool, ToolResult
from flowbuilder.tools.executor import ToolExecutor
from flowbuilder.tools.session import SessionProvider, StaticSessionProvider
from flowbuilder.tools.workflow_builder import (
    ACTIONS,
    TOOL_NAME,
    WorkflowBuilder,
    WorkflowBuilderInput,
)

__all__ = [
    "ACTIONS",
    "SessionProvider",
    "StaticSessionProvider",
    "TOOL_NAME",
    "Tool",
    "ToolExecutor",
    "ToolResult",
    "WorkflowBuilder",
    "WorkflowBuilderInput",
]
