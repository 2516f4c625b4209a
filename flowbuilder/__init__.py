"""FlowBuilder - workflow graph model, validation, storage and LLM tool.

Example:
    >>> from flowbuilder import validate_structure
    >>> result = validate_structure(nodes, edges)
    >>> result.is_valid
    True
"""

from flowbuilder.core import (
    NodeKind,
    Settings,
    Visibility,
    Workflow,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    WorkflowStructure,
    get_settings,
)
from flowbuilder.errors import FlowBuilderError
from flowbuilder.repositories import (
    Database,
    IWorkflowRepository,
    RemoteWorkflowRepository,
    SqlWorkflowRepository,
    create_repository,
)
from flowbuilder.tools import StaticSessionProvider, ToolExecutor, WorkflowBuilder
from flowbuilder.validation import (
    is_valid_uuid,
    validate_data_flow,
    validate_structure,
    validate_uuid_format,
)

__version__ = "0.1.0"

__all__ = [
    "Database",
    "FlowBuilderError",
    "IWorkflowRepository",
    "NodeKind",
    "RemoteWorkflowRepository",
    "Settings",
    "SqlWorkflowRepository",
    "StaticSessionProvider",
    "ToolExecutor",
    "Visibility",
    "Workflow",
    "WorkflowBuilder",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "WorkflowStructure",
    "__version__",
    "create_repository",
    "get_settings",
    "is_valid_uuid",
    "validate_data_flow",
    "validate_structure",
    "validate_uuid_format",
]
