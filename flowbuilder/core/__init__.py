"""Core workflow graph model."""

from flowbuilder.core.config import RepositoryBackend, Settings, get_settings
from flowbuilder.core.graph import WorkflowGraph
from flowbuilder.core.types import (
    NodeConfig,
    NodeKind,
    Visibility,
    Workflow,
    WorkflowEdge,
    WorkflowIcon,
    WorkflowNode,
    WorkflowStructure,
    WorkflowSummary,
    parse_node_config,
)

__all__ = [
    "NodeConfig",
    "NodeKind",
    "RepositoryBackend",
    "Settings",
    "Visibility",
    "Workflow",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowIcon",
    "WorkflowNode",
    "WorkflowStructure",
    "WorkflowSummary",
    "get_settings",
    "parse_node_config",
]
