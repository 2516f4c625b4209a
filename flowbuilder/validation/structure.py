"""Structural validation of a workflow graph.

Checks the shape of the graph, not its configuration:

- exactly one Input and one Output node (errors)
- no cycles (error)
- every node reachable from the Input node, Note nodes exempt (warning)
- every node except Output and Note has an outgoing edge (warning)
- size heuristics (suggestions)
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from flowbuilder.core.graph import WorkflowGraph
from flowbuilder.core.types import NodeKind, WorkflowEdge, WorkflowNode

DEFAULT_MAX_NODES = 20
DEFAULT_MAX_LLM_NODES = 5


class StructureStats(BaseModel):
    total_nodes: int = Field(..., alias="totalNodes")
    total_edges: int = Field(..., alias="totalEdges")
    node_types: dict[str, int] = Field(default_factory=dict, alias="nodeTypes")
    reachable_nodes: int = Field(..., alias="reachableNodes")
    unreachable_nodes: int = Field(..., alias="unreachableNodes")

    model_config = ConfigDict(populate_by_name=True)


class StructureValidation(BaseModel):
    """Outcome of :func:`validate_structure`.

    Only ``errors`` affect ``is_valid``; warnings and suggestions are advice.
    """

    is_valid: bool = Field(..., alias="isValid")
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    stats: StructureStats

    model_config = ConfigDict(populate_by_name=True)


def _count_check(count: int, kind: str) -> str | None:
    if count == 0:
        return f"Workflow must have exactly one {kind} node"
    if count > 1:
        return f"Workflow can only have one {kind} node"
    return None


def validate_structure(
    nodes: Iterable[WorkflowNode | dict[str, Any]],
    edges: Iterable[WorkflowEdge | dict[str, Any]],
    *,
    max_nodes: int = DEFAULT_MAX_NODES,
    max_llm_nodes: int = DEFAULT_MAX_LLM_NODES,
) -> StructureValidation:
    """Validate the shape of a workflow graph.

    Args:
        nodes: Workflow nodes (models or raw mappings).
        edges: Workflow edges (models or raw mappings).
        max_nodes: Node count above which splitting is suggested.
        max_llm_nodes: LLM node count above which cost is flagged.

    Returns:
        Errors, warnings, suggestions and graph statistics.
    """
    graph = WorkflowGraph(nodes, edges)
    errors: list[str] = []
    warnings: list[str] = []
    suggestions: list[str] = []

    for kind, label in ((NodeKind.INPUT, "Input"), (NodeKind.OUTPUT, "Output")):
        problem = _count_check(len(graph.nodes_of_kind(kind)), label)
        if problem:
            errors.append(problem)

    input_node = graph.find_input_node()
    reachable = graph.reachable_from(input_node.id) if input_node else set()

    unreachable = [
        n for n in graph.nodes
        if n.id not in reachable and n.kind != NodeKind.NOTE
    ]
    if unreachable:
        warnings.append(
            f"Unreachable nodes detected: {', '.join(n.label for n in unreachable)}"
        )

    dead_ends = [
        n for n in graph.nodes
        if not graph.has_outgoing(n.id) and n.kind not in (NodeKind.OUTPUT, NodeKind.NOTE)
    ]
    if dead_ends:
        warnings.append(
            f"Nodes without outgoing edges: {', '.join(n.label for n in dead_ends)}"
        )

    if graph.has_cycle():
        errors.append("Circular dependency detected in workflow")

    if len(graph) > max_nodes:
        suggestions.append(
            "Consider breaking down large workflows into smaller, more manageable pieces"
        )
    if len(graph.nodes_of_kind(NodeKind.LLM)) > max_llm_nodes:
        suggestions.append(
            "Consider optimizing LLM usage - multiple LLM calls can be expensive"
        )

    return StructureValidation(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
        stats=StructureStats(
            total_nodes=len(graph.nodes),
            total_edges=len(graph.edges),
            node_types=dict(Counter(n.kind.value for n in graph.nodes)),
            reachable_nodes=len(reachable),
            unreachable_nodes=len(unreachable),
        ),
    )
