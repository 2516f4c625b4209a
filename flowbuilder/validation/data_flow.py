"""Data flow validation: dangling edges, reachability and variable references."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from flowbuilder.core.graph import WorkflowGraph
from flowbuilder.core.types import NodeKind, WorkflowEdge, WorkflowNode
from flowbuilder.validation.references import extract_references, iter_message_contents


class DataFlowStats(BaseModel):
    total_nodes: int = Field(..., alias="totalNodes")
    total_edges: int = Field(..., alias="totalEdges")
    reachable_nodes: int = Field(..., alias="reachableNodes")
    unreachable_nodes: int = Field(..., alias="unreachableNodes")
    nodes_without_outgoing: int = Field(..., alias="nodesWithoutOutgoing")

    model_config = ConfigDict(populate_by_name=True)


class DataFlowValidation(BaseModel):
    """Outcome of :func:`validate_data_flow`. Any issue makes it invalid."""

    is_valid: bool = Field(..., alias="isValid")
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    data_flow_stats: DataFlowStats = Field(..., alias="dataFlowStats")

    model_config = ConfigDict(populate_by_name=True)


def _unrouted_branch_suggestions(graph: WorkflowGraph) -> list[str]:
    suggestions = []
    for node in graph.nodes_of_kind(NodeKind.CONDITION):
        try:
            unrouted = graph.unrouted_branches(node.id)
        except ValidationError:
            suggestions.append(f'Condition node "{node.label}" has an invalid branch configuration')
            continue
        if unrouted:
            suggestions.append(
                f'Condition node "{node.label}" has branches without edges: '
                f"{', '.join(unrouted)} (set sourceHandle to the branch id)"
            )
    return suggestions


def validate_data_flow(
    nodes: Iterable[WorkflowNode | dict[str, Any]],
    edges: Iterable[WorkflowEdge | dict[str, Any]],
) -> DataFlowValidation:
    """Check that data can actually flow through the graph.

    - every edge endpoint names an existing node
    - every node except Input and Note is reachable from the Input node
    - every ``{{nodeName.field}}`` in an LLM message names an existing
      node, matched by ``name`` or ``id``

    Nodes without outgoing edges and Condition branches without edges are
    reported as suggestions only.
    """
    graph = WorkflowGraph(nodes, edges)
    issues: list[str] = []
    suggestions: list[str] = []

    for edge in graph.edges:
        if edge.source not in graph:
            issues.append(f"Edge references non-existent source node: {edge.source}")
        if edge.target not in graph:
            issues.append(f"Edge references non-existent target node: {edge.target}")

    input_node = graph.find_input_node()
    reachable = graph.reachable_from(input_node.id) if input_node else set()

    unreachable = [
        n for n in graph.nodes
        if n.id not in reachable and n.kind not in (NodeKind.NOTE, NodeKind.INPUT)
    ]
    if unreachable:
        issues.append(
            f"Unreachable nodes detected: {', '.join(n.label for n in unreachable)}"
        )

    dead_ends = [
        n for n in graph.nodes
        if not graph.has_outgoing(n.id) and n.kind not in (NodeKind.OUTPUT, NodeKind.NOTE)
    ]
    if dead_ends:
        suggestions.append(
            "Consider connecting nodes without outgoing edges: "
            f"{', '.join(n.label for n in dead_ends)}"
        )

    suggestions.extend(_unrouted_branch_suggestions(graph))

    for llm_node in graph.nodes_of_kind(NodeKind.LLM):
        for content in iter_message_contents(llm_node):
            for reference in extract_references(content):
                if graph.node_by_ref(reference.node_ref) is None:
                    issues.append(
                        f'LLM node "{llm_node.label}" references non-existent node: '
                        f"{reference.node_ref}"
                    )

    return DataFlowValidation(
        is_valid=not issues,
        issues=issues,
        suggestions=suggestions,
        data_flow_stats=DataFlowStats(
            total_nodes=len(graph.nodes),
            total_edges=len(graph.edges),
            reachable_nodes=len(reachable),
            unreachable_nodes=len(unreachable),
            nodes_without_outgoing=len(dead_ends),
        ),
    )
