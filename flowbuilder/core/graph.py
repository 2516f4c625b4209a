"""Directed-graph view over workflow nodes and edges."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Any

from flowbuilder.core.types import (
    ConditionNodeConfig,
    NodeKind,
    WorkflowEdge,
    WorkflowNode,
    to_edge,
    to_node,
)


class WorkflowGraph:
    """Adjacency index over a workflow's nodes and edges.

    Edges may reference node ids that are not in the node list; they are
    kept in the index so traversal follows them, and data flow validation
    reports them.

    Example:
        >>> graph = WorkflowGraph(nodes, edges)
        >>> graph.reachable_from(graph.find_input_node().id)
        {'input', 'llm', 'output'}
    """

    def __init__(
        self,
        nodes: Iterable[WorkflowNode | dict[str, Any]],
        edges: Iterable[WorkflowEdge | dict[str, Any]],
    ) -> None:
        self.nodes: list[WorkflowNode] = [to_node(n) for n in nodes]
        self.edges: list[WorkflowEdge] = [to_edge(e) for e in edges]

        self._by_id: dict[str, WorkflowNode] = {n.id: n for n in self.nodes}
        self._outgoing: dict[str, list[WorkflowEdge]] = {n.id: [] for n in self.nodes}
        for edge in self.edges:
            self._outgoing.setdefault(edge.source, []).append(edge)

    def get(self, node_id: str) -> WorkflowNode | None:
        return self._by_id.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __len__(self) -> int:
        return len(self.nodes)

    def nodes_of_kind(self, kind: NodeKind) -> list[WorkflowNode]:
        return [n for n in self.nodes if n.kind == kind]

    def find_input_node(self) -> WorkflowNode | None:
        """First Input node, or None."""
        return next((n for n in self.nodes if n.kind == NodeKind.INPUT), None)

    def node_by_ref(self, ref: str) -> WorkflowNode | None:
        """Node whose name or id equals ``ref``."""
        return next((n for n in self.nodes if n.name == ref or n.id == ref), None)

    def outgoing(self, node_id: str, handle: str | None = None) -> list[WorkflowEdge]:
        """Outgoing edges of a node, optionally only those on ``handle``."""
        edges = self._outgoing.get(node_id, [])
        if handle is None:
            return list(edges)
        return [e for e in edges if e.source_handle == handle]

    def has_outgoing(self, node_id: str) -> bool:
        return bool(self._outgoing.get(node_id))

    def reachable_from(self, start_id: str) -> set[str]:
        """Breadth-first set of node ids reachable from ``start_id`` (inclusive)."""
        visited = {start_id}
        queue = deque([start_id])

        while queue:
            current = queue.popleft()
            for edge in self._outgoing.get(current, []):
                if edge.target not in visited:
                    visited.add(edge.target)
                    queue.append(edge.target)

        return visited

    def has_cycle(self) -> bool:
        """Depth-first cycle check with an explicit recursion stack.

        Every node is used as a start point, so cycles outside the part
        reachable from the Input node are found too. A self-edge counts.
        """
        visited: set[str] = set()
        rec_stack: set[str] = set()

        for root in self.nodes:
            if root.id in visited:
                continue
            visited.add(root.id)
            rec_stack.add(root.id)
            # (node id, iterator over its remaining outgoing edges)
            stack = [(root.id, iter(self._outgoing.get(root.id, [])))]
            while stack:
                node_id, edges = stack[-1]
                edge = next(edges, None)
                if edge is None:
                    rec_stack.discard(node_id)
                    stack.pop()
                    continue
                if edge.target in rec_stack:
                    return True
                if edge.target in visited:
                    continue
                visited.add(edge.target)
                rec_stack.add(edge.target)
                stack.append((edge.target, iter(self._outgoing.get(edge.target, []))))

        return False

    def branch_ids(self, node_id: str) -> list[str]:
        """Branch ids of a Condition node in evaluation order."""
        node = self._by_id.get(node_id)
        if node is None or node.kind != NodeKind.CONDITION:
            return []
        config: ConditionNodeConfig = node.config
        return [branch.id for branch in config.branches.ordered()]

    def resolve_branch(self, condition_node_id: str, branch_id: str) -> list[str]:
        """Target node ids followed when ``branch_id`` of a Condition node is taken."""
        return [e.target for e in self.outgoing(condition_node_id, handle=branch_id)]

    def unrouted_branches(self, node_id: str) -> list[str]:
        """Branch ids of a Condition node with no outgoing edge."""
        return [b for b in self.branch_ids(node_id) if not self.resolve_branch(node_id, b)]
