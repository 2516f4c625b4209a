"""SQLAlchemy workflow repository."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from flowbuilder.core.types import (
    NodeKind,
    Visibility,
    Workflow,
    WorkflowEdge,
    WorkflowIcon,
    WorkflowNode,
    WorkflowStructure,
    WorkflowSummary,
    to_edge,
    to_node,
)
from flowbuilder.errors import IdentifierConflictError
from flowbuilder.repositories.database import Database
from flowbuilder.repositories.interfaces import IWorkflowRepository, can_access
from flowbuilder.repositories.models import EdgeRecord, NodeRecord, WorkflowRecord, utcnow

logger = logging.getLogger(__name__)

DEFAULT_INPUT_NODE_NAME = "INPUT"


async def _reject_foreign_ids(
    session: AsyncSession,
    model: type[NodeRecord] | type[EdgeRecord],
    target: str,
    workflow_id: str,
    ids: list[str],
) -> None:
    """Ids are global keys; an upsert must not pull rows out of another workflow."""
    if not ids:
        return
    stmt = select(model.id).where(model.id.in_(ids), model.workflow_id != workflow_id)
    taken = sorted((await session.execute(stmt)).scalars().all())
    if taken:
        raise IdentifierConflictError(target, taken)


def _to_workflow(record: WorkflowRecord, model: type[Workflow] = Workflow) -> Workflow:
    return model(
        id=record.id,
        name=record.name,
        description=record.description,
        icon=WorkflowIcon.model_validate(record.icon) if record.icon else None,
        visibility=Visibility(record.visibility),
        is_published=record.is_published,
        version=record.version,
        user_id=record.user_id,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _to_node(record: NodeRecord) -> WorkflowNode:
    return WorkflowNode(
        id=record.id,
        kind=NodeKind(record.kind),
        name=record.name,
        description=record.description,
        node_config=record.node_config or {},
        ui_config=record.ui_config or {},
    )


def _to_edge(record: EdgeRecord) -> WorkflowEdge:
    return WorkflowEdge(
        id=record.id,
        source=record.source,
        target=record.target,
        ui_config=record.ui_config or {},
    )


def _default_input_node(workflow_id: str) -> NodeRecord:
    return NodeRecord(
        id=str(uuid.uuid4()),
        workflow_id=workflow_id,
        kind=NodeKind.INPUT.value,
        name=DEFAULT_INPUT_NODE_NAME,
        node_config={"outputSchema": {"type": "object", "properties": {}}},
        ui_config={"position": {"x": 0, "y": 0}},
    )


class SqlWorkflowRepository(IWorkflowRepository):
    """Workflow repository over the ``workflows``, ``workflow_nodes`` and
    ``workflow_edges`` tables.

    Each call runs in its own session and commits on success.
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository.

        Args:
            database: Engine and session factory to use
        """
        self.database = database

    async def select_by_id(self, workflow_id: str) -> Workflow | None:
        async with self.database.session() as session:
            record = await session.get(WorkflowRecord, workflow_id)
            return _to_workflow(record) if record else None

    async def select_structure_by_id(
        self,
        workflow_id: str,
        ignore_note: bool = False,
    ) -> WorkflowStructure | None:
        async with self.database.session() as session:
            record = await session.get(WorkflowRecord, workflow_id)
            if record is None:
                return None

            node_stmt = select(NodeRecord).where(NodeRecord.workflow_id == workflow_id)
            if ignore_note:
                node_stmt = node_stmt.where(NodeRecord.kind != NodeKind.NOTE.value)
            node_stmt = node_stmt.order_by(NodeRecord.created_at, NodeRecord.id)
            nodes = (await session.execute(node_stmt)).scalars().all()

            edge_stmt = (
                select(EdgeRecord)
                .where(EdgeRecord.workflow_id == workflow_id)
                .order_by(EdgeRecord.created_at, EdgeRecord.id)
            )
            edges = (await session.execute(edge_stmt)).scalars().all()

            if ignore_note:
                kept = {n.id for n in nodes}
                edges = [e for e in edges if e.source in kept and e.target in kept]

            structure = _to_workflow(record, WorkflowStructure)
            structure.nodes = [_to_node(n) for n in nodes]
            structure.edges = [_to_edge(e) for e in edges]
            return structure

    async def select_all(self, user_id: str) -> list[WorkflowSummary]:
        stmt = (
            select(WorkflowRecord)
            .where(
                or_(
                    WorkflowRecord.user_id == user_id,
                    WorkflowRecord.visibility != Visibility.PRIVATE.value,
                )
            )
            .order_by(WorkflowRecord.updated_at.desc())
        )
        async with self.database.session() as session:
            records = (await session.execute(stmt)).scalars().all()
            return [_to_workflow(r, WorkflowSummary) for r in records]

    async def select_by_user_id(self, user_id: str) -> list[Workflow]:
        stmt = (
            select(WorkflowRecord)
            .where(WorkflowRecord.user_id == user_id)
            .order_by(WorkflowRecord.updated_at.desc())
        )
        async with self.database.session() as session:
            records = (await session.execute(stmt)).scalars().all()
            return [_to_workflow(r) for r in records]

    async def select_execute_ability(self, user_id: str) -> list[WorkflowSummary]:
        stmt = (
            select(WorkflowRecord)
            .where(
                WorkflowRecord.is_published.is_(True),
                or_(
                    WorkflowRecord.user_id == user_id,
                    WorkflowRecord.visibility != Visibility.PRIVATE.value,
                ),
            )
            .order_by(WorkflowRecord.updated_at.desc())
        )
        async with self.database.session() as session:
            records = (await session.execute(stmt)).scalars().all()
            return [_to_workflow(r, WorkflowSummary) for r in records]

    async def save(
        self,
        workflow: Workflow,
        no_generate_input_node: bool = False,
    ) -> Workflow:
        async with self.database.session() as session:
            record = await session.get(WorkflowRecord, workflow.id) if workflow.id else None
            is_new = record is None
            now = utcnow()

            if record is None:
                record = WorkflowRecord(
                    id=workflow.id or str(uuid.uuid4()),
                    user_id=workflow.user_id,
                    created_at=now,
                )
                session.add(record)

            record.name = workflow.name
            record.description = workflow.description
            record.icon = workflow.icon.model_dump(exclude_none=True) if workflow.icon else None
            record.visibility = Visibility(workflow.visibility).value
            record.is_published = workflow.is_published
            record.version = workflow.version
            record.updated_at = now

            if is_new and not no_generate_input_node:
                session.add(_default_input_node(record.id))

            await session.flush()
            logger.info(
                "Saved workflow %s (new=%s, input_node=%s)",
                record.id,
                is_new,
                is_new and not no_generate_input_node,
            )
            return _to_workflow(record)

    async def save_structure(
        self,
        workflow_id: str,
        nodes: Sequence[WorkflowNode] | None = None,
        edges: Sequence[WorkflowEdge] | None = None,
        delete_nodes: Sequence[str] | None = None,
        delete_edges: Sequence[str] | None = None,
    ) -> None:
        now = utcnow()
        new_nodes = [to_node(n) for n in nodes or []]
        new_edges = [to_edge(e) for e in edges or []]
        async with self.database.session() as session:
            await _reject_foreign_ids(
                session, NodeRecord, "node", workflow_id, [n.id for n in new_nodes]
            )
            await _reject_foreign_ids(
                session, EdgeRecord, "edge", workflow_id, [e.id for e in new_edges]
            )

            if delete_edges:
                await session.execute(
                    delete(EdgeRecord).where(
                        EdgeRecord.workflow_id == workflow_id,
                        EdgeRecord.id.in_(list(delete_edges)),
                    )
                )

            if delete_nodes:
                removed = list(delete_nodes)
                await session.execute(
                    delete(EdgeRecord).where(
                        EdgeRecord.workflow_id == workflow_id,
                        or_(EdgeRecord.source.in_(removed), EdgeRecord.target.in_(removed)),
                    )
                )
                await session.execute(
                    delete(NodeRecord).where(
                        NodeRecord.workflow_id == workflow_id,
                        NodeRecord.id.in_(removed),
                    )
                )

            for node in new_nodes:
                await session.merge(
                    NodeRecord(
                        id=node.id,
                        workflow_id=workflow_id,
                        kind=node.kind.value,
                        name=node.name,
                        description=node.description,
                        node_config=node.raw_config(),
                        ui_config=node.ui_config.model_dump(by_alias=True, exclude_none=True),
                        updated_at=now,
                    )
                )

            for edge in new_edges:
                await session.merge(
                    EdgeRecord(
                        id=edge.id,
                        workflow_id=workflow_id,
                        source=edge.source,
                        target=edge.target,
                        ui_config=edge.ui_config.model_dump(by_alias=True, exclude_none=True),
                    )
                )

            await session.execute(
                update(WorkflowRecord)
                .where(WorkflowRecord.id == workflow_id)
                .values(updated_at=now)
            )

        logger.info(
            "Saved structure of workflow %s (+%d nodes, +%d edges, -%d nodes, -%d edges)",
            workflow_id,
            len(nodes or []),
            len(edges or []),
            len(delete_nodes or []),
            len(delete_edges or []),
        )

    async def check_access(
        self,
        workflow_id: str,
        user_id: str,
        read_only: bool = True,
    ) -> bool:
        stmt = select(WorkflowRecord.user_id, WorkflowRecord.visibility).where(
            WorkflowRecord.id == workflow_id
        )
        async with self.database.session() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            return False
        return can_access(row.user_id, row.visibility, user_id, read_only)

    async def delete(self, workflow_id: str) -> bool:
        async with self.database.session() as session:
            await session.execute(delete(EdgeRecord).where(EdgeRecord.workflow_id == workflow_id))
            await session.execute(delete(NodeRecord).where(NodeRecord.workflow_id == workflow_id))
            result = await session.execute(
                delete(WorkflowRecord).where(WorkflowRecord.id == workflow_id)
            )
            deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted workflow %s", workflow_id)
        return deleted
