"""Workflow structure endpoints.

The editor loads and saves the node/edge graph here; the same checks the
workflow builder tool runs are exposed under ``/validate``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from flowbuilder.api.dependencies import AppSettings, CurrentUserId, Repository, WorkflowId
from flowbuilder.core.types import WorkflowEdge, WorkflowNode
from flowbuilder.errors import InvalidIdentifierError, WorkflowNotFoundError
from flowbuilder.repositories.interfaces import authorize
from flowbuilder.validation import (
    is_valid_uuid,
    validate_data_flow,
    validate_structure,
    validate_uuid_format,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workflow", tags=["workflow"])


class StructureUpdate(BaseModel):
    """Body of ``POST /api/workflow/{id}/structure``."""

    model_config = ConfigDict(populate_by_name=True)

    nodes: list[WorkflowNode] = Field(default_factory=list)
    edges: list[WorkflowEdge] = Field(default_factory=list)
    delete_nodes: list[str] = Field(default_factory=list, alias="deleteNodes")
    delete_edges: list[str] = Field(default_factory=list, alias="deleteEdges")


@router.get("/executable")
async def list_executable_workflows(
    repository: Repository,
    user_id: CurrentUserId,
) -> list[dict[str, Any]]:
    """Published workflows the current user may run."""
    workflows = await repository.select_execute_ability(user_id)
    return [w.model_dump(mode="json", by_alias=True) for w in workflows]


@router.get("/{workflow_id}/structure")
async def get_structure(
    workflow_id: WorkflowId,
    repository: Repository,
    user_id: CurrentUserId,
) -> dict[str, Any]:
    """Workflow metadata with its nodes and edges."""
    await authorize(repository, workflow_id, user_id, write=False)
    structure = await repository.select_structure_by_id(workflow_id)
    if structure is None:
        raise WorkflowNotFoundError(workflow_id)
    return structure.model_dump(mode="json", by_alias=True)


@router.post("/{workflow_id}/structure")
async def save_structure(
    workflow_id: WorkflowId,
    body: StructureUpdate,
    repository: Repository,
    user_id: CurrentUserId,
) -> dict[str, bool]:
    """Upsert nodes and edges and apply deletions."""
    for node in body.nodes:
        if not is_valid_uuid(node.id):
            raise InvalidIdentifierError("node", node.id, validate_uuid_format(node.id).issues)
    for edge in body.edges:
        if not is_valid_uuid(edge.id):
            raise InvalidIdentifierError("edge", edge.id, validate_uuid_format(edge.id).issues)

    await authorize(repository, workflow_id, user_id, write=True)
    await repository.save_structure(
        workflow_id,
        nodes=body.nodes,
        edges=body.edges,
        delete_nodes=body.delete_nodes,
        delete_edges=body.delete_edges,
    )
    return {"success": True}


@router.get("/{workflow_id}/validate")
async def validate_workflow(
    workflow_id: WorkflowId,
    repository: Repository,
    settings: AppSettings,
    user_id: CurrentUserId,
) -> dict[str, Any]:
    """Structural and data flow validation of the stored graph."""
    await authorize(repository, workflow_id, user_id, write=False)
    structure = await repository.select_structure_by_id(workflow_id)
    if structure is None:
        raise WorkflowNotFoundError(workflow_id)

    structure_result = validate_structure(
        structure.nodes,
        structure.edges,
        max_nodes=settings.max_workflow_nodes,
        max_llm_nodes=settings.max_llm_nodes,
    )
    data_flow_result = validate_data_flow(structure.nodes, structure.edges)
    logger.info(
        "Validated workflow %s: %d errors, %d data flow issues",
        workflow_id,
        len(structure_result.errors),
        len(data_flow_result.issues),
    )
    return {
        "workflowId": workflow_id,
        "workflowName": structure.name,
        "isValid": structure_result.is_valid and data_flow_result.is_valid,
        "structure": structure_result.model_dump(by_alias=True),
        "dataFlow": data_flow_result.model_dump(by_alias=True),
    }
