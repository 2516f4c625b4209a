"""Repository interfaces."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from flowbuilder.core.types import (
    Visibility,
    Workflow,
    WorkflowEdge,
    WorkflowNode,
    WorkflowStructure,
    WorkflowSummary,
)
from flowbuilder.errors import AccessDeniedError, WorkflowNotFoundError


def can_access(
    owner_id: str,
    visibility: Visibility | str,
    user_id: str,
    read_only: bool = True,
) -> bool:
    """Access rule shared by every backend.

    The owner may always read and write. Others may never see private
    workflows and may only read public and readonly ones.
    """
    if owner_id == user_id:
        return True
    if Visibility(visibility) == Visibility.PRIVATE:
        return False
    return read_only


async def authorize(
    repository: IWorkflowRepository,
    workflow_id: str,
    user_id: str,
    *,
    write: bool = False,
) -> None:
    """Raise unless ``user_id`` may read (or, with ``write``, modify) the workflow.

    Existence is checked before access so a missing workflow and a denied
    one produce different errors.

    Raises:
        WorkflowNotFoundError: No workflow has this id.
        AccessDeniedError: The workflow exists but the user may not use it.
    """
    if await repository.select_by_id(workflow_id) is None:
        raise WorkflowNotFoundError(workflow_id)
    if not await repository.check_access(workflow_id, user_id, read_only=not write):
        raise AccessDeniedError(workflow_id, write=write)


class IWorkflowRepository(ABC):
    """Workflow repository interface."""

    @abstractmethod
    async def select_by_id(
        self,
        workflow_id: str,
    ) -> Workflow | None:
        """Get workflow metadata by ID."""
        pass

    @abstractmethod
    async def select_structure_by_id(
        self,
        workflow_id: str,
        ignore_note: bool = False,
    ) -> WorkflowStructure | None:
        """Get workflow with nodes and edges, optionally without Note nodes."""
        pass

    @abstractmethod
    async def select_all(
        self,
        user_id: str,
    ) -> list[WorkflowSummary]:
        """List workflows the user owns or may see, newest update first."""
        pass

    @abstractmethod
    async def select_by_user_id(
        self,
        user_id: str,
    ) -> list[Workflow]:
        """List workflows owned by the user."""
        pass

    @abstractmethod
    async def select_execute_ability(
        self,
        user_id: str,
    ) -> list[WorkflowSummary]:
        """List published workflows the user may run."""
        pass

    @abstractmethod
    async def save(
        self,
        workflow: Workflow,
        no_generate_input_node: bool = False,
    ) -> Workflow:
        """Insert or update workflow metadata.

        A new workflow gets a generated ID and, unless
        ``no_generate_input_node`` is set, a default Input node.
        """
        pass

    @abstractmethod
    async def save_structure(
        self,
        workflow_id: str,
        nodes: Sequence[WorkflowNode] | None = None,
        edges: Sequence[WorkflowEdge] | None = None,
        delete_nodes: Sequence[str] | None = None,
        delete_edges: Sequence[str] | None = None,
    ) -> None:
        """Apply deletions, then upsert nodes and edges."""
        pass

    @abstractmethod
    async def check_access(
        self,
        workflow_id: str,
        user_id: str,
        read_only: bool = True,
    ) -> bool:
        """Check access with :func:`can_access`. Missing workflow is False."""
        pass

    @abstractmethod
    async def delete(
        self,
        workflow_id: str,
    ) -> bool:
        """Delete workflow with its nodes and edges."""
        pass
