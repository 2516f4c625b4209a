"""LLM-facing workflow management tool.

One tool, many actions. The model sends a single JSON object with an
``action`` field plus the fields that action needs; every response is a
JSON object with ``success``, ``action`` and ``message``. Failures never
raise out of :meth:`WorkflowBuilder.execute`; they come back as
``{"success": False, "action", "error", "message"}``.
"""

from __future__ import annotations

import time
from collections import Counter
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from flowbuilder.catalog import (
    CONNECTION_QUICK_START,
    DATA_FLOW_DOCUMENTATION,
    DATA_FLOW_QUICK_REFERENCE,
    NODE_CATEGORIES,
    TEMPLATE_CATEGORIES,
    UUID_FORMAT_DOCUMENTATION,
    UUID_GUIDANCE,
    get_node_details,
    list_node_types,
    list_templates,
)
from flowbuilder.core.config import Settings, get_settings
from flowbuilder.core.types import (
    Visibility,
    Workflow,
    WorkflowEdge,
    WorkflowIcon,
    WorkflowNode,
    WorkflowStructure,
)
from flowbuilder.errors import (
    InvalidIdentifierError,
    MissingFieldError,
    NotAuthenticatedError,
    UnknownActionError,
    WorkflowNotFoundError,
)
from flowbuilder.logging import get_logger
from flowbuilder.repositories.interfaces import IWorkflowRepository, authorize
from flowbuilder.tools.base import Tool
from flowbuilder.tools.session import SessionProvider
from flowbuilder.validation import (
    is_valid_uuid,
    validate_data_flow,
    validate_structure,
    validate_uuid_format,
)

TOOL_NAME = "workflow_builder"

ACTIONS: tuple[str, ...] = (
    "create",
    "read",
    "update",
    "delete",
    "list",
    "update_structure",
    "find_by_name",
    "get_node_types",
    "validate_workflow",
    "test_workflow",
    "get_templates",
    "get_analytics",
    "get_node_details",
    "get_data_flow_guide",
    "validate_uuid",
    "get_connection_guide",
)

TOOL_DESCRIPTION = (
    "Workflow management tool. Create, read, update, delete, and list workflows. "
    "Manage workflow structure (nodes and edges). Use 'get_node_types' for node "
    "information, 'validate_workflow' to check for errors, 'test_workflow' for a dry "
    "run, 'get_templates' for examples, 'get_analytics' for insights, "
    "'get_node_details' for one node kind, 'get_data_flow_guide' for data flow "
    "documentation, 'validate_uuid' to check UUID format, and 'get_connection_guide' "
    "for step-by-step node connection instructions. IMPORTANT: workflow, node and "
    "edge IDs must be valid v4 UUIDs in format 'xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx'. "
    "Use the 'list' or 'find_by_name' action to find workflow IDs."
)

DEFAULT_TEST_DATA: dict[str, Any] = {"message": "Test input", "userId": "test-user"}

_SUMMARY_FIELDS = (
    "id",
    "name",
    "description",
    "icon",
    "visibility",
    "isPublished",
    "userId",
    "userName",
    "userAvatar",
    "updatedAt",
)
_DETAIL_FIELDS = (
    "id",
    "name",
    "description",
    "icon",
    "visibility",
    "isPublished",
    "version",
    "userId",
    "createdAt",
    "updatedAt",
)


class WorkflowBuilderInput(BaseModel):
    """Arguments of the workflow builder tool.

    ``action`` selects the operation; every other field is optional and
    only read by the actions that use it.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: str = Field(
        ...,
        description="The action to perform on workflows",
        json_schema_extra={"enum": list(ACTIONS)},
    )

    # Common fields
    id: str | None = Field(
        None,
        description=(
            "Workflow ID (required for read, update, delete, update_structure, "
            "validate_workflow, test_workflow). Must be a valid UUID."
        ),
    )
    workflow_name: str | None = Field(
        None,
        alias="workflowName",
        description="Workflow name to search for (find_by_name only)",
    )

    # Create/Update fields
    name: str | None = Field(None, description="Workflow name (required for create)")
    description: str | None = Field(None, description="Workflow description")
    icon: WorkflowIcon | None = Field(None, description="Workflow icon configuration")
    visibility: Visibility | None = Field(None, description="Workflow visibility")
    is_published: bool | None = Field(
        None, alias="isPublished", description="Whether the workflow is published"
    )
    no_generate_input_node: bool = Field(
        False,
        alias="noGenerateInputNode",
        description="Skip generating the default Input node (create only)",
    )

    # Read fields
    include_structure: bool = Field(
        False,
        alias="includeStructure",
        description="Include nodes and edges (read only)",
    )

    # List fields
    include_owned: bool = Field(True, alias="includeOwned")
    include_public: bool = Field(True, alias="includePublic")
    include_readonly: bool = Field(True, alias="includeReadonly")
    limit: int | None = Field(
        None, ge=1, le=100, description="Maximum number of workflows to return (list only)"
    )

    # Delete fields
    confirm: bool = Field(False, description="Confirmation for deletion (delete only)")

    # Structure fields
    nodes: list[WorkflowNode] | None = Field(
        None,
        description=(
            "Nodes to add or update (update_structure only). IDs must be valid "
            "UUIDs without prefixes."
        ),
    )
    edges: list[WorkflowEdge] | None = Field(
        None,
        description=(
            "Edges to add or update (update_structure only). IDs must be valid "
            "UUIDs without prefixes. Edges leaving a Condition node carry the "
            "branch id in uiConfig.sourceHandle."
        ),
    )
    delete_nodes: list[str] | None = Field(None, alias="deleteNodes")
    delete_edges: list[str] | None = Field(None, alias="deleteEdges")

    # Validation fields
    validate_nodes: list[WorkflowNode] | None = Field(
        None,
        alias="validateNodes",
        description="Nodes to validate without saving (validate_workflow only)",
    )
    validate_edges: list[WorkflowEdge] | None = Field(
        None,
        alias="validateEdges",
        description="Edges to validate without saving (validate_workflow only)",
    )

    # Testing fields
    test_data: dict[str, Any] | None = Field(None, alias="testData")
    dry_run: bool = Field(True, alias="dryRun")

    # Catalog fields
    node_kind: str | None = Field(None, alias="nodeKind")
    uuid: str | None = Field(None, description="UUID to validate (validate_uuid only)")


def _pick(data: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    return {key: data.get(key) for key in fields}


def _workflow_view(workflow: Workflow, fields: tuple[str, ...] = _DETAIL_FIELDS) -> dict[str, Any]:
    return _pick(workflow.model_dump(mode="json", by_alias=True), fields)


def _graph_view(items: list[BaseModel]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


Handler = Callable[[WorkflowBuilderInput, str], Awaitable[dict[str, Any]]]


class WorkflowBuilder:
    """Dispatches workflow builder actions against a repository.

    Example:
        >>> builder = WorkflowBuilder(repository, StaticSessionProvider("user-1"))
        >>> await builder.execute({"action": "create", "name": "Support bot"})
        {'success': True, 'action': 'create', 'workflow': {...}, 'message': ...}
    """

    def __init__(
        self,
        repository: IWorkflowRepository,
        session_provider: SessionProvider,
        settings: Settings | None = None,
    ) -> None:
        self.repository = repository
        self.session_provider = session_provider
        self.settings = settings or get_settings()
        self._handlers: dict[str, Handler] = {
            "create": self._create,
            "read": self._read,
            "update": self._update,
            "delete": self._delete,
            "list": self._list,
            "update_structure": self._update_structure,
            "find_by_name": self._find_by_name,
            "get_node_types": self._get_node_types,
            "validate_workflow": self._validate_workflow,
            "test_workflow": self._test_workflow,
            "get_templates": self._get_templates,
            "get_analytics": self._get_analytics,
            "get_node_details": self._get_node_details,
            "get_data_flow_guide": self._get_data_flow_guide,
            "validate_uuid": self._validate_uuid,
            "get_connection_guide": self._get_connection_guide,
        }

    def as_tool(self) -> Tool:
        """Wrap :meth:`execute` as a :class:`Tool` for a tool executor."""
        return Tool(
            name=TOOL_NAME,
            description=TOOL_DESCRIPTION,
            func=self.execute,
            input_model=WorkflowBuilderInput,
        )

    async def execute(
        self,
        params: WorkflowBuilderInput | Mapping[str, Any],
    ) -> dict[str, Any]:
        """Run one action and return its response object.

        Any exception raised while validating the arguments or running the
        action is converted into the failure response.
        """
        logger = get_logger()
        action = (
            params.action
            if isinstance(params, WorkflowBuilderInput)
            else str(params.get("action", ""))
        )
        start = time.perf_counter()

        try:
            if not isinstance(params, WorkflowBuilderInput):
                params = WorkflowBuilderInput.model_validate(dict(params))
            logger.action_start(action, params.id)

            user_id = await self.session_provider.get_user_id()
            if not user_id:
                raise NotAuthenticatedError()

            handler = self._handlers.get(action)
            if handler is None:
                raise UnknownActionError(action)

            response = await handler(params, user_id)
        except Exception as e:
            error = str(e)
            logger.action_error(action, error)
            return {
                "success": False,
                "action": action,
                "error": error,
                "message": f"Failed to {action} workflow: {error}",
            }

        logger.action_end(action, int((time.perf_counter() - start) * 1000))
        return {"success": True, "action": action, **response}

    # Guards

    def _require_id(self, params: WorkflowBuilderInput, message: str) -> str:
        if not params.id:
            raise MissingFieldError("id", message)
        if not is_valid_uuid(params.id):
            raise InvalidIdentifierError("workflow", params.id)
        return params.id

    async def _load_structure(self, workflow_id: str) -> WorkflowStructure:
        structure = await self.repository.select_structure_by_id(workflow_id)
        if structure is None:
            raise WorkflowNotFoundError(workflow_id)
        return structure

    # CRUD

    async def _create(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        if not params.name:
            raise MissingFieldError("name", "Name is required for creating a workflow")

        workflow = await self.repository.save(
            Workflow(
                name=params.name,
                description=params.description,
                icon=params.icon,
                visibility=params.visibility or Visibility.PRIVATE,
                is_published=bool(params.is_published),
                user_id=user_id,
            ),
            no_generate_input_node=params.no_generate_input_node,
        )
        return {
            "workflow": _workflow_view(workflow),
            "message": f'Workflow "{workflow.name}" created successfully',
        }

    async def _read(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        workflow_id = self._require_id(params, "ID is required for reading a workflow")
        await authorize(self.repository, workflow_id, user_id, write=False)

        if params.include_structure:
            structure = await self._load_structure(workflow_id)
            view = _workflow_view(structure)
            view["nodes"] = _graph_view(structure.nodes)
            view["edges"] = _graph_view(structure.edges)
            return {
                "workflow": view,
                "message": f'Workflow "{structure.name}" retrieved with structure',
            }

        workflow = await self.repository.select_by_id(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)
        return {
            "workflow": _workflow_view(workflow),
            "message": f'Workflow "{workflow.name}" retrieved',
        }

    async def _update(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        workflow_id = self._require_id(params, "ID is required for updating a workflow")
        await authorize(self.repository, workflow_id, user_id, write=True)

        existing = await self.repository.select_by_id(workflow_id)
        if existing is None:
            raise WorkflowNotFoundError(workflow_id)

        changes: dict[str, Any] = {}
        if params.name is not None:
            changes["name"] = params.name
        if params.description is not None:
            changes["description"] = params.description
        if params.icon is not None:
            changes["icon"] = params.icon
        if params.visibility is not None:
            changes["visibility"] = params.visibility
        if params.is_published is not None:
            changes["is_published"] = params.is_published

        updated = await self.repository.save(existing.model_copy(update=changes))
        return {
            "workflow": _workflow_view(updated),
            "message": f'Workflow "{updated.name}" updated successfully',
        }

    async def _delete(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        workflow_id = self._require_id(params, "ID is required for deleting a workflow")
        if not params.confirm:
            raise MissingFieldError(
                "confirm", "Deletion not confirmed. Set confirm to true to proceed."
            )
        await authorize(self.repository, workflow_id, user_id, write=True)

        workflow = await self.repository.select_by_id(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)

        await self.repository.delete(workflow_id)
        return {
            "deletedWorkflowId": workflow_id,
            "message": f'Workflow "{workflow.name}" deleted successfully',
        }

    async def _list(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        workflows = await self.repository.select_all(user_id)

        if not params.include_owned:
            workflows = [w for w in workflows if w.user_id != user_id]
        if not params.include_public:
            workflows = [w for w in workflows if w.visibility != Visibility.PUBLIC]
        if not params.include_readonly:
            workflows = [w for w in workflows if w.visibility != Visibility.READONLY]
        if params.limit:
            workflows = workflows[: params.limit]

        return {
            "workflows": [_workflow_view(w, _SUMMARY_FIELDS) for w in workflows],
            "total": len(workflows),
            "message": f"Found {len(workflows)} workflows",
        }

    async def _update_structure(
        self, params: WorkflowBuilderInput, user_id: str
    ) -> dict[str, Any]:
        workflow_id = self._require_id(
            params, "ID is required for updating workflow structure"
        )

        for edge in params.edges or []:
            if not is_valid_uuid(edge.id):
                raise InvalidIdentifierError(
                    "edge", edge.id, validate_uuid_format(edge.id).issues
                )
        for node in params.nodes or []:
            if not is_valid_uuid(node.id):
                raise InvalidIdentifierError(
                    "node", node.id, validate_uuid_format(node.id).issues
                )

        await authorize(self.repository, workflow_id, user_id, write=True)

        await self.repository.save_structure(
            workflow_id,
            nodes=params.nodes,
            edges=params.edges,
            delete_nodes=params.delete_nodes,
            delete_edges=params.delete_edges,
        )
        return {
            "workflowId": workflow_id,
            "changes": {
                "nodesAdded": len(params.nodes or []),
                "edgesAdded": len(params.edges or []),
                "nodesDeleted": len(params.delete_nodes or []),
                "edgesDeleted": len(params.delete_edges or []),
            },
            "uuidGuidance": UUID_GUIDANCE,
            "message": "Workflow structure updated successfully",
        }

    async def _find_by_name(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        if not params.workflow_name:
            raise MissingFieldError(
                "workflowName", "Workflow name is required for finding workflows by name"
            )

        needle = params.workflow_name.lower()
        matches = [
            w for w in await self.repository.select_all(user_id)
            if needle in w.name.lower()
        ]
        if not matches:
            return {
                "workflows": [],
                "total": 0,
                "message": f'No workflows found matching "{params.workflow_name}"',
            }
        return {
            "workflows": [_workflow_view(w, _SUMMARY_FIELDS) for w in matches],
            "total": len(matches),
            "message": (
                f'Found {len(matches)} workflow(s) matching "{params.workflow_name}"'
            ),
        }

    # Validation and testing

    async def _validate_workflow(
        self, params: WorkflowBuilderInput, user_id: str
    ) -> dict[str, Any]:
        if params.validate_nodes is not None:
            workflow_id = None
            workflow_name = params.name or "Unsaved workflow"
            nodes, edges = params.validate_nodes, params.validate_edges or []
        else:
            workflow_id = self._require_id(params, "Workflow ID is required for validation")
            await authorize(self.repository, workflow_id, user_id, write=False)
            structure = await self._load_structure(workflow_id)
            workflow_name = structure.name
            nodes, edges = structure.nodes, structure.edges

        structure_result = validate_structure(
            nodes,
            edges,
            max_nodes=self.settings.max_workflow_nodes,
            max_llm_nodes=self.settings.max_llm_nodes,
        )
        data_flow_result = validate_data_flow(nodes, edges)
        get_logger().validation_summary(
            workflow_name,
            errors=len(structure_result.errors),
            warnings=len(structure_result.warnings),
            issues=len(data_flow_result.issues),
        )

        failures = len(structure_result.errors) + len(data_flow_result.issues)
        if failures == 0:
            message = "Workflow validation passed successfully"
        else:
            message = f"Workflow validation failed with {failures} error(s)"

        return {
            "workflowId": workflow_id,
            "workflowName": workflow_name,
            "validation": {
                **structure_result.model_dump(by_alias=True),
                "dataFlow": data_flow_result.model_dump(by_alias=True),
            },
            "message": message,
        }

    async def _test_workflow(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        workflow_id = self._require_id(params, "Workflow ID is required for testing")
        await authorize(self.repository, workflow_id, user_id, write=False)
        structure = await self._load_structure(workflow_id)

        response: dict[str, Any] = {
            "workflowId": workflow_id,
            "workflowName": structure.name,
            "testData": params.test_data or dict(DEFAULT_TEST_DATA),
            "dryRun": params.dry_run,
        }

        if not params.dry_run:
            response["result"] = {
                "status": "execution_not_supported",
                "message": (
                    "Full workflow execution is not available. "
                    "Use dryRun=true for structure validation."
                ),
            }
            response["message"] = "Workflow testing requires dry run mode"
            return response

        validation = validate_structure(
            structure.nodes,
            structure.edges,
            max_nodes=self.settings.max_workflow_nodes,
            max_llm_nodes=self.settings.max_llm_nodes,
        )
        if validation.is_valid:
            response["result"] = {
                "status": "dry_run_completed",
                "message": "Workflow structure is valid and ready for execution",
                "estimatedExecutionTime": "2-5 seconds",
                "nodeCount": len(structure.nodes),
                "edgeCount": len(structure.edges),
                "warnings": validation.warnings,
            }
            response["message"] = "Workflow dry run completed successfully"
        else:
            response["result"] = {
                "status": "dry_run_failed",
                "message": "Workflow structure has errors and cannot be executed",
                "errors": validation.errors,
                "warnings": validation.warnings,
                "nodeCount": len(structure.nodes),
                "edgeCount": len(structure.edges),
            }
            response["message"] = (
                f"Workflow dry run found {len(validation.errors)} structural error(s)"
            )
        return response

    async def _get_analytics(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        workflows = await self.repository.select_all(user_id)
        visibility = Counter(w.visibility for w in workflows)

        recent = sorted(
            workflows,
            key=lambda w: w.updated_at.timestamp() if w.updated_at else 0.0,
            reverse=True,
        )[:5]

        analytics = {
            "totalWorkflows": len(workflows),
            "ownedWorkflows": sum(1 for w in workflows if w.user_id == user_id),
            "publicWorkflows": visibility[Visibility.PUBLIC],
            "publishedWorkflows": sum(1 for w in workflows if w.is_published),
            "recentActivity": [
                _workflow_view(w, ("id", "name", "updatedAt", "visibility")) for w in recent
            ],
            "visibilityDistribution": {v.value: visibility[v] for v in Visibility},
        }
        return {
            "analytics": analytics,
            "message": f"Retrieved analytics for {len(workflows)} workflows",
        }

    # Catalog and guides

    async def _get_node_types(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        node_types = list_node_types()
        return {
            "nodeTypes": node_types,
            "categories": NODE_CATEGORIES,
            "total": len(node_types),
            "message": f"Retrieved details for {len(node_types)} node types",
        }

    async def _get_node_details(
        self, params: WorkflowBuilderInput, user_id: str
    ) -> dict[str, Any]:
        if not params.node_kind:
            raise MissingFieldError(
                "nodeKind", "Node kind is required for getting node details"
            )
        details = get_node_details(params.node_kind)
        return {
            "nodeKind": details["kind"],
            "details": details,
            "message": f"Retrieved detailed information for {details['kind']} node type",
        }

    async def _get_templates(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        templates = list_templates()
        return {
            "templates": templates,
            "categories": TEMPLATE_CATEGORIES,
            "total": len(templates),
            "message": f"Retrieved {len(templates)} workflow templates",
        }

    async def _get_data_flow_guide(
        self, params: WorkflowBuilderInput, user_id: str
    ) -> dict[str, Any]:
        return {
            "dataFlowGuide": DATA_FLOW_DOCUMENTATION,
            "quickReference": DATA_FLOW_QUICK_REFERENCE,
            "message": "Retrieved data flow and connection guide",
        }

    async def _validate_uuid(self, params: WorkflowBuilderInput, user_id: str) -> dict[str, Any]:
        if params.uuid is None:
            raise MissingFieldError("uuid", "UUID is required for validation")

        validation = validate_uuid_format(params.uuid)
        is_valid = is_valid_uuid(params.uuid)
        if is_valid:
            message = f'UUID "{params.uuid}" is valid'
        else:
            message = (
                f'UUID "{params.uuid}" is invalid - '
                f"{len(validation.issues)} issue(s) found"
            )
        return {
            "uuid": params.uuid,
            "validation": validation.model_dump(by_alias=True),
            "isValid": is_valid,
            "documentation": UUID_FORMAT_DOCUMENTATION,
            "message": message,
        }

    async def _get_connection_guide(
        self, params: WorkflowBuilderInput, user_id: str
    ) -> dict[str, Any]:
        return {
            "connectionGuide": DATA_FLOW_DOCUMENTATION,
            "quickStart": CONNECTION_QUICK_START,
            "message": "Retrieved node connection guide with step-by-step instructions",
        }
