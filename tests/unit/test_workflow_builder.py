"""Unit tests for the workflow builder tool."""

from __future__ import annotations

from io import StringIO
from typing import Any

import pytest
import pytest_asyncio

from flowbuilder.core.config import Settings
from flowbuilder.repositories.sql import SqlWorkflowRepository
from flowbuilder.tools.executor import ToolExecutor
from flowbuilder.tools.session import StaticSessionProvider
from flowbuilder.tools.workflow_builder import ACTIONS, TOOL_NAME, WorkflowBuilder
from tests.factories import OTHER_ID, OWNER_ID, linear_graph, make_edge, make_node, new_id


@pytest_asyncio.fixture
async def builder(repository: SqlWorkflowRepository, settings: Settings) -> WorkflowBuilder:
    return WorkflowBuilder(repository, StaticSessionProvider(OWNER_ID), settings)


@pytest_asyncio.fixture
async def other_builder(repository: SqlWorkflowRepository, settings: Settings) -> WorkflowBuilder:
    return WorkflowBuilder(repository, StaticSessionProvider(OTHER_ID), settings)


async def _create(builder: WorkflowBuilder, **fields: Any) -> dict[str, Any]:
    response = await builder.execute({"action": "create", "name": "Support bot", **fields})
    assert response["success"] is True, response
    return response["workflow"]


class TestDispatch:
    """Tests for argument handling and the failure shape."""

    def test_sixteen_actions(self) -> None:
        assert len(ACTIONS) == 16
        assert len(set(ACTIONS)) == 16

    @pytest.mark.asyncio
    async def test_unknown_action(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "explode"})

        assert response == {
            "success": False,
            "action": "explode",
            "error": "Unknown action: explode",
            "message": "Failed to explode workflow: Unknown action: explode",
        }

    @pytest.mark.asyncio
    async def test_logs_success_and_failure(self, builder: WorkflowBuilder, console_log: StringIO) -> None:
        ok = await builder.execute({"action": "get_templates"})
        failed = await builder.execute({"action": "read", "id": new_id()})

        assert ok["success"] is True
        assert failed["success"] is False
        output = console_log.getvalue()
        assert "get_templates" in output
        assert "completed" in output
        assert "Workflow not found" in output

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["[/red]", "[bold]list", "list\\"])
    async def test_markup_in_action_is_logged_verbatim(
        self, builder: WorkflowBuilder, console_log: StringIO, action: str
    ) -> None:
        response = await builder.execute({"action": action})

        assert response["success"] is False
        assert response["action"] == action
        assert action in console_log.getvalue()

    @pytest.mark.asyncio
    async def test_not_authenticated(self, repository: SqlWorkflowRepository, settings: Settings) -> None:
        builder = WorkflowBuilder(repository, StaticSessionProvider(None), settings)

        response = await builder.execute({"action": "list"})

        assert response["success"] is False
        assert response["error"] == "User not authenticated"

    @pytest.mark.asyncio
    async def test_invalid_arguments_become_failure(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "list", "limit": 500})

        assert response["success"] is False
        assert response["action"] == "list"
        assert response["message"].startswith("Failed to list workflow:")

    @pytest.mark.asyncio
    async def test_through_tool_executor(self, builder: WorkflowBuilder) -> None:
        executor = ToolExecutor([builder.as_tool()])

        result = await executor.execute(TOOL_NAME, {"action": "get_node_types"})

        assert result.success is True
        assert result.result["success"] is True
        assert result.result["total"] == 9

    def test_tool_schema_lists_actions(self, builder: WorkflowBuilder) -> None:
        schema = builder.as_tool().to_anthropic_schema()

        action = schema["input_schema"]["properties"]["action"]
        assert action["enum"] == list(ACTIONS)
        assert "workflowName" in schema["input_schema"]["properties"]


class TestCrud:
    """Tests for create, read, update, delete and list."""

    @pytest.mark.asyncio
    async def test_create(self, builder: WorkflowBuilder, repository: SqlWorkflowRepository) -> None:
        response = await builder.execute({
            "action": "create",
            "name": "Support bot",
            "description": "Answers tickets",
            "icon": {"type": "emoji", "value": "🤖"},
            "visibility": "public",
        })

        assert response["success"] is True
        assert response["message"] == 'Workflow "Support bot" created successfully'
        workflow = response["workflow"]
        assert workflow["userId"] == OWNER_ID
        assert workflow["visibility"] == "public"
        assert workflow["icon"]["value"] == "🤖"

        structure = await repository.select_structure_by_id(workflow["id"])
        assert [n.kind.value for n in structure.nodes] == ["input"]

    @pytest.mark.asyncio
    async def test_create_without_input_node(
        self, builder: WorkflowBuilder, repository: SqlWorkflowRepository
    ) -> None:
        workflow = await _create(builder, noGenerateInputNode=True)

        structure = await repository.select_structure_by_id(workflow["id"])
        assert structure.nodes == []

    @pytest.mark.asyncio
    async def test_create_requires_name(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "create"})

        assert response["error"] == "Name is required for creating a workflow"

    @pytest.mark.asyncio
    async def test_read(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)

        response = await builder.execute({"action": "read", "id": workflow["id"]})

        assert response["workflow"]["name"] == "Support bot"
        assert "nodes" not in response["workflow"]

    @pytest.mark.asyncio
    async def test_read_with_structure(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)

        response = await builder.execute({
            "action": "read", "id": workflow["id"], "includeStructure": True,
        })

        assert len(response["workflow"]["nodes"]) == 1
        assert response["workflow"]["edges"] == []
        assert response["message"] == 'Workflow "Support bot" retrieved with structure'

    @pytest.mark.asyncio
    async def test_read_requires_id(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "read"})

        assert response["error"] == "ID is required for reading a workflow"

    @pytest.mark.asyncio
    async def test_read_rejects_name_as_id(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "read", "id": "Support bot"})

        assert response["success"] is False
        assert "Invalid workflow ID format" in response["error"]

    @pytest.mark.asyncio
    async def test_read_missing(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "read", "id": new_id()})

        assert response["error"] == "Workflow not found"

    @pytest.mark.asyncio
    async def test_private_workflow_hidden_from_others(
        self, builder: WorkflowBuilder, other_builder: WorkflowBuilder
    ) -> None:
        workflow = await _create(builder)

        response = await other_builder.execute({"action": "read", "id": workflow["id"]})

        assert response["error"] == "You don't have access to this workflow"

    @pytest.mark.asyncio
    async def test_update(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)

        response = await builder.execute({
            "action": "update",
            "id": workflow["id"],
            "name": "Renamed",
            "isPublished": True,
        })

        assert response["workflow"]["name"] == "Renamed"
        assert response["workflow"]["isPublished"] is True
        assert response["workflow"]["description"] is None

    @pytest.mark.asyncio
    async def test_update_public_workflow_by_other_user(
        self, builder: WorkflowBuilder, other_builder: WorkflowBuilder
    ) -> None:
        workflow = await _create(builder, visibility="public")

        response = await other_builder.execute({
            "action": "update", "id": workflow["id"], "name": "Hijacked",
        })

        assert response["error"] == "You don't have write access to this workflow"

    @pytest.mark.asyncio
    async def test_delete_requires_confirmation(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)

        response = await builder.execute({"action": "delete", "id": workflow["id"]})

        assert response["error"] == "Deletion not confirmed. Set confirm to true to proceed."

    @pytest.mark.asyncio
    async def test_delete(self, builder: WorkflowBuilder, repository: SqlWorkflowRepository) -> None:
        workflow = await _create(builder)

        response = await builder.execute({
            "action": "delete", "id": workflow["id"], "confirm": True,
        })

        assert response["deletedWorkflowId"] == workflow["id"]
        assert await repository.select_by_id(workflow["id"]) is None

    @pytest.mark.asyncio
    async def test_list_filters(
        self, builder: WorkflowBuilder, other_builder: WorkflowBuilder
    ) -> None:
        await _create(builder, name="Mine")
        await _create(other_builder, name="Theirs public", visibility="public")
        await _create(other_builder, name="Theirs readonly", visibility="readonly")
        await _create(other_builder, name="Theirs private")

        everything = await builder.execute({"action": "list"})
        not_owned = await builder.execute({"action": "list", "includeOwned": False})
        no_public = await builder.execute({"action": "list", "includePublic": False})
        limited = await builder.execute({"action": "list", "limit": 1})

        assert everything["total"] == 3
        assert {w["name"] for w in not_owned["workflows"]} == {"Theirs public", "Theirs readonly"}
        assert {w["name"] for w in no_public["workflows"]} == {"Mine", "Theirs readonly"}
        assert limited["total"] == 1
        assert set(everything["workflows"][0]) >= {"id", "name", "visibility", "userId"}

    @pytest.mark.asyncio
    async def test_find_by_name(self, builder: WorkflowBuilder) -> None:
        await _create(builder, name="Customer Support")
        await _create(builder, name="Invoice parser")

        found = await builder.execute({"action": "find_by_name", "workflowName": "support"})
        missing = await builder.execute({"action": "find_by_name", "workflowName": "zzz"})

        assert [w["name"] for w in found["workflows"]] == ["Customer Support"]
        assert missing["total"] == 0
        assert missing["message"] == 'No workflows found matching "zzz"'


class TestUpdateStructure:
    """Tests for update_structure."""

    @pytest.mark.asyncio
    async def test_saves_nodes_and_edges(
        self, builder: WorkflowBuilder, repository: SqlWorkflowRepository
    ) -> None:
        workflow = await _create(builder, noGenerateInputNode=True)
        nodes, edges = linear_graph()

        response = await builder.execute({
            "action": "update_structure",
            "id": workflow["id"],
            "nodes": nodes,
            "edges": edges,
        })

        assert response["success"] is True
        assert response["changes"] == {
            "nodesAdded": 3, "edgesAdded": 2, "nodesDeleted": 0, "edgesDeleted": 0,
        }
        assert "uuidGuidance" in response

        structure = await repository.select_structure_by_id(workflow["id"])
        assert len(structure.nodes) == 3
        assert len(structure.edges) == 2

    @pytest.mark.asyncio
    async def test_rejects_prefixed_node_id(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)
        node = make_node("llm", node_id=f"node-{new_id()}")

        response = await builder.execute({
            "action": "update_structure", "id": workflow["id"], "nodes": [node],
        })

        assert response["success"] is False
        assert response["error"].startswith("Invalid node ID format")

    @pytest.mark.asyncio
    async def test_cannot_take_nodes_from_another_workflow(
        self,
        builder: WorkflowBuilder,
        other_builder: WorkflowBuilder,
        repository: SqlWorkflowRepository,
    ) -> None:
        theirs = await _create(other_builder)
        their_input = (await repository.select_structure_by_id(theirs["id"])).nodes[0]
        mine = await _create(builder, noGenerateInputNode=True)

        response = await builder.execute({
            "action": "update_structure",
            "id": mine["id"],
            "nodes": [make_node("input", "grab", node_id=their_input.id)],
        })

        assert response["success"] is False
        assert "already belong to another workflow" in response["error"]
        structure = await repository.select_structure_by_id(theirs["id"])
        assert [n.id for n in structure.nodes] == [their_input.id]

    @pytest.mark.asyncio
    async def test_edge_ids_checked_before_node_ids(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)
        a = make_node("input", node_id="bad-node")
        b = make_node("output")
        edge = make_edge(a, b)
        edge["id"] = "bad-edge"

        response = await builder.execute({
            "action": "update_structure",
            "id": workflow["id"],
            "nodes": [a, b],
            "edges": [edge],
        })

        assert response["error"].startswith("Invalid edge ID format")

    @pytest.mark.asyncio
    async def test_readonly_workflow_is_not_writable(
        self, builder: WorkflowBuilder, other_builder: WorkflowBuilder
    ) -> None:
        workflow = await _create(builder, visibility="readonly")

        response = await other_builder.execute({
            "action": "update_structure", "id": workflow["id"], "nodes": [],
        })

        assert response["error"] == "You don't have write access to this workflow"

    @pytest.mark.asyncio
    async def test_missing_workflow_reported_before_access(
        self, other_builder: WorkflowBuilder
    ) -> None:
        response = await other_builder.execute({
            "action": "update_structure", "id": new_id(), "nodes": [],
        })

        assert response["error"] == "Workflow not found"


class TestValidationActions:
    """Tests for validate_workflow and test_workflow."""

    @pytest.mark.asyncio
    async def test_validate_saved_workflow(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder, noGenerateInputNode=True)
        nodes, edges = linear_graph()
        await builder.execute({
            "action": "update_structure", "id": workflow["id"], "nodes": nodes, "edges": edges,
        })

        response = await builder.execute({"action": "validate_workflow", "id": workflow["id"]})

        assert response["message"] == "Workflow validation passed successfully"
        assert response["validation"]["isValid"] is True
        assert response["validation"]["dataFlow"]["isValid"] is True

    @pytest.mark.asyncio
    async def test_validate_fresh_workflow_fails(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)

        response = await builder.execute({"action": "validate_workflow", "id": workflow["id"]})

        assert response["success"] is True
        assert response["validation"]["isValid"] is False
        assert "Workflow must have exactly one Output node" in response["validation"]["errors"]
        assert response["message"] == "Workflow validation failed with 1 error(s)"

    @pytest.mark.asyncio
    async def test_validate_unsaved_nodes(self, builder: WorkflowBuilder) -> None:
        nodes, edges = linear_graph()

        response = await builder.execute({
            "action": "validate_workflow", "validateNodes": nodes, "validateEdges": edges,
        })

        assert response["workflowId"] is None
        assert response["validation"]["isValid"] is True

    @pytest.mark.asyncio
    async def test_dry_run(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder, noGenerateInputNode=True)
        nodes, edges = linear_graph()
        await builder.execute({
            "action": "update_structure", "id": workflow["id"], "nodes": nodes, "edges": edges,
        })

        response = await builder.execute({"action": "test_workflow", "id": workflow["id"]})

        assert response["dryRun"] is True
        assert response["testData"] == {"message": "Test input", "userId": "test-user"}
        assert response["result"]["status"] == "dry_run_completed"
        assert response["result"]["nodeCount"] == 3
        assert response["result"]["edgeCount"] == 2

    @pytest.mark.asyncio
    async def test_dry_run_of_invalid_workflow(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)

        response = await builder.execute({
            "action": "test_workflow", "id": workflow["id"], "testData": {"message": "hi"},
        })

        assert response["testData"] == {"message": "hi"}
        assert response["result"]["status"] == "dry_run_failed"
        assert response["result"]["errors"]

    @pytest.mark.asyncio
    async def test_full_execution_not_supported(self, builder: WorkflowBuilder) -> None:
        workflow = await _create(builder)

        response = await builder.execute({
            "action": "test_workflow", "id": workflow["id"], "dryRun": False,
        })

        assert response["success"] is True
        assert response["result"]["status"] == "execution_not_supported"


class TestCatalogActions:
    """Tests for catalog, guide and analytics actions."""

    @pytest.mark.asyncio
    async def test_get_node_details(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "get_node_details", "nodeKind": "condition"})

        assert response["nodeKind"] == "condition"
        assert response["details"]["name"]

    @pytest.mark.asyncio
    async def test_get_node_details_unknown(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "get_node_details", "nodeKind": "webhook"})

        assert response["error"] == "Unknown node kind: webhook"

    @pytest.mark.asyncio
    async def test_get_node_details_requires_kind(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "get_node_details"})

        assert response["error"] == "Node kind is required for getting node details"

    @pytest.mark.asyncio
    async def test_get_templates(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "get_templates"})

        assert response["total"] == 4
        assert {t["id"] for t in response["templates"]} >= {"simple-chatbot", "conditional-workflow"}

    @pytest.mark.asyncio
    async def test_guides(self, builder: WorkflowBuilder) -> None:
        data_flow = await builder.execute({"action": "get_data_flow_guide"})
        connection = await builder.execute({"action": "get_connection_guide"})

        assert "{{" in data_flow["dataFlowGuide"]
        assert data_flow["quickReference"]
        assert connection["quickStart"]

    @pytest.mark.asyncio
    async def test_validate_uuid(self, builder: WorkflowBuilder) -> None:
        valid = await builder.execute({"action": "validate_uuid", "uuid": new_id()})
        invalid = await builder.execute({"action": "validate_uuid", "uuid": "node-1"})

        assert valid["isValid"] is True
        assert invalid["isValid"] is False
        assert invalid["validation"]["issues"]
        assert invalid["documentation"]["overview"]["format"]

    @pytest.mark.asyncio
    async def test_validate_uuid_requires_value(self, builder: WorkflowBuilder) -> None:
        response = await builder.execute({"action": "validate_uuid"})

        assert response["error"] == "UUID is required for validation"

    @pytest.mark.asyncio
    async def test_get_analytics(
        self, builder: WorkflowBuilder, other_builder: WorkflowBuilder
    ) -> None:
        await _create(builder, name="Mine", isPublished=True)
        await _create(other_builder, name="Theirs", visibility="public")

        response = await builder.execute({"action": "get_analytics"})

        analytics = response["analytics"]
        assert analytics["totalWorkflows"] == 2
        assert analytics["ownedWorkflows"] == 1
        assert analytics["publicWorkflows"] == 1
        assert analytics["publishedWorkflows"] == 1
        assert analytics["visibilityDistribution"] == {"private": 1, "public": 1, "readonly": 0}
        assert len(analytics["recentActivity"]) == 2
