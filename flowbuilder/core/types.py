"""Core type definitions for FlowBuilder.

This module defines the workflow graph model: node kinds, the per-kind
node configurations (a tagged union keyed by ``kind``), nodes, edges and
workflow records. All types use Pydantic for validation and serialization
and accept both the camelCase wire names and snake_case field names.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class NodeKind(str, Enum):
    """Closed set of node kinds."""

    INPUT = "input"
    OUTPUT = "output"
    LLM = "llm"
    TOOL = "tool"
    HTTP = "http"
    CONDITION = "condition"
    TEMPLATE = "template"
    NOTE = "note"
    CODE = "code"


class Visibility(str, Enum):
    """Who besides the owner may see a workflow."""

    PRIVATE = "private"
    PUBLIC = "public"
    READONLY = "readonly"


class _WireModel(BaseModel):
    """Base for models exchanged with the UI and the LLM tool."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


# Node configuration variants

class OutputSource(_WireModel):
    """Pointer into another node's output."""

    node_id: str = Field(..., alias="nodeId")
    path: list[str] = Field(default_factory=list)


class OutputDataEntry(_WireModel):
    """One key of the final workflow result."""

    key: str
    source: OutputSource | None = None


class LLMMessage(_WireModel):
    """Prompt message of an LLM node."""

    role: str = "user"
    content: str | dict[str, Any] | list[Any] | None = None


class KeyValue(_WireModel):
    """Header or query parameter of an HTTP node."""

    key: str
    value: str | None = None


class Condition(_WireModel):
    """Single comparison inside a condition branch."""

    source: OutputSource | None = None
    operator: str
    value: Any = None


class ConditionBranch(_WireModel):
    """An ``if``, ``elseIf`` or ``else`` branch.

    The branch ``id`` is what an outgoing edge carries as ``sourceHandle``.
    """

    id: str
    type: Literal["if", "elseIf", "else"]
    conditions: list[Condition] = Field(default_factory=list)
    logical_operator: Literal["AND", "OR"] = Field("AND", alias="logicalOperator")


class ConditionBranches(_WireModel):
    if_: ConditionBranch | None = Field(None, alias="if")
    else_if: list[ConditionBranch] = Field(default_factory=list, alias="elseIf")
    else_: ConditionBranch | None = Field(None, alias="else")

    def ordered(self) -> list[ConditionBranch]:
        """Branches in evaluation order."""
        branches = [self.if_] if self.if_ else []
        branches.extend(self.else_if)
        if self.else_:
            branches.append(self.else_)
        return branches


class InputNodeConfig(_WireModel):
    kind: Literal["input"] = "input"
    output_schema: dict[str, Any] = Field(default_factory=dict, alias="outputSchema")


class OutputNodeConfig(_WireModel):
    kind: Literal["output"] = "output"
    output_data: list[OutputDataEntry] = Field(default_factory=list, alias="outputData")


class LLMNodeConfig(_WireModel):
    kind: Literal["llm"] = "llm"
    model: dict[str, Any] | str | None = None
    messages: list[LLMMessage] = Field(default_factory=list)
    output_schema: dict[str, Any] = Field(default_factory=dict, alias="outputSchema")


class ToolNodeConfig(_WireModel):
    kind: Literal["tool"] = "tool"
    tool: dict[str, Any] | None = None
    model: dict[str, Any] | str | None = None
    message: str | dict[str, Any] | None = None


class HttpNodeConfig(_WireModel):
    kind: Literal["http"] = "http"
    url: str = ""
    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"] = "GET"
    headers: list[KeyValue] = Field(default_factory=list)
    query: list[KeyValue] = Field(default_factory=list)
    body: str | dict[str, Any] | None = None
    timeout: int = Field(30000, gt=0, description="Request timeout in milliseconds")


class ConditionNodeConfig(_WireModel):
    kind: Literal["condition"] = "condition"
    branches: ConditionBranches = Field(default_factory=ConditionBranches)


class TemplateNodeConfig(_WireModel):
    kind: Literal["template"] = "template"
    template: dict[str, Any] | str | None = None


class NoteNodeConfig(_WireModel):
    kind: Literal["note"] = "note"
    content: str | dict[str, Any] | None = None


class CodeNodeConfig(_WireModel):
    kind: Literal["code"] = "code"
    code: str = ""
    language: str = "python"
    dependencies: list[str] = Field(default_factory=list)


NodeConfig = Annotated[
    Union[
        InputNodeConfig,
        OutputNodeConfig,
        LLMNodeConfig,
        ToolNodeConfig,
        HttpNodeConfig,
        ConditionNodeConfig,
        TemplateNodeConfig,
        NoteNodeConfig,
        CodeNodeConfig,
    ],
    Field(discriminator="kind"),
]

_node_config_adapter: TypeAdapter[Any] = TypeAdapter(NodeConfig)


def parse_node_config(kind: NodeKind | str, data: dict[str, Any] | None = None) -> Any:
    """Validate a raw config blob into the variant selected by ``kind``.

    Raises:
        pydantic.ValidationError: If the blob does not fit the variant.
    """
    kind_value = kind.value if isinstance(kind, NodeKind) else str(kind)
    return _node_config_adapter.validate_python({**(data or {}), "kind": kind_value})


# Graph elements

class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class NodeUIConfig(_WireModel):
    position: Position | None = None


class EdgeUIConfig(_WireModel):
    source_handle: str | None = Field(None, alias="sourceHandle")
    target_handle: str | None = Field(None, alias="targetHandle")


_NODE_RECORD_KEYS = frozenset({"workflowId", "workflow_id", "createdAt", "updatedAt"})


class WorkflowNode(_WireModel):
    """A node of the workflow graph.

    Extra top-level keys are kept, so flattened template definitions
    (``messages`` next to ``kind``) survive a round trip.
    """

    id: str = Field(..., description="Node ID (v4 UUID when persisted)")
    kind: NodeKind = Field(..., description="Node kind")
    name: str = Field("", description="Node name, used in {{name.field}} references")
    description: str | None = None
    node_config: dict[str, Any] = Field(default_factory=dict, alias="nodeConfig")
    ui_config: NodeUIConfig = Field(default_factory=NodeUIConfig, alias="uiConfig")

    @property
    def label(self) -> str:
        """Name for diagnostics, falling back to the id."""
        return self.name or self.id

    def raw_config(self) -> dict[str, Any]:
        """``nodeConfig`` merged over extra top-level keys.

        Flattened definitions keep their config next to ``kind``; record
        bookkeeping keys (``workflowId``, timestamps) are dropped.
        """
        data = {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key not in _NODE_RECORD_KEYS
        }
        data.update(self.node_config)
        return data

    @property
    def config(self) -> Any:
        """Typed configuration for this node's kind."""
        return parse_node_config(self.kind, self.raw_config())


class WorkflowEdge(_WireModel):
    """A directed connection between two nodes."""

    id: str = Field("", description="Edge ID (v4 UUID when persisted)")
    source: str = Field(..., description="Source node ID")
    target: str = Field(..., description="Target node ID")
    ui_config: EdgeUIConfig = Field(default_factory=EdgeUIConfig, alias="uiConfig")

    @model_validator(mode="before")
    @classmethod
    def _fold_handles(cls, data: Any) -> Any:
        """Move top-level ``sourceHandle``/``targetHandle`` into ``uiConfig``."""
        if not isinstance(data, dict):
            return data
        handles = {
            key: data[key]
            for key in ("sourceHandle", "targetHandle")
            if data.get(key) is not None
        }
        if not handles:
            return data
        data = {k: v for k, v in data.items() if k not in handles}
        ui = data.get("uiConfig", data.get("ui_config")) or {}
        if isinstance(ui, BaseModel):
            ui = ui.model_dump(by_alias=True, exclude_none=True)
        data["uiConfig"] = {**handles, **ui}
        data.pop("ui_config", None)
        return data

    @property
    def source_handle(self) -> str | None:
        return self.ui_config.source_handle

    @property
    def target_handle(self) -> str | None:
        return self.ui_config.target_handle


# Workflow records

class WorkflowIcon(BaseModel):
    type: Literal["emoji"] = "emoji"
    value: str = Field(..., description="Emoji value for the workflow icon")
    style: dict[str, str] | None = None


class Workflow(_WireModel):
    """Workflow metadata without its graph.

    An empty ``id`` marks a workflow not yet saved.
    """

    id: str = ""
    name: str
    description: str | None = None
    icon: WorkflowIcon | None = None
    visibility: Visibility = Visibility.PRIVATE
    is_published: bool = Field(False, alias="isPublished")
    version: str = "0.1.0"
    user_id: str = Field(..., alias="userId")
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")


class WorkflowSummary(Workflow):
    """Workflow row as shown in listings."""

    user_name: str | None = Field(None, alias="userName")
    user_avatar: str | None = Field(None, alias="userAvatar")


class WorkflowStructure(Workflow):
    """Workflow with its nodes and edges."""

    nodes: list[WorkflowNode] = Field(default_factory=list)
    edges: list[WorkflowEdge] = Field(default_factory=list)


def to_node(node: WorkflowNode | dict[str, Any]) -> WorkflowNode:
    """Coerce a raw mapping into a WorkflowNode."""
    if isinstance(node, WorkflowNode):
        return node
    return WorkflowNode.model_validate(node)


def to_edge(edge: WorkflowEdge | dict[str, Any]) -> WorkflowEdge:
    """Coerce a raw mapping into a WorkflowEdge."""
    if isinstance(edge, WorkflowEdge):
        return edge
    return WorkflowEdge.model_validate(edge)
