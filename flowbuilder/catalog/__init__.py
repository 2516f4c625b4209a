"""Static catalog: node kinds, starter templates and guides."""

from flowbuilder.catalog.guides import (
    CONNECTION_QUICK_START,
    DATA_FLOW_DOCUMENTATION,
    DATA_FLOW_QUICK_REFERENCE,
    UUID_FORMAT_DOCUMENTATION,
    UUID_GUIDANCE,
)
from flowbuilder.catalog.node_types import (
    NODE_CATEGORIES,
    NODE_TYPE_DETAILS,
    get_node_details,
    list_node_types,
)
from flowbuilder.catalog.templates import (
    TEMPLATE_CATEGORIES,
    WORKFLOW_TEMPLATES,
    list_templates,
)

__all__ = [
    "CONNECTION_QUICK_START",
    "DATA_FLOW_DOCUMENTATION",
    "DATA_FLOW_QUICK_REFERENCE",
    "NODE_CATEGORIES",
    "NODE_TYPE_DETAILS",
    "TEMPLATE_CATEGORIES",
    "UUID_FORMAT_DOCUMENTATION",
    "UUID_GUIDANCE",
    "WORKFLOW_TEMPLATES",
    "get_node_details",
    "list_node_types",
    "list_templates",
]
