"""Descriptions of every node kind, as shown to the LLM."""

from __future__ import annotations

from typing import Any

from flowbuilder.core.types import NodeKind
from flowbuilder.errors import UnknownNodeKindError

NODE_TYPE_DETAILS: dict[NodeKind, dict[str, Any]] = {
    NodeKind.INPUT: {
        "name": "Input Node",
        "description": (
            "Entry point of the workflow that receives initial data and passes it "
            "to connected nodes."
        ),
        "purpose": (
            "Acts as the starting point for workflow execution, accepting user input "
            "or external data."
        ),
        "capabilities": [
            "Receives initial workflow input data",
            "Defines output schema for data flow to subsequent nodes",
            "Serves as the single entry point for workflow execution",
            "Passes data through to connected nodes",
        ],
        "configuration": {
            "required": ["name", "outputSchema"],
            "optional": ["description"],
            "outputSchema": "Defines the structure of data that will be passed to connected nodes",
        },
        "useCases": [
            "Accepting user queries or requests",
            "Receiving data from external APIs",
            "Starting data processing workflows",
            "Defining input parameters for complex operations",
        ],
        "examples": [
            "User query input for a chatbot workflow",
            "API request data for processing",
            "File upload information for document processing",
            "Search parameters for data retrieval",
        ],
        "limitations": [
            "Only one Input node allowed per workflow",
            "Must have at least one outgoing edge",
            "Cannot receive data from other nodes",
        ],
        "icon": "📥",
        "category": "Data Flow",
    },
    NodeKind.OUTPUT: {
        "name": "Output Node",
        "description": (
            "Exit point of the workflow that collects data from previous nodes and "
            "produces the final result."
        ),
        "purpose": "Consolidates results from multiple nodes into a structured final output.",
        "capabilities": [
            "Collects data from multiple source nodes",
            "Combines results into structured output",
            "Defines final workflow result format",
            "Maps source node outputs to final output keys",
        ],
        "configuration": {
            "required": ["name", "outputData"],
            "optional": ["description"],
            "outputData": (
                "Array of key-source mappings defining how to collect and structure "
                "final output"
            ),
        },
        "useCases": [
            "Generating final reports from multiple data sources",
            "Creating structured API responses",
            "Producing formatted output for users",
            "Consolidating results from parallel processing",
        ],
        "examples": [
            "Combining LLM response with search results",
            "Merging data from multiple API calls",
            "Creating a final report from analysis nodes",
            "Formatting results for display",
        ],
        "limitations": [
            "Only one Output node allowed per workflow",
            "Must have at least one incoming edge",
            "Cannot send data to other nodes",
        ],
        "icon": "📤",
        "category": "Data Flow",
    },
    NodeKind.LLM: {
        "name": "LLM Node",
        "description": (
            "Interacts with Large Language Models to generate text responses or "
            "structured data."
        ),
        "purpose": (
            "Leverages AI models for text generation, analysis, and structured data "
            "processing."
        ),
        "capabilities": [
            "Generates text responses using AI models",
            "Supports multiple message types (system, user, assistant)",
            "References outputs from previous nodes via {{nodeName.field}}",
            "Produces structured data based on output schema",
            "Configurable model selection",
        ],
        "configuration": {
            "required": ["name", "model", "messages", "outputSchema"],
            "optional": ["description"],
            "model": "AI model to use (e.g., GPT-4, Claude, etc.)",
            "messages": "Array of messages with roles and content",
            "outputSchema": "Defines the structure of the generated response",
        },
        "useCases": [
            "Text generation and completion",
            "Data analysis and insights",
            "Content summarization",
            "Code generation and explanation",
            "Translation and language processing",
            "Structured data extraction",
        ],
        "examples": [
            "Generate product descriptions from specifications",
            "Analyze customer feedback sentiment",
            "Summarize long documents",
            "Generate code from requirements",
            "Extract structured data from unstructured text",
        ],
        "limitations": [
            "Requires valid AI model configuration",
            "Token limits based on selected model",
            "Response quality depends on prompt quality",
        ],
        "icon": "🤖",
        "category": "AI Processing",
    },
    NodeKind.TOOL: {
        "name": "Tool Node",
        "description": (
            "Executes external tools (primarily MCP tools) with optional LLM-generated "
            "parameters."
        ),
        "purpose": "Integrates external functionality and APIs into workflow execution.",
        "capabilities": [
            "Executes MCP (Model Context Protocol) tools",
            "Runs built-in application tools",
            "Uses LLM to generate tool parameters from messages",
            "Handles tool execution results",
            "Supports parameter validation",
        ],
        "configuration": {
            "required": ["name", "tool", "model", "message"],
            "optional": ["description"],
            "tool": "Tool definition with ID, description, and schemas",
            "model": "AI model for parameter generation",
            "message": "Message describing what the tool should do",
        },
        "useCases": [
            "API integrations and external service calls",
            "File operations and data processing",
            "Web scraping and data extraction",
            "Database operations",
            "Custom business logic execution",
        ],
        "examples": [
            "Search the web for information",
            "Send emails or notifications",
            "Process uploaded files",
            "Query databases",
            "Integrate with third-party APIs",
        ],
        "limitations": [
            "Tool must be properly configured and available",
            "Parameter generation depends on LLM quality",
            "Tool execution may have timeouts or failures",
        ],
        "icon": "🔧",
        "category": "Integration",
    },
    NodeKind.HTTP: {
        "name": "HTTP Node",
        "description": (
            "Performs HTTP requests to external services with configurable parameters."
        ),
        "purpose": "Makes REST API calls and integrates with external web services.",
        "capabilities": [
            "Supports all HTTP methods (GET, POST, PUT, DELETE, PATCH, HEAD)",
            "Dynamic URL, headers, query parameters, and body",
            "Variable substitution from previous node outputs",
            "Configurable timeout and error handling",
            "Comprehensive response data including status and headers",
        ],
        "configuration": {
            "required": ["name", "url", "method"],
            "optional": ["description", "headers", "query", "body", "timeout"],
            "url": "Request URL (can reference other node outputs)",
            "method": "HTTP method to use",
            "headers": "Array of key-value header pairs",
            "query": "Array of key-value query parameters",
            "body": "Request body content",
            "timeout": "Request timeout in milliseconds (default: 30000)",
        },
        "useCases": [
            "REST API integrations",
            "Webhook triggers",
            "Data fetching from external services",
            "Authentication with external systems",
            "File uploads and downloads",
        ],
        "examples": [
            "Fetch user data from CRM API",
            "Send notifications via webhook",
            "Upload files to cloud storage",
            "Query external databases",
            "Trigger external processes",
        ],
        "limitations": [
            "Network connectivity required",
            "Subject to external service availability",
            "Rate limits may apply",
            "Authentication may be required",
        ],
        "icon": "🌐",
        "category": "Integration",
    },
    NodeKind.CONDITION: {
        "name": "Condition Node",
        "description": (
            "Provides conditional branching in workflows based on evaluated conditions."
        ),
        "purpose": "Enables dynamic workflow paths and decision-making logic.",
        "capabilities": [
            "Evaluates conditions using if-elseIf-else structure",
            "Supports AND/OR logical operators",
            "References data from previous nodes",
            "Routes execution to different paths",
            "Dynamic edge resolution based on conditions",
        ],
        "configuration": {
            "required": ["name", "branches"],
            "optional": ["description"],
            "branches": "Conditional logic structure with if, elseIf, and else branches",
        },
        "useCases": [
            "Workflow branching based on data values",
            "Error handling and retry logic",
            "Different processing paths for different data types",
            "User permission-based routing",
            "Quality gates and validation checks",
        ],
        "examples": [
            "Route based on user type (premium vs free)",
            "Handle different error scenarios",
            "Process different file formats differently",
            "Apply different business rules",
            "Skip steps based on conditions",
        ],
        "limitations": [
            "Condition evaluation must be deterministic",
            "Complex conditions may impact performance",
            "All branches must have valid target nodes",
        ],
        "icon": "🔀",
        "category": "Control Flow",
    },
    NodeKind.TEMPLATE: {
        "name": "Template Node",
        "description": "Processes text templates with variable substitution.",
        "purpose": (
            "Generates dynamic text content by combining templates with data from "
            "other nodes."
        ),
        "capabilities": [
            "Variable substitution from previous node outputs",
            "Support for mentions in template content",
            "Rich text templates",
            "Simple text output for easy consumption",
            "Dynamic content generation",
        ],
        "configuration": {
            "required": ["name", "template"],
            "optional": ["description"],
            "template": "Template configuration with type and content",
        },
        "useCases": [
            "Email template generation",
            "Report formatting",
            "Dynamic content creation",
            "Message personalization",
            "Document generation",
        ],
        "examples": [
            "Generate personalized emails",
            "Create dynamic reports",
            "Format API responses",
            "Generate user notifications",
            "Create document templates",
        ],
        "limitations": [
            "Template syntax must be valid",
            "Referenced variables must exist",
            "Output is limited to text format",
        ],
        "icon": "📝",
        "category": "Content Generation",
    },
    NodeKind.NOTE: {
        "name": "Note Node",
        "description": (
            "Documentation and annotation node that doesn't affect workflow execution."
        ),
        "purpose": "Provides documentation, comments, and annotations within workflows.",
        "capabilities": [
            "Adds documentation to workflows",
            "Provides context and explanations",
            "Does not affect execution flow",
            "Supports rich text content",
            "Helps with workflow understanding",
        ],
        "configuration": {
            "required": ["name"],
            "optional": ["description"],
            "content": "Documentation content (not executed)",
        },
        "useCases": [
            "Workflow documentation",
            "Process explanations",
            "Team collaboration notes",
            "Implementation details",
            "Troubleshooting guides",
        ],
        "examples": [
            "Explain complex workflow logic",
            "Document API endpoints used",
            "Provide troubleshooting steps",
            "Add implementation notes",
            "Create workflow overview",
        ],
        "limitations": [
            "Does not process or output data",
            "Cannot be referenced by other nodes",
            "Purely for documentation purposes",
        ],
        "icon": "📋",
        "category": "Documentation",
    },
    NodeKind.CODE: {
        "name": "Code Node",
        "description": "Code node for custom scripts (execution not available yet).",
        "purpose": "Execute custom code snippets and scripts within workflows.",
        "capabilities": [
            "Execute custom code snippets",
            "Support for multiple programming languages",
            "Access to workflow data and context",
            "Custom business logic implementation",
            "Integration with external libraries",
        ],
        "configuration": {
            "required": ["name", "code", "language"],
            "optional": ["description", "dependencies"],
            "code": "Code snippet to execute",
            "language": "Programming language (JavaScript, Python, etc.)",
            "dependencies": "Required libraries or modules",
        },
        "useCases": [
            "Custom data transformations",
            "Complex calculations",
            "Integration with specialized libraries",
            "Custom business logic",
            "Data validation and processing",
        ],
        "examples": [
            "Custom data transformation scripts",
            "Mathematical calculations",
            "Data validation logic",
            "Integration with specialized APIs",
            "Custom formatting functions",
        ],
        "limitations": [
            "Currently not implemented",
            "Security considerations for code execution",
            "Resource limitations",
            "Error handling complexity",
        ],
        "icon": "💻",
        "category": "Custom Logic",
    },
}

NODE_CATEGORIES: dict[str, list[str]] = {
    "Data Flow": ["input", "output"],
    "AI Processing": ["llm"],
    "Integration": ["tool", "http"],
    "Control Flow": ["condition"],
    "Content Generation": ["template"],
    "Documentation": ["note"],
    "Custom Logic": ["code"],
}


def get_node_details(kind: NodeKind | str) -> dict[str, Any]:
    """Get the catalog entry for a node kind.

    Args:
        kind: Node kind or its string value.

    Returns:
        A copy of the entry with a ``kind`` key added.

    Raises:
        UnknownNodeKindError: If the kind is not in the catalog.
    """
    try:
        node_kind = NodeKind(kind)
    except ValueError:
        raise UnknownNodeKindError(str(kind)) from None
    return {"kind": node_kind.value, **NODE_TYPE_DETAILS[node_kind]}


def list_node_types() -> list[dict[str, Any]]:
    """All catalog entries in declaration order."""
    return [get_node_details(kind) for kind in NODE_TYPE_DETAILS]
