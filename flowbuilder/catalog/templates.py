"""Starter workflows the LLM can copy from.

Template nodes use readable ids and the flattened node style (config keys
next to ``kind``). Ids must be replaced with v4 UUIDs before the nodes
and edges are saved with ``update_structure``.
"""

from __future__ import annotations

import copy
from typing import Any

_GPT4 = {"provider": "openai", "name": "gpt-4", "id": "gpt-4"}
_GPT35 = {"provider": "openai", "name": "gpt-3.5-turbo", "id": "gpt-3.5-turbo"}


def _schema(**properties: tuple[str, str]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            key: {"type": type_, "description": description}
            for key, (type_, description) in properties.items()
        },
    }


def _source(node_id: str, *path: str) -> dict[str, Any]:
    return {"nodeId": node_id, "path": list(path)}


def _llm_node(
    node_id: str,
    name: str,
    description: str,
    system: str,
    user: str,
    output_schema: dict[str, Any],
    model: dict[str, str] = _GPT4,
) -> dict[str, Any]:
    return {
        "id": node_id,
        "kind": "llm",
        "name": name,
        "description": description,
        "model": dict(model),
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "outputSchema": output_schema,
    }


def _branch(branch_id: str, type_: str, conditions: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "id": branch_id,
        "type": type_,
        "conditions": conditions or [],
        "logicalOperator": "AND",
    }


WORKFLOW_TEMPLATES: dict[str, dict[str, Any]] = {
    "simple-chatbot": {
        "name": "Simple Chatbot",
        "description": (
            "A basic chatbot that processes user input and generates responses using an LLM."
        ),
        "category": "AI & Chat",
        "complexity": "Beginner",
        "estimatedTime": "5 minutes",
        "nodes": [
            {
                "id": "input",
                "kind": "input",
                "name": "User Input",
                "description": "Receives user messages",
                "outputSchema": _schema(
                    message=("string", "User's message"),
                    userId=("string", "User identifier"),
                ),
            },
            _llm_node(
                "llm",
                "AI Response",
                "Generates AI response to user message",
                "You are a helpful assistant. Respond to the user's message in a "
                "friendly and helpful way.",
                "{{input.message}}",
                _schema(
                    answer=("string", "AI response"),
                    totalTokens=("number", "Tokens used"),
                ),
            ),
            {
                "id": "output",
                "kind": "output",
                "name": "Response",
                "description": "Returns the AI response",
                "outputData": [
                    {"key": "response", "source": _source("llm", "answer")},
                    {"key": "tokens", "source": _source("llm", "totalTokens")},
                ],
            },
        ],
        "edges": [
            {"source": "input", "target": "llm"},
            {"source": "llm", "target": "output"},
        ],
    },
    "data-processing-pipeline": {
        "name": "Data Processing Pipeline",
        "description": (
            "Processes data through multiple steps: validation, transformation, and analysis."
        ),
        "category": "Data Processing",
        "complexity": "Intermediate",
        "estimatedTime": "15 minutes",
        "nodes": [
            {
                "id": "input",
                "kind": "input",
                "name": "Data Input",
                "description": "Receives raw data for processing",
                "outputSchema": _schema(
                    data=("array", "Array of data items"),
                    metadata=("object", "Data metadata"),
                ),
            },
            _llm_node(
                "validation",
                "Data Validation",
                "Validates data quality and structure",
                "You are a data validation expert. Analyze the provided data and "
                "return validation results.",
                "Validate this data: {{input.data}}",
                _schema(
                    isValid=("boolean", "Whether data is valid"),
                    issues=("array", "List of validation issues"),
                    summary=("string", "Validation summary"),
                ),
            ),
            {
                "id": "condition",
                "kind": "condition",
                "name": "Validation Check",
                "description": "Routes based on validation results",
                "branches": {
                    "if": _branch(
                        "valid",
                        "if",
                        [{"source": _source("validation", "isValid"), "operator": "IsTrue"}],
                    ),
                    "else": _branch("invalid", "else"),
                },
            },
            _llm_node(
                "transform",
                "Data Transformation",
                "Transforms valid data into processed format",
                "You are a data transformation expert. Process and clean the data.",
                "Transform this data: {{input.data}}",
                _schema(
                    processedData=("array", "Transformed data"),
                    transformationLog=("string", "Transformation details"),
                ),
            ),
            {
                "id": "error-handler",
                "kind": "template",
                "name": "Error Handler",
                "description": "Handles validation errors",
                "template": {
                    "type": "text",
                    "content": "Data validation failed. Issues found: {{validation.issues}}",
                },
            },
            {
                "id": "output",
                "kind": "output",
                "name": "Final Result",
                "description": "Returns processed data or error information",
                "outputData": [
                    {"key": "result", "source": _source("transform", "processedData")},
                    {"key": "status", "source": _source("validation", "isValid")},
                ],
            },
        ],
        "edges": [
            {"source": "input", "target": "validation"},
            {"source": "validation", "target": "condition"},
            {"source": "condition", "target": "transform", "sourceHandle": "valid"},
            {"source": "condition", "target": "error-handler", "sourceHandle": "invalid"},
            {"source": "transform", "target": "output"},
            {"source": "error-handler", "target": "output"},
        ],
    },
    "api-integration": {
        "name": "API Integration Workflow",
        "description": (
            "Fetches data from external APIs, processes it, and returns formatted results."
        ),
        "category": "Integration",
        "complexity": "Intermediate",
        "estimatedTime": "20 minutes",
        "nodes": [
            {
                "id": "input",
                "kind": "input",
                "name": "API Request",
                "description": "Receives API request parameters",
                "outputSchema": _schema(
                    endpoint=("string", "API endpoint URL"),
                    parameters=("object", "Request parameters"),
                ),
            },
            {
                "id": "http-call",
                "kind": "http",
                "name": "API Call",
                "description": "Makes HTTP request to external API",
                "url": "{{input.endpoint}}",
                "method": "GET",
                "headers": [
                    {"key": "Content-Type", "value": "application/json"},
                    {"key": "User-Agent", "value": "WorkflowBot/1.0"},
                ],
                "query": [{"key": "format", "value": "json"}],
                "timeout": 30000,
            },
            _llm_node(
                "process-data",
                "Data Processing",
                "Processes and analyzes API response",
                "You are a data analyst. Process the API response and extract key insights.",
                "Analyze this API response: {{http-call.response.body}}",
                _schema(
                    insights=("array", "Key insights from the data"),
                    summary=("string", "Data summary"),
                    recommendations=("array", "Actionable recommendations"),
                ),
            ),
            {
                "id": "output",
                "kind": "output",
                "name": "Processed Results",
                "description": "Returns processed API data",
                "outputData": [
                    {"key": "rawData", "source": _source("http-call", "response", "body")},
                    {"key": "insights", "source": _source("process-data", "insights")},
                    {"key": "summary", "source": _source("process-data", "summary")},
                ],
            },
        ],
        "edges": [
            {"source": "input", "target": "http-call"},
            {"source": "http-call", "target": "process-data"},
            {"source": "process-data", "target": "output"},
        ],
    },
    "conditional-workflow": {
        "name": "Conditional Processing Workflow",
        "description": (
            "Demonstrates conditional branching based on user type or data conditions."
        ),
        "category": "Control Flow",
        "complexity": "Intermediate",
        "estimatedTime": "10 minutes",
        "nodes": [
            {
                "id": "input",
                "kind": "input",
                "name": "User Input",
                "description": "Receives user information",
                "outputSchema": _schema(
                    userType=("string", "Type of user (premium, free, admin)"),
                    request=("string", "User's request"),
                ),
            },
            {
                "id": "user-check",
                "kind": "condition",
                "name": "User Type Check",
                "description": "Routes based on user type",
                "branches": {
                    "if": _branch(
                        "premium",
                        "if",
                        [{
                            "source": _source("input", "userType"),
                            "operator": "Equals",
                            "value": "premium",
                        }],
                    ),
                    "elseIf": [
                        _branch(
                            "admin",
                            "elseIf",
                            [{
                                "source": _source("input", "userType"),
                                "operator": "Equals",
                                "value": "admin",
                            }],
                        ),
                    ],
                    "else": _branch("free", "else"),
                },
            },
            _llm_node(
                "premium-service",
                "Premium Service",
                "Provides enhanced service for premium users",
                "You are providing premium service. Give detailed, comprehensive responses.",
                "{{input.request}}",
                _schema(
                    response=("string", "Premium service response"),
                    features=("array", "Available premium features"),
                ),
            ),
            _llm_node(
                "admin-service",
                "Admin Service",
                "Provides administrative functions",
                "You are providing admin service. Include administrative options and "
                "system information.",
                "{{input.request}}",
                _schema(
                    response=("string", "Admin service response"),
                    adminOptions=("array", "Available admin options"),
                ),
            ),
            _llm_node(
                "free-service",
                "Free Service",
                "Provides basic service for free users",
                "You are providing free service. Give helpful but concise responses. "
                "Mention upgrade options.",
                "{{input.request}}",
                _schema(
                    response=("string", "Free service response"),
                    upgradePrompt=("string", "Upgrade suggestion"),
                ),
                model=_GPT35,
            ),
            {
                "id": "output",
                "kind": "output",
                "name": "Service Response",
                "description": "Returns appropriate service response",
                "outputData": [
                    {"key": "response", "source": _source("premium-service", "response")},
                    {"key": "userType", "source": _source("input", "userType")},
                ],
            },
        ],
        "edges": [
            {"source": "input", "target": "user-check"},
            {"source": "user-check", "target": "premium-service", "sourceHandle": "premium"},
            {"source": "user-check", "target": "admin-service", "sourceHandle": "admin"},
            {"source": "user-check", "target": "free-service", "sourceHandle": "free"},
            {"source": "premium-service", "target": "output"},
            {"source": "admin-service", "target": "output"},
            {"source": "free-service", "target": "output"},
        ],
    },
}

TEMPLATE_CATEGORIES: dict[str, list[str]] = {
    "AI & Chat": ["simple-chatbot"],
    "Data Processing": ["data-processing-pipeline"],
    "Integration": ["api-integration"],
    "Control Flow": ["conditional-workflow"],
}


def list_templates() -> list[dict[str, Any]]:
    """Deep copies of all templates, each with its ``id`` key."""
    return [
        {"id": template_id, **copy.deepcopy(template)}
        for template_id, template in WORKFLOW_TEMPLATES.items()
    ]
