"""Reference documentation returned by the guide actions."""

from __future__ import annotations

from typing import Any

from flowbuilder.validation.identifiers import (
    EXAMPLE_UUID,
    EXPECTED_FORMAT,
    UUID_V4_PATTERN,
)

UUID_FORMAT_DOCUMENTATION: dict[str, Any] = {
    "overview": {
        "title": "Workflow ID UUID Format",
        "description": (
            "Workflow, node and edge IDs must be valid UUIDs (version 4) following "
            "the exact format specification"
        ),
        "format": EXPECTED_FORMAT,
        "example": EXAMPLE_UUID,
    },
    "formatSpecification": {
        "pattern": UUID_V4_PATTERN.pattern,
        "breakdown": {
            "8-4-4-4-12": "Standard UUID format with hyphens",
            "group 1 (8 chars)": "Random data",
            "group 2 (4 chars)": "Random data",
            "group 3 (4 chars)": "Version 4 (must start with 4) + random data",
            "group 4 (4 chars)": "Variant (8, 9, a, b) + random data",
            "group 5 (12 chars)": "Random data",
        },
        "requirements": [
            "Must be exactly 36 characters long (32 hex + 4 hyphens)",
            "Must use lowercase hexadecimal characters (0-9, a-f)",
            "Must have hyphens at positions 9, 14, 19 and 24",
            "The 15th character must always be 4 (indicating version 4)",
            "The 20th character must be one of 8, 9, a, or b (UUID variant)",
            "Do not add prefixes like 'node-' or 'input-', use only the UUID itself",
        ],
    },
    "validExamples": [
        EXAMPLE_UUID,
        "b8f4c2a3-1234-4f56-9abc-1234567890de",
        "123e4567-e89b-42d3-a456-426614174000",
        "6ba7b810-9dad-41d1-80b4-00c04fd430c8",
        "f47ac10b-58cc-4372-a567-0e02b2c3d479",
    ],
    "invalidExamples": [
        {"example": "123e4567-e89b-42d3-a456-42661417400", "reason": "Too short - missing characters"},
        {"example": "123e4567-e89b-42d3-a456-4266141740000", "reason": "Too long - extra characters"},
        {"example": "123e4567-e89b-42d3-a456-426614174000-", "reason": "Extra hyphen at the end"},
        {"example": "123e4567e89b42d3a456426614174000", "reason": "Missing hyphens"},
        {
            "example": "123E4567-E89B-42D3-A456-426614174000",
            "reason": "Uppercase letters (must be lowercase)",
        },
        {
            "example": "123e4567-e89b-42d3-a456-42661417400g",
            "reason": "Invalid character 'g' (not hexadecimal)",
        },
        {
            "example": "123e4567-e89b-62d3-a456-426614174000",
            "reason": "Invalid version '6' (15th character must be 4)",
        },
        {
            "example": "123e4567-e89b-42d3-c456-426614174000",
            "reason": "Invalid variant 'c' (20th character must be 8, 9, a, or b)",
        },
        {
            "example": f"edge-{EXAMPLE_UUID}",
            "reason": "Has prefix 'edge-' (use only the UUID itself)",
        },
    ],
    "commonMistakes": [
        "Using uppercase letters instead of lowercase",
        "Missing or extra hyphens",
        "Wrong version digit (15th character must be 4)",
        "Wrong variant digit (20th character must be 8, 9, a, or b)",
        "Using non-hexadecimal characters",
        "Adding prefixes like 'node-' or 'edge-'",
        "Copy-paste errors with extra spaces or characters",
    ],
    "troubleshooting": {
        "Getting UUID format errors": [
            "Double-check the UUID is exactly 36 characters",
            "Ensure all letters are lowercase (a-f, not A-F)",
            "Verify hyphens are in correct positions",
            "Check that the 15th character is 4 (version 4)",
            "Check that the 20th character is 8, 9, a, or b (variant)",
            "Remove any prefixes like 'node-' or 'edge-'",
            "Use the 'validate_uuid' action to test your UUID",
        ],
        "Finding workflow IDs": [
            "Use 'list' action to see all your workflows with their IDs",
            "Use 'find_by_name' action to search by workflow name",
            "Copy the full UUID from the list results",
            "Don't modify or shorten the UUID",
        ],
    },
    "bestPractices": [
        "Always generate valid UUIDs (version 4) following the exact format",
        "Use only the UUID itself - no prefixes like 'node-' or 'edge-'",
        "Use the 'list' action to find workflow IDs by name",
        "Validate UUIDs before using them in actions",
        "Use descriptive workflow names to make finding IDs easier",
    ],
}

UUID_GUIDANCE: dict[str, Any] = {
    "note": "All node and edge IDs must be valid UUIDs (version 4)",
    "format": EXPECTED_FORMAT,
    "requirements": [
        "Each x must be a hexadecimal digit (0-9 or a-f)",
        "The 15th character must always be 4 (indicating version 4)",
        "The 20th character must be one of 8, 9, a, or b (UUID variant)",
        "Do not add prefixes like 'node-' or 'input-', use only the UUID itself",
    ],
    "validExamples": [
        EXAMPLE_UUID,
        "b8f4c2a3-1234-4f56-9abc-1234567890de",
    ],
    "invalidExamples": [
        f"edge-{EXAMPLE_UUID} (has prefix)",
        "node-123e4567-e89b-42d3-a456-426614174000 (has prefix)",
        f"{EXAMPLE_UUID}-extra (too long)",
    ],
}

DATA_FLOW_DOCUMENTATION = """
## Data Flow and Connection Documentation

This guide explains how data flows between nodes in a workflow and how to
connect them.

### Overview
- Output Schema defines what data a node produces
- Input references pull data from previous nodes
- Edges create the execution path and data flow
- Variable substitution uses {{nodeName.field}} syntax

### Connection Types
1. **Direct Connection**
   - One-to-one connection
   - Example: Input -> LLM -> Output
   - The source defines an output schema, the target references it, an edge joins them
2. **Conditional Connection**
   - Based on condition branches (if / elseIf / else)
   - Example: Condition Node -> [branch "valid"] -> Node A
   - Each edge leaving a Condition node carries the branch id as sourceHandle
   - Data flows only to nodes connected to the active branch
3. **Parallel Connection**
   - One source to multiple targets
   - Example: Input -> [A, B, C]
   - Data is copied to all connected nodes
4. **Convergent Connection**
   - Multiple sources to one target
   - Example: [A, B] -> Output
   - The target combines data from all sources

### Parameter Passing
- {{nodeName.field}} references a specific field
- {{nodeName.field.subField}} references a nested field
- {{nodeName}} references the full output object
- nodeName may be the node's name or its id

**Examples per node type**:
- **LLM Node**: {{input.userMessage}}, {{http.response.body}}
- **HTTP Node**: URL {{input.apiEndpoint}}, header "Bearer {{input.token}}", body {{llm.formattedData}}
- **Condition Node**: check {{input.userType}} equals premium, boolean flags, numeric comparisons
- **Template Node**: "Hello {{input.userName}}, your order {{order.id}} is ready!"

### Troubleshooting
- Node not receiving data: check edges, reference syntax, output schema and node names
- Condition not branching: set sourceHandle on every branch edge
- Template not substituting: verify the syntax and that the source node runs first
- HTTP node with empty parameters: check variable paths and that the source node executes

**Debug steps**:
1. Check execution order
2. Verify output schemas
3. Test variable references
4. Validate edge connections
5. Check condition logic
6. Review configurations

### Best Practices
- Define clear output schemas
- Use descriptive node names
- Test simple examples first
- Keep schemas consistent
- Validate variable references before deploying

### Step-by-Step Connection Instructions
1. **Create nodes**: UUID ids, descriptive names, output schemas
2. **Create edges**: connect source -> target, each edge with its own UUID
3. **Configure references**: use {{nodeName.fieldName}}, matching names exactly
4. **Test connections**: run validate_workflow and fix unreachable nodes and unknown references

### Practical Examples
- **Simple Chatbot**: Input -> LLM -> Output, LLM references {{input.message}}
- **Conditional Workflow**: Input (userType) -> Condition -> premium/free branch -> Output
- **HTTP Integration**: Input (endpoint) -> HTTP -> LLM -> Output

### Common Mistakes
- Forgetting edges: always connect nodes
- Wrong node names in variables: use exact names
- Referencing non-existent fields: check the output schema
- Missing sourceHandle on Condition node edges: always name the branch
"""

DATA_FLOW_QUICK_REFERENCE: dict[str, Any] = {
    "syntax": "{{nodeName.fieldName}} - Reference field from node output",
    "examples": [
        "{{input.message}} - Get message from Input node",
        "{{llm.response}} - Get response from LLM node",
        "{{http.response.body}} - Get body from HTTP response",
    ],
    "commonIssues": [
        "Node not receiving data - Check edge connections and variable syntax",
        "Condition not branching - Verify sourceHandle in edges",
        "Template not substituting - Check variable syntax and node names",
    ],
}

CONNECTION_QUICK_START: dict[str, Any] = {
    "title": "Quick Start: Connecting Nodes",
    "steps": [
        "1. Create your nodes with UUID ids and unique names",
        f"2. Create edges: {{ id: '{EXAMPLE_UUID}', source: '<node uuid>', target: '<node uuid>' }}",
        "3. Reference data: {{nodeName.fieldName}} in target nodes",
        "4. For conditions: add sourceHandle (the branch id) to edges",
        "5. Validate: use validate_workflow action",
    ],
    "examples": [
        "Simple: Input -> LLM -> Output",
        "Conditional: Input -> Condition -> [Branch A, Branch B] -> Output",
        "HTTP: Input -> HTTP -> LLM -> Output",
    ],
}
