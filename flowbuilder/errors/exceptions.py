"""FlowBuilder exception hierarchy.

All exceptions inherit from FlowBuilderError for easy catching.
Each exception includes a `retryable` flag to indicate if the operation can be retried.

Structural findings (cycles, missing Input/Output nodes) are never raised;
validators return them as data.
"""

from __future__ import annotations

UUID_EXAMPLE = "550e8400-e29b-41d4-a716-446655440000"


class FlowBuilderError(Exception):
    """Base exception for all FlowBuilder errors."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


# Configuration Errors
class ConfigurationError(FlowBuilderError):
    """Configuration-related errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


# Input Errors
class InputValidationError(FlowBuilderError):
    """Caller supplied malformed or incomplete input."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class MissingFieldError(InputValidationError):
    """A field required by the requested action is missing."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class InvalidIdentifierError(InputValidationError):
    """An identifier is not a valid v4 UUID."""

    def __init__(self, target: str, value: str, issues: list[str] | None = None) -> None:
        if target == "workflow":
            message = (
                f'Invalid workflow ID format: "{value}". Workflow IDs must be valid UUIDs '
                f'(e.g., "{UUID_EXAMPLE}"). If you\'re trying to find a workflow by name, '
                'use the "list" action first to find the correct ID.'
            )
        else:
            message = (
                f'Invalid {target} ID format: "{value}". {target.capitalize()} IDs must be '
                "valid UUIDs (version 4) following format: xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx "
                "where x=hex digit, 13th char=4, 17th char=8/9/a/b. "
                f"Example: {UUID_EXAMPLE}. Do NOT add prefixes like \"node-\" or \"edge-\". "
                "Use only the UUID itself."
            )
        super().__init__(message)
        self.target = target
        self.value = value
        self.issues = issues or []


class IdentifierConflictError(InputValidationError):
    """Node or edge ids that already belong to a different workflow."""

    def __init__(self, target: str, ids: list[str]) -> None:
        super().__init__(
            f"{target.capitalize()} IDs already belong to another workflow: {', '.join(ids)}. "
            "Generate new UUIDs for copied nodes and edges."
        )
        self.target = target
        self.ids = ids


class UnknownActionError(InputValidationError):
    """The requested tool action does not exist."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown action: {action}")
        self.action = action


class UnknownNodeKindError(InputValidationError):
    """The requested node kind is not part of the catalog."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unknown node kind: {kind}")
        self.kind = kind


# Access Errors
class NotAuthenticatedError(FlowBuilderError):
    """No user is attached to the current session."""

    def __init__(self) -> None:
        super().__init__("User not authenticated", retryable=False)


class AccessDeniedError(FlowBuilderError):
    """The user may not read or modify the workflow."""

    def __init__(self, workflow_id: str, *, write: bool = False) -> None:
        if write:
            message = "You don't have write access to this workflow"
        else:
            message = "You don't have access to this workflow"
        super().__init__(message, retryable=False)
        self.workflow_id = workflow_id
        self.write = write


class WorkflowNotFoundError(FlowBuilderError):
    """Workflow does not exist."""

    def __init__(self, workflow_id: str) -> None:
        super().__init__("Workflow not found", retryable=False)
        self.workflow_id = workflow_id


# Persistence Errors
class RepositoryError(FlowBuilderError):
    """The backing store failed. May be retried."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, retryable=True)
        self.status_code = status_code
