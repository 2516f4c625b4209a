"""Error types for FlowBuilder."""

from flowbuilder.errors.exceptions import (
    AccessDeniedError,
    ConfigurationError,
    FlowBuilderError,
    IdentifierConflictError,
    InputValidationError,
    InvalidIdentifierError,
    MissingFieldError,
    NotAuthenticatedError,
    RepositoryError,
    UnknownActionError,
    UnknownNodeKindError,
    WorkflowNotFoundError,
)

__all__ = [
    "AccessDeniedError",
    "ConfigurationError",
    "FlowBuilderError",
    "IdentifierConflictError",
    "InputValidationError",
    "InvalidIdentifierError",
    "MissingFieldError",
    "NotAuthenticatedError",
    "RepositoryError",
    "UnknownActionError",
    "UnknownNodeKindError",
    "WorkflowNotFoundError",
]
