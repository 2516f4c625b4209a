"""Workflow persistence."""

from flowbuilder.repositories.database import Database
from flowbuilder.repositories.factory import create_repository
from flowbuilder.repositories.interfaces import IWorkflowRepository, authorize, can_access
from flowbuilder.repositories.remote import RemoteWorkflowRepository
from flowbuilder.repositories.sql import SqlWorkflowRepository

__all__ = [
    "Database",
    "IWorkflowRepository",
    "RemoteWorkflowRepository",
    "SqlWorkflowRepository",
    "authorize",
    "can_access",
    "create_repository",
]
