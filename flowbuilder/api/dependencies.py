"""FastAPI dependencies shared by the route modules."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Path, Request

from flowbuilder.core.config import Settings
from flowbuilder.errors import InvalidIdentifierError, NotAuthenticatedError
from flowbuilder.repositories.interfaces import IWorkflowRepository
from flowbuilder.validation import is_valid_uuid, validate_uuid_format

USER_HEADER = "X-User-Id"


def get_repository(request: Request) -> IWorkflowRepository:
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_HEADER)] = None,
) -> str:
    """User id set by the authenticating gateway in front of this service."""
    if not x_user_id:
        raise NotAuthenticatedError()
    return x_user_id


async def valid_workflow_id(workflow_id: Annotated[str, Path()]) -> str:
    if not is_valid_uuid(workflow_id):
        raise InvalidIdentifierError(
            "workflow", workflow_id, validate_uuid_format(workflow_id).issues
        )
    return workflow_id


Repository = Annotated[IWorkflowRepository, Depends(get_repository)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
WorkflowId = Annotated[str, Depends(valid_workflow_id)]
