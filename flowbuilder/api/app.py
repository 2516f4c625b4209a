"""FlowBuilder HTTP API - FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from flowbuilder.api import structure
from flowbuilder.core.config import Settings, get_settings
from flowbuilder.errors import (
    AccessDeniedError,
    FlowBuilderError,
    InputValidationError,
    InvalidIdentifierError,
    NotAuthenticatedError,
    RepositoryError,
    WorkflowNotFoundError,
)
from flowbuilder.logging import setup_logging
from flowbuilder.repositories.database import Database
from flowbuilder.repositories.factory import create_repository
from flowbuilder.repositories.interfaces import IWorkflowRepository
from flowbuilder.repositories.remote import RemoteWorkflowRepository

logger = logging.getLogger(__name__)


def _status_for(exc: FlowBuilderError) -> int:
    if isinstance(exc, WorkflowNotFoundError):
        return 404
    if isinstance(exc, (NotAuthenticatedError, AccessDeniedError)):
        return 401
    if isinstance(exc, InputValidationError):
        return 400
    if isinstance(exc, RepositoryError):
        return 503
    return 500


def _error_body(status_code: int, message: str, **details: object) -> dict[str, object]:
    error: dict[str, object] = {"code": f"HTTP_{status_code}", "message": message}
    if details:
        error["details"] = details
    return {"error": error}


def create_app(
    settings: Settings | None = None,
    repository: IWorkflowRepository | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Application settings. Loaded from the environment when omitted.
        repository: Workflow repository. When omitted, one is built from the
            settings at startup (and its tables created outside production).
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings)
        logger.info("Starting %s v%s", settings.app_name, settings.app_version)

        database: Database | None = None
        if app.state.repository is None:
            database = Database.from_settings(settings)
            app.state.repository = create_repository(settings, database=database)
            if not settings.is_production and not isinstance(
                app.state.repository, RemoteWorkflowRepository
            ):
                await database.create_all()
                logger.info("Database initialized")

        yield

        logger.info("Shutting down %s", settings.app_name)
        if isinstance(app.state.repository, RemoteWorkflowRepository):
            await app.state.repository.close()
        if database is not None:
            await database.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Workflow graph storage and validation API",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository

    @app.exception_handler(FlowBuilderError)
    async def flowbuilder_exception_handler(request: Request, exc: FlowBuilderError):
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error("Request to %s failed: %s", request.url.path, exc)
        details = {}
        if isinstance(exc, InvalidIdentifierError) and exc.issues:
            details["issues"] = exc.issues
        return JSONResponse(
            status_code=status_code,
            content=_error_body(status_code, str(exc), **details),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with standard error format."""
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.status_code, message),
        )

    @app.get("/health", tags=["health"])
    async def health():
        """Liveness probe."""
        return {"status": "ok", "version": settings.app_version}

    app.include_router(structure.router)
    return app
