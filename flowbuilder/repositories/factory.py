"""Select the workflow repository backend from settings."""
from __future__ import annotations

import logging

from flowbuilder.core.config import RepositoryBackend, Settings
from flowbuilder.errors import ConfigurationError
from flowbuilder.repositories.database import Database
from flowbuilder.repositories.interfaces import IWorkflowRepository
from flowbuilder.repositories.remote import RemoteWorkflowRepository, TokenGetter
from flowbuilder.repositories.sql import SqlWorkflowRepository

logger = logging.getLogger(__name__)


def create_repository(
    settings: Settings,
    *,
    database: Database | None = None,
    token_getter: TokenGetter | None = None,
) -> IWorkflowRepository:
    """Build the repository named by ``settings.repository_backend``.

    Args:
        settings: Application settings.
        database: Database to use for the SQL backend. Built from the
            settings when omitted.
        token_getter: Bearer token source for the remote backend.

    Raises:
        ConfigurationError: If the remote backend has no base URL.
    """
    backend = RepositoryBackend(settings.repository_backend)

    if backend == RepositoryBackend.REMOTE:
        if not settings.remote_api_base_url:
            raise ConfigurationError(
                "FLOWBUILDER_REMOTE_API_BASE_URL is required for the remote repository backend"
            )
        logger.info("Using remote workflow repository at %s", settings.remote_api_base_url)
        return RemoteWorkflowRepository(
            settings.remote_api_base_url,
            timeout=settings.remote_api_timeout,
            token_getter=token_getter,
        )

    logger.info("Using SQL workflow repository")
    return SqlWorkflowRepository(database or Database.from_settings(settings))
