"""Pytest configuration and fixtures for FlowBuilder tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from io import StringIO

import pytest
import pytest_asyncio
from rich.console import Console

from flowbuilder.core.config import Settings
from flowbuilder.logging import configure_logging, disable_logging
from flowbuilder.repositories.database import Database
from flowbuilder.repositories.sql import SqlWorkflowRepository


@pytest.fixture(autouse=True)
def _quiet_logger() -> None:
    """Keep the Rich console logger out of test output."""
    disable_logging()


@pytest.fixture
def console_log() -> StringIO:
    """Enable the console logger at debug level and capture what it prints."""
    output = StringIO()
    configure_logging("debug", console=Console(file=output, force_terminal=False, width=200))
    return output


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'flowbuilder.db'}",
        environment="test",
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    """File-backed SQLite database with tables created."""
    db = Database.from_settings(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def repository(database: Database) -> SqlWorkflowRepository:
    return SqlWorkflowRepository(database)
