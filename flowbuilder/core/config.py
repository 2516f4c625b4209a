"""Application configuration using Pydantic Settings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepositoryBackend(str, Enum):
    """Backing store for workflow persistence."""

    SQL = "sql"
    REMOTE = "remote"


class Settings(BaseSettings):
    """Settings loaded from ``FLOWBUILDER_*`` environment variables.

    Example:
        >>> settings = Settings(repository_backend="remote",
        ...                     remote_api_base_url="https://api.example.com")
    """

    # Application
    app_name: str = "FlowBuilder API"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False

    # Repository selection
    repository_backend: RepositoryBackend = RepositoryBackend.SQL

    # Database
    database_url: str = "sqlite+aiosqlite:///./flowbuilder.db"
    db_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Remote REST backend
    remote_api_base_url: str = ""
    remote_api_timeout: float = Field(default=30.0, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "json" for production, "text" for development

    # Validation heuristics
    max_workflow_nodes: int = Field(default=20, gt=0)
    max_llm_nodes: int = Field(default=5, gt=0)

    model_config = SettingsConfigDict(env_prefix="FLOWBUILDER_", case_sensitive=False)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.database_url


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
