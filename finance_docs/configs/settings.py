"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI and the workers.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from finance_docs.configs.base import BaseSettings
from finance_docs.configs.celery_config import CelerySettings
from finance_docs.configs.database import DatabaseSettings
from finance_docs.core.document_processing.configs import DocumentPipelineSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)
    pipeline: DocumentPipelineSettings = Field(default_factory=DocumentPipelineSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from finance_docs.configs import get_settings
        settings = get_settings()
    """
    return Settings()
