"""
Tests for the composition root and settings aggregation.

System role: Verification that configuration reaches the pipeline
"""

from unittest.mock import MagicMock

from finance_docs.configs import Settings
from finance_docs.configs.database import DatabaseSettings
from finance_docs.core.document_processing.configs import DocumentPipelineSettings
from finance_docs.core.document_processing.entrypoint import IngestionOrchestrator
from finance_docs.dependencies import build_orchestrator


def test_build_orchestrator_wires_settings_into_chunker(fake_embedder_cls):
    settings = DocumentPipelineSettings(chunk_target_size=123, chunk_overlap=10)

    orchestrator = build_orchestrator(MagicMock(), settings, embedder=fake_embedder_cls())

    assert isinstance(orchestrator, IngestionOrchestrator)
    assert orchestrator._chunker._target_size == 123
    assert orchestrator._chunker._overlap_words == 5
    assert orchestrator._settings is settings


def test_pipeline_settings_read_environment(monkeypatch):
    monkeypatch.setenv("DOC_PIPELINE_CHUNK_BY_PAGE", "true")
    monkeypatch.setenv("DOC_PIPELINE_EMBEDDING_CONCURRENCY", "4")

    settings = DocumentPipelineSettings()

    assert settings.chunk_by_page is True
    assert settings.embedding_concurrency == 4
    assert settings.chunk_target_size == 500
    assert settings.chunk_overlap == 50


def test_database_url_override_wins():
    database = DatabaseSettings(url_override="sqlite+aiosqlite:///./local.db")

    assert database.async_database_url == "sqlite+aiosqlite:///./local.db"


def test_database_url_composed_from_parts():
    database = DatabaseSettings(host="db", port=6543, user="u", password="p", db="fin", sslmode="require")

    assert database.async_database_url == "postgresql+asyncpg://u:p@db:6543/fin?ssl=require"


def test_settings_aggregate_sections():
    settings = Settings()

    assert settings.pipeline.max_upload_bytes == 10 * 1024 * 1024
    assert settings.pipeline.allowed_extensions == [".pdf"]
    assert settings.celery.task_max_retries == 3
