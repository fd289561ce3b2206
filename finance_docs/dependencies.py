"""
Dependency injection container.

Factory functions that assemble the ingestion pipeline from settings and a
database session factory. Nothing is global: callers own the engine.

Dependencies: finance_docs.configs, finance_docs.core, finance_docs.boundary
System role: Composition root shared by the API and the workers
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finance_docs.boundary.db.stores import ChunkStore, DocumentStatusStore
from finance_docs.core.document_processing.configs import DocumentPipelineSettings
from finance_docs.core.document_processing.entrypoint import IngestionOrchestrator
from finance_docs.core.document_processing.tasks import (
    ChunkingTask,
    GeminiEmbeddingClient,
    PdfTextExtractor,
)


def build_orchestrator(
    session_factory: async_sessionmaker[AsyncSession],
    settings: DocumentPipelineSettings,
    embedder=None,
    extractor=None,
) -> IngestionOrchestrator:
    """
    Build an orchestrator wired to the database.

    Args:
        session_factory: Async session factory for both stores
        settings: Pipeline settings
        embedder: Embedding client override (Gemini client from settings if None)
        extractor: Extractor override (PyPDF extractor if None)

    Returns:
        IngestionOrchestrator: Ready-to-run orchestrator
    """
    return IngestionOrchestrator(
        extractor=extractor or PdfTextExtractor(),
        chunker=ChunkingTask(
            target_size=settings.chunk_target_size,
            overlap=settings.chunk_overlap,
        ),
        embedder=embedder or GeminiEmbeddingClient.from_settings(settings),
        document_store=DocumentStatusStore(session_factory),
        chunk_store=ChunkStore(session_factory),
        settings=settings,
    )
