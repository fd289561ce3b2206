"""
Pipeline tasks for document ingestion.

Exports: PdfTextExtractor, ChunkingTask, GeminiEmbeddingClient
"""

from .chunking_task import ChunkingTask
from .embedding_task import GeminiEmbeddingClient
from .extraction_task import PdfTextExtractor

__all__ = [
    "PdfTextExtractor",
    "ChunkingTask",
    "GeminiEmbeddingClient",
]
