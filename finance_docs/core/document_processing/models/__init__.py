"""
Models for document processing pipeline.

Exports: DocumentStatus, TextChunk, ChunkRecord, PageText, ExtractedText,
EmbeddingOutcome, IngestionSummary, DocumentRecord, NewDocument
"""

from .chunk import ChunkRecord, TextChunk
from .document import DocumentRecord, DocumentStatus, NewDocument
from .extraction import ExtractedText, PageText
from .pipeline_result import ChunkFailure, EmbeddingOutcome, IngestionSummary

__all__ = [
    "DocumentStatus",
    "DocumentRecord",
    "NewDocument",
    "TextChunk",
    "ChunkRecord",
    "PageText",
    "ExtractedText",
    "EmbeddingOutcome",
    "IngestionSummary",
    "ChunkFailure",
]
