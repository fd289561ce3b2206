"""
Pipeline result models for document processing.

EmbeddingOutcome records what happened to one chunk; IngestionSummary
collects those outcomes into the report returned by the orchestrator.

Dependencies: pydantic
System role: Typed results for IngestionOrchestrator.run()
"""

import uuid

from pydantic import BaseModel, Field

from .chunk import TextChunk
from .document import DocumentStatus


class EmbeddingOutcome(BaseModel):
    """Result of embedding one chunk: either a vector or an error."""

    chunk: TextChunk
    embedding: list[float] | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.embedding is not None

    @classmethod
    def success(cls, chunk: TextChunk, embedding: list[float]) -> "EmbeddingOutcome":
        return cls(chunk=chunk, embedding=embedding)

    @classmethod
    def failure(cls, chunk: TextChunk, error: str) -> "EmbeddingOutcome":
        return cls(chunk=chunk, error=error)


class ChunkFailure(BaseModel):
    """A chunk dropped because its embedding failed."""

    chunk_index: int
    error: str


class IngestionSummary(BaseModel):
    """Result of one ingestion run."""

    document_id: uuid.UUID
    status: DocumentStatus = Field(description="Status the document ended in")
    page_count: int = 0
    chunk_count: int = Field(default=0, description="Chunks produced by the chunker")
    stored_chunk_count: int = Field(default=0, description="Chunks written to the store")
    failed_chunks: list[ChunkFailure] = Field(default_factory=list)
    error_message: str | None = None
    skipped: bool = Field(default=False, description="Run skipped, document already finalized")
    processing_time_ms: float = 0.0

    def record_outcomes(self, outcomes: list[EmbeddingOutcome], page_count: int) -> None:
        """Fill in chunk counts and failures from per-chunk outcomes."""
        self.page_count = page_count
        self.chunk_count = len(outcomes)
        self.failed_chunks = [
            ChunkFailure(chunk_index=o.chunk.chunk_index, error=o.error or "")
            for o in outcomes
            if not o.succeeded
        ]
