"""
Chunk models for document processing pipeline.

TextChunk is what the chunker produces; ChunkRecord is the stable,
externally visible shape written to the chunk store.

Dependencies: pydantic
System role: Data structures for document chunks in ingestion pipeline
"""

import uuid

from pydantic import BaseModel, Field


class TextChunk(BaseModel):
    """Segment of document text produced by the chunker."""

    content: str = Field(description="Chunk text content")
    page_number: int = Field(description="Source page number (1-based)")
    chunk_index: int = Field(ge=0, description="Position within the document (0-based)")


class ChunkRecord(BaseModel):
    """Persisted chunk with its embedding vector."""

    document_id: uuid.UUID
    owner_id: uuid.UUID
    content: str
    page_number: int
    chunk_index: int
    embedding: list[float]
