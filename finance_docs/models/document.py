"""
Document API schemas.

Request/response schemas for document upload, listing, polling and rename.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from finance_docs.core.document_processing.models import DocumentRecord, DocumentStatus


class UploadedDocument(BaseModel):
    """Document summary returned right after upload."""

    id: uuid.UUID
    name: str
    status: DocumentStatus


class UploadResponse(BaseModel):
    """Response schema for POST /documents."""

    document: UploadedDocument


class DocumentResponse(BaseModel):
    """Response schema for a single document."""

    id: uuid.UUID
    name: str
    file_path: str
    file_size: int
    page_count: int
    status: DocumentStatus
    error_message: str | None = None
    chunk_count: int | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentResponse":
        return cls.model_validate(record.model_dump())


class DocumentListResponse(BaseModel):
    """Owner's documents, newest first."""

    documents: list[DocumentResponse]
    total: int


class RenameDocumentRequest(BaseModel):
    """Request schema for PATCH /documents/{id}."""

    name: str = Field(max_length=255, description="New display name")
