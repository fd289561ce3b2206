"""
Document lifecycle model for the ingestion pipeline.

Dependencies: pydantic
System role: Status vocabulary and read model shared by pipeline and stores
"""

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PROCESSING: Uploaded; ingestion job queued or running
    READY: Text extracted and chunks stored
    ERROR: Ingestion failed; error_message holds the reason
    """

    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not DocumentStatus.PROCESSING


class DocumentRecord(BaseModel):
    """Snapshot of a document row as seen by pollers and the orchestrator."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    file_path: str
    file_size: int
    page_count: int = 0
    status: DocumentStatus
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime
    chunk_count: int | None = Field(default=None, description="Filled in by listings only")


class NewDocument(BaseModel):
    """Metadata supplied when an upload creates a document."""

    name: str = Field(min_length=1, max_length=255)
    file_path: str = Field(max_length=1024)
    file_size: int = Field(ge=0)
