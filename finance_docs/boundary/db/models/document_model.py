"""
Document ORM model.

Represents an uploaded PDF and its ingestion lifecycle.

Dependencies: sqlalchemy, finance_docs.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Enum, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_docs.boundary.db.base import Base, TimestampMixin, UUIDMixin
from finance_docs.core.document_processing.models import DocumentStatus

if TYPE_CHECKING:
    from finance_docs.boundary.db.models.chunk_model import DocumentChunkModel


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion state.

    Lifecycle: upload (PROCESSING) -> pipeline finishes -> READY or ERROR.
    The terminal status is written once, by a conditional update guarded
    on status = PROCESSING.

    Attributes:
        owner_id: User who uploaded the document
        name: Display name (255 char limit)
        file_path: Storage path of the original PDF (1024 char limit)
        file_size: Size of the upload in bytes
        page_count: Pages found by extraction (0 until ready)
        status: PROCESSING / READY / ERROR
        error_message: Reason for ERROR (2048 char limit)

    Relationships:
        chunks: DocumentChunkModel rows, deleted with the document
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_owner_created", "owner_id", "created_at"),
        Index("ix_documents_status_created", "status", "created_at"),
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False, doc="Display name")

    file_path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Storage path of the uploaded PDF",
    )

    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    page_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False, length=32),
        nullable=False,
        default=DocumentStatus.PROCESSING,
    )

    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if ingestion failed",
    )

    chunks: Mapped[list["DocumentChunkModel"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
