"""
Document chunk ORM model.

One row per embedded chunk of a document. The vector is stored as a JSON
array so the table works on any backend; similarity search reads it
elsewhere.

Dependencies: sqlalchemy, finance_docs.boundary.db.base
System role: Chunk persistence for the ingestion pipeline
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_docs.boundary.db.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from finance_docs.boundary.db.models.document_model import DocumentModel


class DocumentChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Embedded chunk of a document.

    Constraints:
        document_id: Foreign key ON DELETE CASCADE to documents.id
        (document_id, chunk_index): unique
    """

    __tablename__ = "document_chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_document_chunks_index"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    page_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)

    embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False)

    document: Mapped["DocumentModel"] = relationship(back_populates="chunks")
