"""
ORM models.

Exports: DocumentModel, DocumentChunkModel
"""

from finance_docs.boundary.db.models.chunk_model import DocumentChunkModel
from finance_docs.boundary.db.models.document_model import DocumentModel

__all__ = ["DocumentModel", "DocumentChunkModel"]
