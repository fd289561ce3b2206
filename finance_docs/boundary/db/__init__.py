"""
Database boundary layer: ORM models, CRUD operations, stores and connection
management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Connections
  - DocumentModel, DocumentChunkModel: Tables
  - document_crud, chunk_crud: CRUD singletons
  - DocumentStatusStore, ChunkStore: Session-owning stores

Dependencies: sqlalchemy, finance_docs.configs
System role: Persistent storage for documents and their embedded chunks
"""

from finance_docs.boundary.db.base import Base, TimestampMixin, UUIDMixin
from finance_docs.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)
from finance_docs.boundary.db.models import DocumentChunkModel, DocumentModel
from finance_docs.boundary.db.CRUD import (
    BaseCRUD,
    ChunkCRUD,
    DocumentCRUD,
    chunk_crud,
    document_crud,
)
from finance_docs.boundary.db.stores import ChunkStore, DocumentStatusStore

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_engine",
    "get_async_session_factory",
    "DocumentModel",
    "DocumentChunkModel",
    "BaseCRUD",
    "DocumentCRUD",
    "ChunkCRUD",
    "document_crud",
    "chunk_crud",
    "DocumentStatusStore",
    "ChunkStore",
]
