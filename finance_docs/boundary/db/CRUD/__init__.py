"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from finance_docs.boundary.db.CRUD import document_crud, chunk_crud

    document = await document_crud.get_by_id(session, document_id)
"""

from finance_docs.boundary.db.CRUD.base_crud import BaseCRUD
from finance_docs.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from finance_docs.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
]
