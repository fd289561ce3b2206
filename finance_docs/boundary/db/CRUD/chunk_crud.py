"""
Document chunk CRUD operations.

Dependencies: sqlalchemy, finance_docs.boundary.db.models
System role: Chunk persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from finance_docs.boundary.db.CRUD.base_crud import BaseCRUD
from finance_docs.boundary.db.models.chunk_model import DocumentChunkModel


class ChunkCRUD(BaseCRUD[DocumentChunkModel]):
    """CRUD operations for DocumentChunkModel."""

    def __init__(self) -> None:
        super().__init__(DocumentChunkModel)

    async def add_many(
        self,
        session: AsyncSession,
        rows: list[dict],
    ) -> int:
        """
        Add chunk rows and flush them.

        Args:
            session: Async database session
            rows: Column values per chunk

        Returns:
            Number of rows added
        """
        session.add_all([DocumentChunkModel(**row) for row in rows])
        await session.flush()
        return len(rows)

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        stmt = delete(DocumentChunkModel).where(DocumentChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[DocumentChunkModel]:
        """Chunks of one document in chunk_index order."""
        stmt = (
            select(DocumentChunkModel)
            .where(DocumentChunkModel.document_id == document_id)
            .order_by(DocumentChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        stmt = select(func.count(DocumentChunkModel.id)).where(
            DocumentChunkModel.document_id == document_id
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def count_by_documents(
        self,
        session: AsyncSession,
        document_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        """
        Count chunks for several documents in one query.

        Returns:
            Mapping of document_id to chunk count; documents with no chunks
            are absent
        """
        if not document_ids:
            return {}
        stmt = (
            select(DocumentChunkModel.document_id, func.count(DocumentChunkModel.id))
            .where(DocumentChunkModel.document_id.in_(document_ids))
            .group_by(DocumentChunkModel.document_id)
        )
        result = await session.execute(stmt)
        return {document_id: count for document_id, count in result.all()}


chunk_crud = ChunkCRUD()
