"""
Document CRUD operations.

Adds owner listing, the guarded terminal transition and the stale sweep to
the generic CRUD.

Dependencies: sqlalchemy, finance_docs.boundary.db.models
System role: Document persistence operations
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from finance_docs.boundary.db.CRUD.base_crud import BaseCRUD
from finance_docs.boundary.db.models.document_model import DocumentModel
from finance_docs.core.document_processing.models import DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_by_owner(
        self,
        session: AsyncSession,
        owner_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve a user's documents, newest first.

        Args:
            session: Async database session
            owner_id: Owning user

        Returns:
            Sequence of DocumentModels ordered by created_at descending
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.owner_id == owner_id)
            .order_by(DocumentModel.created_at.desc(), DocumentModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def finish_processing(
        self,
        session: AsyncSession,
        id: UUID,
        status: DocumentStatus,
        **fields: Any,
    ) -> bool:
        """
        Move a PROCESSING document to a terminal status.

        The WHERE clause makes the transition happen at most once; a
        document that is already READY or ERROR is left untouched.

        Args:
            session: Async database session
            id: Document UUID
            status: READY or ERROR
            **fields: Extra columns to set (page_count, error_message)

        Returns:
            True if the row transitioned, False if missing or already terminal

        Raises:
            ValueError: When status is not terminal
        """
        if not status.is_terminal:
            raise ValueError(f"Cannot transition a document to {status.value}")

        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == id,
                DocumentModel.status == DocumentStatus.PROCESSING,
            )
            .values(status=status, **fields)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def fail_stale(
        self,
        session: AsyncSession,
        created_before: datetime,
        error_message: str,
    ) -> list[UUID]:
        """
        Mark documents stuck in PROCESSING since before a cutoff as ERROR.

        Args:
            session: Async database session
            created_before: Cutoff on created_at
            error_message: Message stored on each document

        Returns:
            IDs of the documents that were marked
        """
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.status == DocumentStatus.PROCESSING,
                DocumentModel.created_at < created_before,
            )
            .values(status=DocumentStatus.ERROR, error_message=error_message)
            .returning(DocumentModel.id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


document_crud = DocumentCRUD()
