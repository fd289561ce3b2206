"""
Document status store and chunk store.

Session-owning facades over the CRUD singletons. Every public method runs
in its own session and transaction, so the orchestrator and the API can
share a store without sharing a session.

Dependencies: sqlalchemy, finance_docs.boundary.db.CRUD
System role: Persistence ports used by the ingestion pipeline and the API
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finance_docs.boundary.db.CRUD import chunk_crud, document_crud
from finance_docs.core.document_processing.models import (
    ChunkRecord,
    DocumentRecord,
    DocumentStatus,
    NewDocument,
)
from finance_docs.core.exceptions import ChunkPersistenceError

logger = logging.getLogger(__name__)

MAX_ERROR_MESSAGE_LENGTH = 2000
STALE_ERROR_MESSAGE = "Ingestion interrupted before completion"

_TRANSITION_FIELDS = {"page_count", "error_message"}


def truncate_error(message: str) -> str:
    return message[:MAX_ERROR_MESSAGE_LENGTH]


class DocumentStatusStore:
    """Document rows and their processing -> ready | error lifecycle."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize store.

        Args:
            session_factory: Async session factory bound to the database
        """
        self._session_factory = session_factory

    async def create(self, owner_id: uuid.UUID, metadata: NewDocument) -> uuid.UUID:
        """
        Create a document in PROCESSING with page_count 0.

        Args:
            owner_id: Uploading user
            metadata: Name, storage path and size

        Returns:
            uuid.UUID: New document ID
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.create(
                    session,
                    owner_id=owner_id,
                    name=metadata.name,
                    file_path=metadata.file_path,
                    file_size=metadata.file_size,
                    page_count=0,
                    status=DocumentStatus.PROCESSING,
                )
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        logger.info(
            f"{__name__}:create - Document created",
            extra={"document_id": str(document.id), "owner_id": str(owner_id)},
        )
        return document.id

    async def get(self, document_id: uuid.UUID) -> DocumentRecord | None:
        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
            if document is None:
                return None
            return DocumentRecord.model_validate(document)

    async def update_status(
        self,
        document_id: uuid.UUID,
        status: DocumentStatus,
        fields: dict[str, Any] | None = None,
    ) -> bool:
        """
        Transition a PROCESSING document to READY or ERROR.

        Args:
            document_id: Document to update
            status: Terminal status
            fields: Optional page_count and/or error_message

        Returns:
            bool: True if the document transitioned; False when it is
                missing or already terminal (nothing is written)

        Raises:
            ValueError: Non-terminal status or unknown field
        """
        fields = dict(fields or {})
        unknown = set(fields) - _TRANSITION_FIELDS
        if unknown:
            raise ValueError(f"Cannot set {sorted(unknown)} on a status transition")
        if fields.get("error_message") is not None:
            fields["error_message"] = truncate_error(fields["error_message"])

        async with self._session_factory() as session:
            try:
                transitioned = await document_crud.finish_processing(
                    session, document_id, status, **fields
                )
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        if transitioned:
            logger.info(
                f"{__name__}:update_status - Document {status.value}",
                extra={"document_id": str(document_id)},
            )
        else:
            logger.warning(
                f"{__name__}:update_status - Transition refused",
                extra={"document_id": str(document_id), "target_status": status.value},
            )
        return transitioned

    async def mark_ready(self, document_id: uuid.UUID, page_count: int) -> bool:
        return await self.update_status(
            document_id, DocumentStatus.READY, {"page_count": page_count}
        )

    async def mark_error(self, document_id: uuid.UUID, message: str) -> bool:
        return await self.update_status(
            document_id, DocumentStatus.ERROR, {"error_message": message}
        )

    async def list_for_owner(self, owner_id: uuid.UUID) -> list[DocumentRecord]:
        """
        List a user's documents, newest first, with chunk counts.

        Args:
            owner_id: Owning user

        Returns:
            list[DocumentRecord]: Records with chunk_count filled in
        """
        async with self._session_factory() as session:
            documents = await document_crud.get_by_owner(session, owner_id)
            counts = await chunk_crud.count_by_documents(
                session, [document.id for document in documents]
            )

        records = []
        for document in documents:
            record = DocumentRecord.model_validate(document)
            record.chunk_count = counts.get(document.id, 0)
            records.append(record)
        return records

    async def rename(self, document_id: uuid.UUID, name: str) -> DocumentRecord | None:
        """
        Change a document's display name.

        Returns:
            DocumentRecord | None: Updated record, None if not found
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.update_by_id(session, document_id, name=name)
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

            if document is None:
                return None
            return DocumentRecord.model_validate(document)

    async def delete(self, document_id: uuid.UUID) -> bool:
        """
        Delete a document and its chunks in one transaction.

        Returns:
            bool: True if the document existed
        """
        async with self._session_factory() as session:
            try:
                removed_chunks = await chunk_crud.delete_by_document(session, document_id)
                deleted = await document_crud.delete_by_id(session, document_id)
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        if deleted:
            logger.info(
                f"{__name__}:delete - Document deleted",
                extra={"document_id": str(document_id), "removed_chunks": removed_chunks},
            )
        return deleted

    async def fail_stale(
        self,
        older_than: timedelta,
        message: str = STALE_ERROR_MESSAGE,
    ) -> list[uuid.UUID]:
        """
        Mark documents left in PROCESSING for too long as ERROR.

        Args:
            older_than: Minimum age since creation
            message: Error message stored on each document

        Returns:
            list[uuid.UUID]: Documents that were marked
        """
        cutoff = datetime.now(timezone.utc) - older_than
        async with self._session_factory() as session:
            try:
                stale_ids = await document_crud.fail_stale(
                    session, cutoff, truncate_error(message)
                )
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        if stale_ids:
            logger.warning(
                f"{__name__}:fail_stale - Marked {len(stale_ids)} stale documents as error",
                extra={"document_ids": [str(i) for i in stale_ids]},
            )
        return stale_ids


class ChunkStore:
    """Embedded chunk rows, written in one batch per document."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert_batch(self, records: list[ChunkRecord]) -> int:
        """
        Insert chunk records atomically.

        Rows left by an earlier attempt on the same documents are replaced
        in the same transaction, so a re-run never trips the
        (document_id, chunk_index) constraint.

        Args:
            records: Chunk records to store

        Returns:
            int: Number of rows inserted

        Raises:
            ChunkPersistenceError: On any database failure; nothing is written
        """
        if not records:
            return 0

        document_ids = list(dict.fromkeys(record.document_id for record in records))
        async with self._session_factory() as session:
            try:
                for document_id in document_ids:
                    await chunk_crud.delete_by_document(session, document_id)
                inserted = await chunk_crud.add_many(
                    session, [record.model_dump() for record in records]
                )
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"{__name__}:insert_batch - Chunk batch rolled back",
                    extra={"document_ids": [str(i) for i in document_ids], "error_msg": str(e)},
                )
                raise ChunkPersistenceError(
                    f"Failed to store chunks: {e.__class__.__name__}",
                    document_id=str(document_ids[0]),
                    details={"error": str(e)[:500]},
                ) from e

        logger.info(
            f"{__name__}:insert_batch - Stored {inserted} chunks",
            extra={"document_ids": [str(i) for i in document_ids]},
        )
        return inserted

    async def delete_by_document(self, document_id: uuid.UUID) -> int:
        async with self._session_factory() as session:
            try:
                deleted = await chunk_crud.delete_by_document(session, document_id)
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise
        return deleted

    async def count_by_document(self, document_id: uuid.UUID) -> int:
        async with self._session_factory() as session:
            return await chunk_crud.count_by_document(session, document_id)

    async def list_by_document(self, document_id: uuid.UUID) -> list[ChunkRecord]:
        """Stored chunks of a document in chunk_index order."""
        async with self._session_factory() as session:
            rows = await chunk_crud.get_by_document(session, document_id)
            return [
                ChunkRecord(
                    document_id=row.document_id,
                    owner_id=row.owner_id,
                    content=row.content,
                    page_number=row.page_number,
                    chunk_index=row.chunk_index,
                    embedding=row.embedding,
                )
                for row in rows
            ]
