"""
Document service orchestrator.

Validates uploads, creates the document record, hands the PDF to the
ingestion queue, and serves the owner-scoped read/rename/delete operations.

Dependencies: finance_docs.boundary.db, finance_docs.workers, finance_docs.core
System role: Document management orchestration
"""

import asyncio
import logging
import posixpath
import time
from uuid import UUID

from finance_docs.boundary.db.stores import DocumentStatusStore
from finance_docs.core.document_processing.configs import DocumentPipelineSettings
from finance_docs.core.document_processing.models import DocumentRecord, NewDocument
from finance_docs.core.exceptions import (
    DocumentAccessError,
    DocumentNotFoundError,
    ValidationError,
)
from finance_docs.workers.queue import IngestionQueue

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


class DocumentService:
    """
    Document service orchestrator.

    Handles document lifecycle on the request side: upload, poll, list,
    rename, deletion. Ingestion itself runs in the workers.
    """

    def __init__(
        self,
        document_store: DocumentStatusStore,
        ingestion_queue: IngestionQueue,
        settings: DocumentPipelineSettings,
    ) -> None:
        """
        Initialize document service.

        Args:
            document_store: Document status store
            ingestion_queue: Queue that runs ingestion jobs
            settings: Pipeline settings (upload limits)
        """
        self._documents = document_store
        self._queue = ingestion_queue
        self._settings = settings

    async def upload_document(
        self,
        owner_id: UUID,
        filename: str,
        content: bytes,
        name: str | None = None,
    ) -> DocumentRecord:
        """
        Accept an uploaded PDF and queue it for ingestion.

        Steps:
        1. Validate extension, emptiness and size
        2. Create document record with status processing
        3. Submit ingestion job

        Args:
            owner_id: Uploading user
            filename: Original filename from the client
            content: File bytes
            name: Optional display name (filename without extension if blank)

        Returns:
            DocumentRecord: The created document, still processing

        Raises:
            ValidationError: Bad extension, empty file or file too large
        """
        filename = posixpath.basename(filename.replace("\\", "/")).strip()
        extension = posixpath.splitext(filename)[1].lower()
        allowed = [ext.lower() for ext in self._settings.allowed_extensions]

        if not filename or extension not in allowed:
            raise ValidationError(
                f"Only {', '.join(allowed)} files are supported",
                field="file",
            )
        if not content:
            raise ValidationError("Uploaded file is empty", field="file")
        if len(content) > self._settings.max_upload_bytes:
            limit_mb = self._settings.max_upload_bytes / (1024 * 1024)
            raise ValidationError(
                f"File too large. Maximum size is {limit_mb:g}MB",
                field="file",
                details={"size_bytes": len(content)},
            )

        display_name = (name or "").strip() or filename[: -len(extension)] or filename
        metadata = NewDocument(
            name=display_name[:MAX_NAME_LENGTH],
            file_path=f"documents/{owner_id}/{int(time.time() * 1000)}_{filename}",
            file_size=len(content),
        )

        document_id = await self._documents.create(owner_id, metadata)

        try:
            await asyncio.to_thread(self._queue.submit, document_id, owner_id, content)
        except Exception as e:
            logger.exception(
                f"{__name__}:upload_document - Failed to queue ingestion",
                extra={"document_id": str(document_id)},
            )
            await self._documents.mark_error(document_id, f"Failed to queue ingestion: {e}")
            raise

        logger.info(
            f"{__name__}:upload_document - Document queued",
            extra={
                "document_id": str(document_id),
                "owner_id": str(owner_id),
                "size_bytes": len(content),
            },
        )
        return await self.get_document(owner_id, document_id)

    async def get_document(self, owner_id: UUID, document_id: UUID) -> DocumentRecord:
        """
        Fetch one of the owner's documents.

        Raises:
            DocumentNotFoundError: Unknown document
            DocumentAccessError: Document belongs to another user
        """
        document = await self._documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        if document.owner_id != owner_id:
            raise DocumentAccessError(str(document_id), str(owner_id))
        return document

    async def list_documents(self, owner_id: UUID) -> list[DocumentRecord]:
        return await self._documents.list_for_owner(owner_id)

    async def rename_document(
        self,
        owner_id: UUID,
        document_id: UUID,
        name: str,
    ) -> DocumentRecord:
        """
        Rename a document.

        Args:
            owner_id: Requesting user
            document_id: Document to rename
            name: New name; surrounding whitespace is trimmed

        Returns:
            DocumentRecord: Updated document

        Raises:
            ValidationError: Blank name
            DocumentNotFoundError: Unknown document
            DocumentAccessError: Document belongs to another user
        """
        clean_name = name.strip()
        if not clean_name:
            raise ValidationError("Name is required", field="name")

        await self.get_document(owner_id, document_id)
        renamed = await self._documents.rename(document_id, clean_name[:MAX_NAME_LENGTH])
        if renamed is None:
            raise DocumentNotFoundError(str(document_id))
        return renamed

    async def delete_document(self, owner_id: UUID, document_id: UUID) -> None:
        """
        Delete a document and its chunks.

        Raises:
            DocumentNotFoundError: Unknown document
            DocumentAccessError: Document belongs to another user
        """
        await self.get_document(owner_id, document_id)
        if not await self._documents.delete(document_id):
            raise DocumentNotFoundError(str(document_id))

        logger.info(
            f"{__name__}:delete_document - Document deleted",
            extra={"document_id": str(document_id), "owner_id": str(owner_id)},
        )
