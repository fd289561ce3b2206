"""
Ingestion job submission.

Dependencies: celery, finance_docs.workers.tasks
System role: Trigger between the upload service and the workers
"""

import logging
import uuid

from celery import Task

from finance_docs.workers.tasks.document_ingestion import encode_payload, ingest_document

logger = logging.getLogger(__name__)


class IngestionQueue:
    """Submit ingestion jobs to Celery."""

    def __init__(self, task: Task | None = None) -> None:
        self._task = task or ingest_document

    def submit(self, document_id: uuid.UUID, owner_id: uuid.UUID, raw_bytes: bytes) -> str:
        """
        Queue one document for ingestion.

        Args:
            document_id: Document created in processing state
            owner_id: Owner of the document
            raw_bytes: PDF content

        Returns:
            str: Celery task ID
        """
        result = self._task.apply_async(
            args=[str(document_id), str(owner_id), encode_payload(raw_bytes)],
        )
        logger.info(
            f"{__name__}:submit - Ingestion queued",
            extra={"document_id": str(document_id), "task_id": result.id},
        )
        return result.id
