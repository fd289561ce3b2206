"""
Document ingestion Celery tasks.

ingest_document(document_id, owner_id, payload): runs the orchestrator for
one uploaded PDF. The PDF travels base64-encoded inside the JSON message.

sweep_stale_documents(): marks documents stuck in processing as error.

Dependencies: celery, finance_docs.dependencies, finance_docs.boundary.db
System role: Async document processing task
"""

import asyncio
import base64
import binascii
import logging
import uuid
from datetime import timedelta

from finance_docs.boundary.db.connection import get_async_engine, get_async_session_factory
from finance_docs.boundary.db.stores import DocumentStatusStore
from finance_docs.configs import Settings, get_settings
from finance_docs.core.document_processing.models import IngestionSummary
from finance_docs.dependencies import build_orchestrator
from finance_docs.workers import celery_app

logger = logging.getLogger(__name__)

_celery_config = get_settings().celery


def encode_payload(raw_bytes: bytes) -> str:
    return base64.b64encode(raw_bytes).decode("ascii")


def decode_payload(payload: str) -> bytes:
    """
    Decode the base64 PDF payload of an ingestion message.

    Raises:
        ValueError: When the payload is not valid base64
    """
    try:
        return base64.b64decode(payload.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid document payload: {e}") from e


async def run_ingestion(
    document_id: uuid.UUID,
    owner_id: uuid.UUID,
    raw_bytes: bytes,
    settings: Settings | None = None,
) -> IngestionSummary:
    """
    Run the pipeline for one document on a fresh engine.

    The engine is created and disposed per run because every asyncio.run()
    call gets its own event loop and pooled connections are loop-bound.

    Args:
        document_id: Document to ingest
        owner_id: Owner of the document
        raw_bytes: PDF content
        settings: Application settings (from environment if None)

    Returns:
        IngestionSummary: Outcome of the run
    """
    settings = settings or get_settings()
    engine = get_async_engine(settings.database)
    try:
        orchestrator = build_orchestrator(get_async_session_factory(engine), settings.pipeline)
        return await orchestrator.run(document_id, owner_id, raw_bytes)
    finally:
        await engine.dispose()


async def run_stale_sweep(settings: Settings | None = None) -> list[uuid.UUID]:
    """Mark documents processing for longer than stale_after_minutes as error."""
    settings = settings or get_settings()
    engine = get_async_engine(settings.database)
    try:
        store = DocumentStatusStore(get_async_session_factory(engine))
        return await store.fail_stale(
            timedelta(minutes=settings.pipeline.stale_after_minutes)
        )
    finally:
        await engine.dispose()


@celery_app.task(
    bind=True,
    name="finance_docs.ingest_document",
    max_retries=_celery_config.task_max_retries,
    autoretry_for=(Exception,),
    dont_autoretry_for=(ValueError,),
    retry_backoff=_celery_config.task_retry_backoff,
    retry_backoff_max=_celery_config.task_retry_backoff_max,
    acks_late=True,
    reject_on_worker_lost=True,
)
def ingest_document(self, document_id: str, owner_id: str, payload: str) -> dict:
    """
    Ingest document asynchronously.

    Pipeline failures end as status=error inside the orchestrator and are
    not retried. Only an exception escaping the run (the terminal status
    could not be written) triggers a retry.

    Args:
        document_id: Document UUID as string
        owner_id: Owner UUID as string
        payload: Base64-encoded PDF bytes

    Returns:
        dict: IngestionSummary as JSON-compatible dict
    """
    raw_bytes = decode_payload(payload)
    logger.info(
        f"{__name__}:ingest_document - Task started",
        extra={
            "document_id": document_id,
            "size_bytes": len(raw_bytes),
            "attempt": self.request.retries + 1,
        },
    )

    summary = asyncio.run(
        run_ingestion(uuid.UUID(document_id), uuid.UUID(owner_id), raw_bytes)
    )
    return summary.model_dump(mode="json")


@celery_app.task(name="finance_docs.sweep_stale_documents")
def sweep_stale_documents() -> list[str]:
    """
    Fail documents whose ingestion never finished.

    Returns:
        list[str]: IDs of documents marked as error
    """
    stale_ids = asyncio.run(run_stale_sweep())
    return [str(document_id) for document_id in stale_ids]
