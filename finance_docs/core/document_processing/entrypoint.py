"""
Document ingestion orchestrator.

Drives one uploaded PDF through extraction, chunking, embedding and chunk
persistence, then records exactly one terminal status for the document.

Dependencies: All task modules, configs, models
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
import uuid
from typing import Any

from finance_docs.core.exceptions import (
    ChunkPersistenceError,
    ExtractionError,
    FinanceDocsException,
)
from finance_docs.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .models import (
    ChunkRecord,
    DocumentRecord,
    DocumentStatus,
    EmbeddingOutcome,
    ExtractedText,
    IngestionSummary,
    TextChunk,
)
from .tasks import ChunkingTask

logger = logging.getLogger(__name__)


def describe_error(exc: BaseException) -> str:
    """Human-readable message for storing on a failed document."""
    if isinstance(exc, FinanceDocsException):
        return exc.message
    return str(exc) or type(exc).__name__


class IngestionOrchestrator:
    """Orchestrate document ingestion: extract -> chunk -> embed -> persist."""

    def __init__(
        self,
        extractor: Any,
        chunker: ChunkingTask,
        embedder: Any,
        document_store: Any,
        chunk_store: Any,
        settings: DocumentPipelineSettings | None = None,
    ) -> None:
        """
        Initialize orchestrator with its collaborators.

        Args:
            extractor: Object with extract(raw_bytes) -> ExtractedText
            chunker: Sentence chunker
            embedder: Object with async embed(text) -> list[float]
            document_store: Document status store
            chunk_store: Chunk store
            settings: Pipeline settings (uses defaults if None)
        """
        self._extractor = extractor
        self._chunker = chunker
        self._embedder = embedder
        self._documents = document_store
        self._chunks = chunk_store
        self._settings = settings or get_pipeline_settings()

    async def run(
        self,
        document_id: uuid.UUID,
        owner_id: uuid.UUID,
        raw_bytes: bytes,
    ) -> IngestionSummary:
        """
        Ingest one document.

        The document ends in READY or ERROR unless the store itself cannot
        be written, in which case the store error propagates to the caller.

        Args:
            document_id: Document created by the upload, status PROCESSING
            owner_id: Owner stamped on every stored chunk
            raw_bytes: Complete PDF content

        Returns:
            IngestionSummary: Outcome of the run
        """
        start_time = time.perf_counter()

        document = await self._documents.get(document_id)
        if document is None or document.status is not DocumentStatus.PROCESSING:
            log_with_context(
                logger,
                logging.WARNING,
                f"{__name__}:run - Skipping ingestion, document not pending",
                document_id=document_id,
                status=document.status.value if document else "missing",
            )
            return IngestionSummary(
                document_id=document_id,
                status=document.status if document else DocumentStatus.ERROR,
                page_count=document.page_count if document else 0,
                error_message=None if document else "Document not found",
                skipped=True,
            )

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:run - Starting ingestion",
            document_id=document_id,
            size_bytes=len(raw_bytes),
        )

        summary = IngestionSummary(document_id=document_id, status=DocumentStatus.PROCESSING)
        try:
            await self._ingest(summary, owner_id, raw_bytes)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:run - Unexpected ingestion failure",
                e,
                document_id=document_id,
            )
            await self._discard_chunks(document_id)
            summary.stored_chunk_count = 0
            await self._fail(summary, describe_error(e))

        summary.processing_time_ms = (time.perf_counter() - start_time) * 1000
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:run - Ingestion finished",
            document_id=document_id,
            status=summary.status.value,
            chunk_count=summary.chunk_count,
            stored_chunk_count=summary.stored_chunk_count,
            processing_time_ms=round(summary.processing_time_ms, 1),
        )
        return summary

    async def _ingest(
        self,
        summary: IngestionSummary,
        owner_id: uuid.UUID,
        raw_bytes: bytes,
    ) -> None:
        """Run the pipeline steps, recording progress on summary as they finish."""
        document_id = summary.document_id
        try:
            extracted = await self._extract(raw_bytes)
        except ExtractionError as e:
            await self._fail(summary, e.message)
            return

        chunks = self._chunk(extracted)
        outcomes = await self._embed_all(document_id, chunks)
        summary.record_outcomes(outcomes, extracted.page_count)

        records = [
            ChunkRecord(
                document_id=document_id,
                owner_id=owner_id,
                content=outcome.chunk.content,
                page_number=outcome.chunk.page_number,
                chunk_index=outcome.chunk.chunk_index,
                embedding=outcome.embedding,
            )
            for outcome in outcomes
            if outcome.succeeded
        ]

        if chunks and not records and self._settings.fail_when_all_embeddings_fail:
            await self._fail(summary, f"Embedding failed for all {len(chunks)} chunks")
            return

        # The stale sweep may have finalized the document while embedding ran.
        if not await self._still_processing(summary):
            return

        if records:
            try:
                summary.stored_chunk_count = await self._chunks.insert_batch(records)
            except ChunkPersistenceError as e:
                await self._fail(summary, e.message)
                return

        if await self._documents.mark_ready(document_id, extracted.page_count):
            summary.status = DocumentStatus.READY
            return

        await self._discard_chunks(document_id)
        summary.stored_chunk_count = 0
        await self._adopt_stored_status(summary)

    async def _extract(self, raw_bytes: bytes) -> ExtractedText:
        timeout = self._settings.extraction_timeout_seconds
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._extractor.extract, raw_bytes),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExtractionError(f"Text extraction timed out after {timeout:g}s") from e
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Failed to extract text: {describe_error(e)}") from e

    def _chunk(self, extracted: ExtractedText) -> list[TextChunk]:
        if self._settings.chunk_by_page:
            return self._chunker.chunk_pages(extracted.pages)
        return self._chunker.chunk(extracted.text, page_number=1)

    async def _embed_all(
        self,
        document_id: uuid.UUID,
        chunks: list[TextChunk],
    ) -> list[EmbeddingOutcome]:
        """Embed chunks with bounded concurrency; outcomes keep chunk order."""
        semaphore = asyncio.Semaphore(self._settings.embedding_concurrency)

        async def embed_one(chunk: TextChunk) -> EmbeddingOutcome:
            async with semaphore:
                try:
                    vector = await self._embedder.embed(chunk.content)
                except Exception as e:
                    log_with_context(
                        logger,
                        logging.WARNING,
                        f"{__name__}:embed - Dropping chunk",
                        document_id=document_id,
                        chunk_index=chunk.chunk_index,
                        error_msg=describe_error(e),
                    )
                    return EmbeddingOutcome.failure(chunk, describe_error(e))
                return EmbeddingOutcome.success(chunk, vector)

        return list(await asyncio.gather(*(embed_one(chunk) for chunk in chunks)))

    async def _discard_chunks(self, document_id: uuid.UUID) -> None:
        """Best-effort removal of chunks written by this run."""
        try:
            await self._chunks.delete_by_document(document_id)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:run - Failed to remove chunks",
                e,
                document_id=document_id,
            )

    async def _still_processing(self, summary: IngestionSummary) -> bool:
        document = await self._documents.get(summary.document_id)
        if document is not None and document.status is DocumentStatus.PROCESSING:
            return True

        log_with_context(
            logger,
            logging.WARNING,
            f"{__name__}:run - Document finalized elsewhere, not storing chunks",
            document_id=summary.document_id,
            status=document.status.value if document else "missing",
        )
        summary.stored_chunk_count = 0
        self._apply_stored(summary, document)
        return False

    async def _fail(self, summary: IngestionSummary, message: str) -> None:
        """Record ERROR for the document and reflect it in the summary."""
        log_with_context(
            logger,
            logging.ERROR,
            f"{__name__}:run - Ingestion failed",
            document_id=summary.document_id,
            error_msg=message,
        )
        summary.error_message = message
        if await self._documents.mark_error(summary.document_id, message):
            summary.status = DocumentStatus.ERROR
        else:
            await self._adopt_stored_status(summary)

    async def _adopt_stored_status(self, summary: IngestionSummary) -> None:
        """Reflect a status written by someone else after a refused transition."""
        self._apply_stored(summary, await self._documents.get(summary.document_id))

    @staticmethod
    def _apply_stored(summary: IngestionSummary, document: DocumentRecord | None) -> None:
        if document is None:
            summary.status = DocumentStatus.ERROR
            summary.error_message = summary.error_message or "Document not found"
            return
        summary.status = document.status
        if document.error_message:
            summary.error_message = document.error_message
