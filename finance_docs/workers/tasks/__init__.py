"""
Celery task definitions.

Exports: ingest_document, sweep_stale_documents
"""

from finance_docs.workers.tasks.document_ingestion import (
    ingest_document,
    sweep_stale_documents,
)

__all__ = ["ingest_document", "sweep_stale_documents"]
