"""
Document API endpoints.

Routes:
- POST /documents - Upload a PDF and queue ingestion
- GET /documents - List the caller's documents with chunk counts
- GET /documents/{id} - Poll one document
- PATCH /documents/{id} - Rename a document
- DELETE /documents/{id} - Delete a document and its chunks

Dependencies: fastapi, finance_docs.application.services, finance_docs.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from finance_docs.api.deps import get_current_user_id, get_document_service
from finance_docs.application.services.document_service import DocumentService
from finance_docs.core.exceptions import (
    DocumentAccessError,
    DocumentNotFoundError,
    FinanceDocsException,
    ValidationError,
)
from finance_docs.models.document import (
    DocumentListResponse,
    DocumentResponse,
    RenameDocumentRequest,
    UploadedDocument,
    UploadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def to_http_exception(exc: FinanceDocsException) -> HTTPException:
    """Map a domain exception to its HTTP status."""
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, DocumentNotFoundError):
        return HTTPException(status_code=404, detail="Document not found")
    if isinstance(exc, DocumentAccessError):
        return HTTPException(status_code=403, detail="Forbidden")
    return HTTPException(status_code=500, detail="Internal server error")


@router.post("", response_model=UploadResponse)
async def upload_document(
    file: UploadFile | None = File(default=None),
    name: str | None = Form(default=None),
    owner_id: UUID = Depends(get_current_user_id),
    document_service: DocumentService = Depends(get_document_service),
) -> UploadResponse:
    """
    Upload a PDF for ingestion.

    Returns immediately with the document in processing state; poll
    GET /documents/{id} for the outcome.

    Raises:
        HTTPException(400): No file, wrong type, empty or too large
        HTTPException(500): Document could not be created or queued
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    content = await file.read()
    try:
        document = await document_service.upload_document(
            owner_id=owner_id,
            filename=file.filename or "",
            content=content,
            name=name,
        )
    except FinanceDocsException as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception(
            f"{__name__}:upload_document - Upload failed",
            extra={"owner_id": str(owner_id), "upload_name": file.filename},
        )
        raise HTTPException(status_code=500, detail="Failed to upload document")

    return UploadResponse(
        document=UploadedDocument(id=document.id, name=document.name, status=document.status)
    )


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    owner_id: UUID = Depends(get_current_user_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List the caller's documents, newest first."""
    records = await document_service.list_documents(owner_id)
    return DocumentListResponse(
        documents=[DocumentResponse.from_record(record) for record in records],
        total=len(records),
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Get one document; the polling target while it is processing.

    Raises:
        HTTPException(404): Document not found
        HTTPException(403): Document belongs to another user
    """
    try:
        record = await document_service.get_document(owner_id, document_id)
    except FinanceDocsException as e:
        raise to_http_exception(e)
    return DocumentResponse.from_record(record)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def rename_document(
    document_id: UUID,
    request: RenameDocumentRequest,
    owner_id: UUID = Depends(get_current_user_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Rename a document.

    Raises:
        HTTPException(400): Blank name
        HTTPException(404): Document not found
        HTTPException(403): Document belongs to another user
    """
    try:
        record = await document_service.rename_document(owner_id, document_id, request.name)
    except FinanceDocsException as e:
        raise to_http_exception(e)
    return DocumentResponse.from_record(record)


@router.delete("/{document_id}")
async def delete_document(
    document_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    document_service: DocumentService = Depends(get_document_service),
) -> dict:
    """
    Delete a document; its chunks are removed with it.

    Raises:
        HTTPException(404): Document not found
        HTTPException(403): Document belongs to another user
    """
    try:
        await document_service.delete_document(owner_id, document_id)
    except FinanceDocsException as e:
        raise to_http_exception(e)
    return {"success": True}
