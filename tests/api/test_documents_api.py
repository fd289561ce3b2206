"""
Tests for the documents HTTP API.

The document service is replaced through dependency_overrides.

System role: Verification of routing, identity header and error mapping
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from finance_docs.api.deps.dependencies import get_document_service
from finance_docs.api.main import create_app
from finance_docs.core.document_processing.models import DocumentRecord, DocumentStatus
from finance_docs.core.exceptions import (
    DocumentAccessError,
    DocumentNotFoundError,
    ValidationError,
)


def make_record(owner_id, **overrides) -> DocumentRecord:
    now = datetime.now(timezone.utc)
    values = {
        "id": uuid4(),
        "owner_id": owner_id,
        "name": "March statement",
        "file_path": f"documents/{owner_id}/1_march.pdf",
        "file_size": 2048,
        "page_count": 0,
        "status": DocumentStatus.PROCESSING,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return DocumentRecord(**values)


@pytest.fixture
def mock_document_service():
    return AsyncMock()


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def client(mock_document_service):
    app = create_app()
    app.dependency_overrides[get_document_service] = lambda: mock_document_service
    return TestClient(app)


@pytest.fixture
def headers(user_id):
    return {"X-User-Id": str(user_id)}


def test_upload_document_returns_processing_document(client, mock_document_service, headers, user_id):
    record = make_record(user_id)
    mock_document_service.upload_document.return_value = record

    response = client.post(
        "/api/v1/documents",
        files={"file": ("march.pdf", b"%PDF-1.4 body", "application/pdf")},
        data={"name": "March statement"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json() == {
        "document": {"id": str(record.id), "name": "March statement", "status": "processing"}
    }
    mock_document_service.upload_document.assert_called_once_with(
        owner_id=user_id,
        filename="march.pdf",
        content=b"%PDF-1.4 body",
        name="March statement",
    )


def test_upload_document_maps_validation_error_to_400(client, mock_document_service, headers):
    mock_document_service.upload_document.side_effect = ValidationError("Only .pdf files are supported")

    response = client.post(
        "/api/v1/documents",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Only .pdf files are supported"


def test_upload_document_without_file_returns_400(client, mock_document_service, headers):
    response = client.post("/api/v1/documents", data={"name": "x"}, headers=headers)

    assert response.status_code == 400
    mock_document_service.upload_document.assert_not_called()


def test_upload_document_hides_internal_errors(client, mock_document_service, headers):
    mock_document_service.upload_document.side_effect = ConnectionError("broker down")

    response = client.post(
        "/api/v1/documents",
        files={"file": ("a.pdf", b"%PDF-1.4", "application/pdf")},
        headers=headers,
    )

    assert response.status_code == 500
    assert "broker" not in response.json()["detail"]


@pytest.mark.parametrize("header_value", [None, "not-a-uuid"])
def test_requests_without_valid_user_are_rejected(client, mock_document_service, header_value):
    headers = {"X-User-Id": header_value} if header_value else {}

    response = client.get("/api/v1/documents", headers=headers)

    assert response.status_code == 401
    mock_document_service.list_documents.assert_not_called()


def test_list_documents_includes_chunk_counts(client, mock_document_service, headers, user_id):
    records = [
        make_record(user_id, name="newer", status=DocumentStatus.READY, page_count=3, chunk_count=12),
        make_record(user_id, name="older", status=DocumentStatus.ERROR, error_message="Failed to parse PDF", chunk_count=0),
    ]
    mock_document_service.list_documents.return_value = records

    response = client.get("/api/v1/documents", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [d["name"] for d in data["documents"]] == ["newer", "older"]
    assert [d["chunk_count"] for d in data["documents"]] == [12, 0]
    assert data["documents"][1]["error_message"] == "Failed to parse PDF"


def test_get_document_returns_status(client, mock_document_service, headers, user_id):
    record = make_record(user_id, status=DocumentStatus.READY, page_count=5)
    mock_document_service.get_document.return_value = record

    response = client.get(f"/api/v1/documents/{record.id}", headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "ready"
    assert response.json()["page_count"] == 5
    mock_document_service.get_document.assert_called_once_with(user_id, record.id)


def test_get_document_maps_not_found_to_404(client, mock_document_service, headers):
    document_id = uuid4()
    mock_document_service.get_document.side_effect = DocumentNotFoundError(str(document_id))

    response = client.get(f"/api/v1/documents/{document_id}", headers=headers)

    assert response.status_code == 404


def test_get_document_maps_foreign_owner_to_403(client, mock_document_service, headers, user_id):
    document_id = uuid4()
    mock_document_service.get_document.side_effect = DocumentAccessError(str(document_id), str(user_id))

    response = client.get(f"/api/v1/documents/{document_id}", headers=headers)

    assert response.status_code == 403


def test_rename_document(client, mock_document_service, headers, user_id):
    record = make_record(user_id, name="Tax return")
    mock_document_service.rename_document.return_value = record

    response = client.patch(f"/api/v1/documents/{record.id}", json={"name": " Tax return "}, headers=headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Tax return"
    mock_document_service.rename_document.assert_called_once_with(user_id, record.id, " Tax return ")


def test_rename_document_with_blank_name_returns_400(client, mock_document_service, headers):
    mock_document_service.rename_document.side_effect = ValidationError("Name is required", field="name")

    response = client.patch(f"/api/v1/documents/{uuid4()}", json={"name": "  "}, headers=headers)

    assert response.status_code == 400


def test_delete_document(client, mock_document_service, headers, user_id):
    document_id = uuid4()
    mock_document_service.delete_document.return_value = None

    response = client.delete(f"/api/v1/documents/{document_id}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    mock_document_service.delete_document.assert_called_once_with(user_id, document_id)
