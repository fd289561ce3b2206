"""
Exception hierarchy for the Finance Docs service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class FinanceDocsException(Exception):
    """Base exception for all Finance Docs errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(FinanceDocsException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DocumentNotFoundError(FinanceDocsException):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class DocumentAccessError(FinanceDocsException):
    """Raised when a user touches a document they do not own."""

    def __init__(self, document_id: str, owner_id: str) -> None:
        super().__init__(
            f"Document {document_id} does not belong to user {owner_id}",
            {"document_id": document_id, "owner_id": owner_id},
        )


class DocumentProcessingError(FinanceDocsException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ExtractionError(DocumentProcessingError):
    """Raised when text cannot be extracted from an uploaded PDF."""


class EmbeddingError(DocumentProcessingError):
    """Raised when embedding generation fails for a chunk."""


class ChunkPersistenceError(DocumentProcessingError):
    """Raised when the chunk batch cannot be written."""
