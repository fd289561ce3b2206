"""HTTP API for document upload and status polling."""
