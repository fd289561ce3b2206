"""Application layer: services coordinating stores and the ingestion queue."""
