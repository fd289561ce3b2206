"""
Finance Docs: document ingestion service for the personal-finance app.

Turns uploaded PDFs into embedded, searchable chunks and tracks each
document's processing status.
"""

__version__ = "0.1.0"
