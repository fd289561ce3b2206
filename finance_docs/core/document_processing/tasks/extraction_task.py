"""
PDF text extraction task using LangChain PyPDFParser.

Reads an uploaded PDF straight from memory and returns its plain text,
page by page.

Dependencies: langchain_community.document_loaders, langchain_core, pypdf
System role: First stage of document ingestion pipeline
"""

import logging

from langchain_community.document_loaders.parsers.pdf import PyPDFParser
from langchain_core.documents.base import Blob

from finance_docs.core.exceptions import ExtractionError

from ..models import ExtractedText, PageText

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


class PdfTextExtractor:
    """Extract plain text from PDF bytes."""

    def __init__(self, parser: PyPDFParser | None = None) -> None:
        """
        Initialize extraction task.

        Args:
            parser: Optional parser instance (a default PyPDFParser if None)
        """
        self._parser = parser or PyPDFParser()

    def extract(self, raw_bytes: bytes) -> ExtractedText:
        """
        Extract text and page count from a PDF.

        Args:
            raw_bytes: Complete PDF file content

        Returns:
            ExtractedText: Joined text, page count and per-page text

        Raises:
            ExtractionError: When the bytes are not a readable PDF
        """
        if not raw_bytes:
            raise ExtractionError("Uploaded file is empty")
        if not raw_bytes.lstrip()[:5] == PDF_MAGIC:
            raise ExtractionError("Uploaded file is not a PDF")

        try:
            blob = Blob.from_data(raw_bytes, mime_type="application/pdf")
            documents = list(self._parser.lazy_parse(blob))
        except Exception as e:
            raise ExtractionError(f"Failed to parse PDF: {e}") from e

        pages = [
            PageText(page_number=number, text=doc.page_content or "")
            for number, doc in enumerate(documents, start=1)
        ]
        text = "\n\n".join(page.text for page in pages).strip()

        logger.info(
            f"{__name__}:extract - Extracted PDF text",
            extra={"page_count": len(pages), "characters": len(text)},
        )
        return ExtractedText(text=text, page_count=len(pages), pages=pages)
