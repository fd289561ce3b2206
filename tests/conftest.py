"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite session factory, stores, fake pipeline
collaborators and a minimal PDF builder
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
import uuid

import pytest

from finance_docs.core.document_processing.configs import DocumentPipelineSettings
from finance_docs.core.document_processing.models import ExtractedText, PageText
from finance_docs.core.exceptions import EmbeddingError


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from finance_docs.boundary.db.base import Base
    from finance_docs.boundary.db import models  # noqa: F401  (registers tables)

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory):
    """Single session on the test database."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def document_store(session_factory):
    from finance_docs.boundary.db.stores import DocumentStatusStore

    return DocumentStatusStore(session_factory)


@pytest.fixture
def chunk_store(session_factory):
    from finance_docs.boundary.db.stores import ChunkStore

    return ChunkStore(session_factory)


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def pipeline_settings() -> DocumentPipelineSettings:
    """Pipeline settings with small, test-friendly limits."""
    return DocumentPipelineSettings(
        chunk_target_size=10,
        chunk_overlap=0,
        embedding_dimension=4,
        embedding_timeout_seconds=1.0,
        extraction_timeout_seconds=1.0,
        max_upload_bytes=1024,
    )


class FakeEmbedder:
    """
    Embedding client double.

    Fails any text containing one of fail_markers; optional per-marker
    delays let tests reorder completions.
    """

    def __init__(
        self,
        dimension: int = 4,
        fail_markers: tuple[str, ...] = (),
        delays: dict[str, float] | None = None,
    ) -> None:
        self.dimension = dimension
        self.fail_markers = fail_markers
        self.delays = delays or {}
        self.calls: list[str] = []
        self.completed: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        for marker, delay in self.delays.items():
            if marker in text:
                await asyncio.sleep(delay)
        if any(marker in text for marker in self.fail_markers):
            raise EmbeddingError("Embedding service unavailable")
        self.completed.append(text)
        return [float(len(text))] * self.dimension


class FakeExtractor:
    """Extractor double returning fixed pages, or raising."""

    def __init__(self, pages: list[str] | None = None, error: Exception | None = None) -> None:
        self.pages = pages or []
        self.error = error

    def extract(self, raw_bytes: bytes) -> ExtractedText:
        if self.error is not None:
            raise self.error
        pages = [
            PageText(page_number=number, text=text)
            for number, text in enumerate(self.pages, start=1)
        ]
        return ExtractedText(
            text="\n\n".join(self.pages).strip(),
            page_count=len(pages),
            pages=pages,
        )


@pytest.fixture
def fake_embedder_cls():
    return FakeEmbedder


@pytest.fixture
def fake_extractor_cls():
    return FakeExtractor


def build_pdf(pages: list[str]) -> bytes:
    """Build a small valid PDF with one Helvetica text line per page."""
    page_count = len(pages)
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(page_count))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, text in enumerate(pages):
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {5 + 2 * i} 0 R >>"
            ).encode()
        )
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


@pytest.fixture
def pdf_factory():
    """Return the PDF builder."""
    return build_pdf
