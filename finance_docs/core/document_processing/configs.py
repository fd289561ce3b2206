"""
Configuration settings for document processing pipeline.

Provides environment-based configuration for extraction, chunking, embedding,
and the upload limits enforced before a document enters the pipeline.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings (estimated-token units, 1 token ~ 4 characters)
    chunk_target_size: int = Field(
        default=500,
        gt=0,
        description="Token budget a chunk may reach before it is closed",
    )
    chunk_overlap: int = Field(
        default=50,
        ge=0,
        description="Overlap budget; half of it, in words, is carried into the next chunk",
    )
    chunk_by_page: bool = Field(
        default=False,
        description="Chunk each page separately and keep real page numbers",
    )

    # Embedding settings
    google_api_key: str = Field(
        default="",
        description="Gemini API key (falls back to GOOGLE_API_KEY when empty)",
    )
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        gt=0,
        description="Fixed embedding vector dimension",
    )
    embedding_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single embedding call",
    )
    embedding_max_attempts: int = Field(
        default=2,
        ge=1,
        description="Attempts per chunk before the chunk is dropped",
    )
    embedding_concurrency: int = Field(
        default=1,
        ge=1,
        description="Embedding calls in flight per document (1 = sequential)",
    )

    # Extraction settings
    extraction_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Upper bound for PDF text extraction",
    )

    # Outcome policy
    fail_when_all_embeddings_fail: bool = Field(
        default=True,
        description="Mark the document as error when every chunk embedding failed",
    )
    stale_after_minutes: int = Field(
        default=30,
        gt=0,
        description="Age after which a document still processing is considered lost",
    )

    # Upload limits (enforced before the pipeline runs)
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted PDF size in bytes",
    )
    allowed_extensions: list[str] = Field(
        default=[".pdf"],
        description="Accepted upload file extensions",
    )


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
