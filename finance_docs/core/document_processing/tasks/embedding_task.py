"""
Embedding generation task using Google Gemini embeddings.

Embeds one chunk at a time, retrying transient failures and bounding each
call with a timeout.

Dependencies: langchain_core, tenacity, embeddings_wrapper
System role: Third stage of document ingestion pipeline
"""

import asyncio
import logging

from langchain_core.embeddings import Embeddings
from tenacity import Retrying, stop_after_attempt, wait_exponential_jitter

from finance_docs.core.exceptions import EmbeddingError

from ..configs import DocumentPipelineSettings

logger = logging.getLogger(__name__)


class GeminiEmbeddingClient:
    """Generate fixed-length chunk embeddings."""

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int = 768,
        timeout_seconds: float = 30.0,
        max_attempts: int = 2,
    ) -> None:
        """
        Initialize embedding client.

        Args:
            embeddings: LangChain embeddings model
            dimension: Expected vector length
            timeout_seconds: Upper bound for one embed() call, retries included
            max_attempts: Attempts before the call is reported as failed
        """
        self._embeddings = embeddings
        self._dimension = dimension
        self._timeout_seconds = timeout_seconds
        self._max_attempts = max_attempts

    @classmethod
    def from_settings(cls, settings: DocumentPipelineSettings) -> "GeminiEmbeddingClient":
        """Build a client backed by Gemini from pipeline settings."""
        from ..embeddings_wrapper import FixedDimensionEmbeddings

        kwargs = {"google_api_key": settings.google_api_key} if settings.google_api_key else {}
        embeddings = FixedDimensionEmbeddings(
            model=settings.embedding_model,
            output_dimensionality=settings.embedding_dimension,
            **kwargs,
        )
        return cls(
            embeddings=embeddings,
            dimension=settings.embedding_dimension,
            timeout_seconds=settings.embedding_timeout_seconds,
            max_attempts=settings.embedding_max_attempts,
        )

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> list[float]:
        """
        Embed one chunk of text.

        Args:
            text: Chunk content

        Returns:
            list[float]: Vector of the configured dimension

        Raises:
            EmbeddingError: On provider error, timeout or wrong dimension
        """
        try:
            vector = await asyncio.wait_for(
                asyncio.to_thread(self._embed_with_retry, text),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingError(
                f"Embedding timed out after {self._timeout_seconds:g}s"
            ) from e
        except Exception as e:
            raise EmbeddingError(f"Failed to generate embedding: {e}") from e

        if len(vector) != self._dimension:
            raise EmbeddingError(
                f"Embedding has {len(vector)} dimensions, expected {self._dimension}"
            )
        return [float(value) for value in vector]

    def _embed_with_retry(self, text: str) -> list[float]:
        for attempt in Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=0.5, max=5),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:embed - Retry {retry_state.attempt_number}/{self._max_attempts}"
            ),
            reraise=True,
        ):
            with attempt:
                return self._embeddings.embed_documents([text])[0]
