"""
Google Generative AI Embeddings wrapper with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings so every document embedding is requested
with the same dimension and the retrieval-document task type. The base class
ignores output_dimensionality in the constructor.

Dependencies: langchain_google_genai
System role: Embedding dimension consistency for stored chunk vectors
"""

import logging
from typing import List

from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """GoogleGenerativeAIEmbeddings with a fixed output dimensionality."""

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 768,
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Fixed dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(
        self,
        texts: List[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: List[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> List[List[float]]:
        """
        Embed documents with fixed output dimensionality.

        Args:
            texts: List of texts to embed
            batch_size: Batch size for API calls
            task_type: Task type (RETRIEVAL_DOCUMENT when None)
            titles: Optional titles for documents
            output_dimensionality: Override dimension (uses configured if None)

        Returns:
            List of embedding vectors
        """
        return super().embed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type or "RETRIEVAL_DOCUMENT",
            titles=titles,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )
