"""
Sentence-aware text chunking task.

Splits cleaned document text into overlapping, token-bounded chunks along
sentence boundaries. Sizes are measured with the 4-characters-per-token
estimate, so a fixed target always maps to the same boundaries.

Dependencies: re, math, token_estimator
System role: Second stage of document ingestion pipeline
"""

import math
import re

from ..models import PageText, TextChunk
from ..token_estimator import estimate_tokens

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


class ChunkingTask:
    """Greedy sentence accumulator with word-level overlap between chunks."""

    def __init__(self, target_size: int = 500, overlap: int = 50) -> None:
        """
        Initialize chunking task.

        Args:
            target_size: Token budget before a chunk is closed
            overlap: Overlap budget; ceil(overlap / 2) trailing words are
                carried into the next chunk

        Raises:
            ValueError: When target_size <= 0 or overlap < 0
        """
        if target_size <= 0:
            raise ValueError("target_size must be positive")
        if overlap < 0:
            raise ValueError("overlap cannot be negative")

        self._target_size = target_size
        self._overlap_words = math.ceil(overlap / 2)

    @staticmethod
    def normalize(text: str) -> str:
        """Collapse whitespace runs to single spaces and trim."""
        return _WHITESPACE_RE.sub(" ", text).strip()

    @staticmethod
    def split_sentences(text: str) -> list[str]:
        """Split normalized text after '.', '!' or '?' followed by whitespace."""
        return _SENTENCE_BOUNDARY_RE.split(text)

    def chunk(
        self,
        text: str,
        page_number: int = 1,
        start_index: int = 0,
    ) -> list[TextChunk]:
        """
        Split text into overlapping chunks.

        A sentence is never split, so one sentence larger than the target
        becomes its own oversized chunk.

        Args:
            text: Raw extracted text
            page_number: Page number stamped on every chunk
            start_index: Index given to the first chunk

        Returns:
            list[TextChunk]: Chunks with contiguous indices from start_index;
                empty when text is empty or whitespace only
        """
        clean_text = self.normalize(text)
        if not clean_text:
            return []

        chunks: list[TextChunk] = []
        chunk_index = start_index
        buffer = ""

        for sentence in self.split_sentences(clean_text):
            over_budget = (
                estimate_tokens(buffer) + estimate_tokens(sentence) > self._target_size
            )
            if over_budget and buffer:
                chunks.append(
                    TextChunk(
                        content=buffer.strip(),
                        page_number=page_number,
                        chunk_index=chunk_index,
                    )
                )
                chunk_index += 1
                buffer = self._carry_over(buffer, sentence)
            else:
                buffer = f"{buffer} {sentence}" if buffer else sentence

        if buffer.strip():
            chunks.append(
                TextChunk(
                    content=buffer.strip(),
                    page_number=page_number,
                    chunk_index=chunk_index,
                )
            )

        return chunks

    def chunk_pages(self, pages: list[PageText]) -> list[TextChunk]:
        """
        Chunk pages in order, keeping indices contiguous across pages.

        Overlap is not carried across a page break.

        Args:
            pages: Extracted pages in document order

        Returns:
            list[TextChunk]: Chunks stamped with their real page numbers
        """
        chunks: list[TextChunk] = []
        for page in pages:
            chunks.extend(
                self.chunk(page.text, page.page_number, start_index=len(chunks))
            )
        return chunks

    def _carry_over(self, closed_buffer: str, sentence: str) -> str:
        """Start a new buffer with the closed buffer's trailing words."""
        if self._overlap_words == 0:
            return sentence
        tail = closed_buffer.split(" ")[-self._overlap_words:]
        return " ".join(tail) + " " + sentence
