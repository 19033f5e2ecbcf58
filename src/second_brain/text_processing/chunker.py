"""Chunking policy for ingested text."""

from __future__ import annotations

from llama_index.core.node_parser import SentenceSplitter

from second_brain.core.logging import get_logger
from second_brain.text_processing.normalize_text import normalize_text

logger = get_logger(__name__)


class TextChunker:
    """Sentence-aware splitter measuring ``chunk_size``/``chunk_overlap`` in characters."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = SentenceSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            tokenizer=list,
        )

    def split(self, text: str) -> list[str]:
        """Normalize and split ``text``; whitespace-only input yields no chunks."""
        normalized = normalize_text(text)
        if not normalized.strip():
            return []

        chunks = [chunk for chunk in self._splitter.split_text(normalized) if chunk.strip()]
        logger.info(
            "Split %d chars into %d chunks",
            len(normalized),
            len(chunks),
        )
        return chunks
