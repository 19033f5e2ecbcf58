"""Embedding provider adapter built on LlamaIndex embedding models."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from llama_index.core.base.embeddings.base import BaseEmbedding
from llama_index.embeddings.google_genai import GoogleGenAIEmbedding  # type: ignore
from llama_index.embeddings.openai import OpenAIEmbedding  # type: ignore

from second_brain.config import Settings
from second_brain.core.exceptions import ConfigurationError, DimensionMismatchError, ProviderError
from second_brain.core.logging import get_logger

logger = get_logger(__name__)


def build_embed_model(settings: Settings) -> BaseEmbedding:
    """Construct the configured provider's embedding model.

    Raises:
        ConfigurationError: If the provider's API key is not set.
    """
    if settings.embedding_provider == "openai":
        if not settings.openai_api_key:
            raise ConfigurationError(
                "OpenAI API key not configured. Please set OPENAI_API_KEY in your environment."
            )
        return OpenAIEmbedding(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
        )

    if not settings.google_api_key:
        raise ConfigurationError(
            "Google API key not configured. Please set GOOGLE_API_KEY in your environment."
        )
    return GoogleGenAIEmbedding(
        model_name=settings.embedding_model,
        api_key=settings.google_api_key,
    )


class EmbeddingService:
    """Turns text into fixed-length vectors. No retries; callers decide."""

    def __init__(
        self,
        settings: Settings,
        embed_model: BaseEmbedding | None = None,
        max_concurrency: int = 8,
    ):
        self.settings = settings
        self.model_name = settings.embedding_model
        self.dimensions = settings.embedding_dimensions
        self._strict = settings.strict_embedding_dimensions
        self._embed_model = embed_model
        self._semaphore = asyncio.Semaphore(max_concurrency)

    @property
    def embed_model(self) -> BaseEmbedding:
        """The provider model, built on first use so a missing key fails fast."""
        if self._embed_model is None:
            self._embed_model = build_embed_model(self.settings)
            logger.info(
                "Embedding model initialized: provider=%s model=%s",
                self.settings.embedding_provider,
                self.model_name,
            )
        return self._embed_model

    async def embed(self, text: str) -> list[float]:
        """Embed a document chunk.

        Raises:
            ConfigurationError: No credential configured.
            ProviderError: The call failed or returned an empty/mis-sized vector.
        """
        model = self.embed_model
        try:
            async with self._semaphore:
                vector = await model.aget_text_embedding(text)
        except Exception as exc:
            logger.error("Error generating embedding: %s", exc)
            raise ProviderError(f"Failed to generate embedding: {exc}") from exc
        return self._validate(vector)

    async def embed_query(self, query: str) -> list[float]:
        """Embed a search query with the query-side variant of the model."""
        model = self.embed_model
        try:
            vector = await model.aget_query_embedding(query)
        except Exception as exc:
            logger.error("Error generating query embedding: %s", exc)
            raise ProviderError(f"Failed to generate embedding: {exc}") from exc
        return self._validate(vector)

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed all texts concurrently; any single failure fails the whole batch.

        The first failure cancels the embeddings still in flight. The result
        preserves the input order.
        """
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self.embed(text)) for text in texts]
        except ExceptionGroup as exc_group:
            raise exc_group.exceptions[0]
        vectors = [task.result() for task in tasks]
        logger.info(
            "Generated %d embeddings with %s (%d dimensions)",
            len(vectors),
            self.model_name,
            len(vectors[0]) if vectors else self.dimensions,
        )
        return vectors

    def _validate(self, vector: Sequence[float] | None) -> list[float]:
        if not vector:
            raise ProviderError("Invalid embedding response: empty vector")
        if len(vector) != self.dimensions:
            if self._strict:
                raise DimensionMismatchError(expected=self.dimensions, actual=len(vector))
            logger.warning(
                "Embedding has %d dimensions, expected %d; storing as given",
                len(vector),
                self.dimensions,
            )
        return list(vector)
