"""Retrieval query engine: similarity search with metadata and temporal filters."""

from __future__ import annotations

from second_brain.config import Settings
from second_brain.core.exceptions import ValidationException
from second_brain.core.filters import DateInput, build_predicate
from second_brain.core.logging import get_logger
from second_brain.core.models import ChunkHit
from second_brain.repositories.chunk_repository import ChunkRepository
from second_brain.services.embedding_service import EmbeddingService

logger = get_logger(__name__)


class SearchService:
    """Embeds a question and runs a filtered nearest-neighbour search over chunks."""

    def __init__(
        self,
        settings: Settings,
        chunk_repository: ChunkRepository,
        embedding_service: EmbeddingService,
    ):
        self.settings = settings
        self._chunks = chunk_repository
        self._embeddings = embedding_service

    async def search(
        self,
        query: str,
        limit: int | None = None,
        *,
        document_id: str | None = None,
        filename: str | None = None,
        date_from: DateInput | None = None,
        date_to: DateInput | None = None,
        include_metadata: bool = False,
    ) -> list[str] | list[ChunkHit]:
        """Return up to ``limit`` chunks ordered by descending similarity.

        Criteria are ANDed; with none supplied the search is pure similarity
        ranking. Returns ``[]`` before calling the embedding provider when
        nothing has been ingested yet.
        """
        limit = limit or self.settings.search_default_limit
        logger.info(
            "Search: query='%s', limit=%s, document_id=%s, filename=%s, date_from=%s, date_to=%s",
            query,
            limit,
            document_id,
            filename,
            date_from,
            date_to,
        )

        if not await self._chunks.collection_exists():
            logger.info("No chunks ingested yet, returning empty results")
            return []

        try:
            predicate = build_predicate(
                document_id=document_id,
                filename=filename,
                date_from=date_from,
                date_to=date_to,
            )
        except ValueError as exc:
            raise ValidationException(f"Invalid date filter: {exc}") from exc
        query_vector = await self._embeddings.embed_query(query)

        if include_metadata:
            return await self._chunks.search(
                query_vector,
                limit,
                predicate,
                include_metadata=True,
            )
        return await self._chunks.search(query_vector, limit, predicate)
