"""Chunk store: embedded chunk points in the main collection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal, overload

from second_brain.adapters import qdrant_mapper
from second_brain.adapters.qdrant_filters import compile_filter
from second_brain.config import Settings
from second_brain.core.constants import FILE_TYPE_TEXT
from second_brain.core.exceptions import StoreUnavailable
from second_brain.core.filters import DocumentIdEquals, FilterPredicate, matches
from second_brain.core.logging import get_logger
from second_brain.core.models import ChunkHit, ChunkPoint, ChunkUpsertResult, CollectionDescriptor
from second_brain.core.timestamps import utc_now_iso
from second_brain.repositories.delete_strategies import DeleteStrategy, build_delete_strategy
from second_brain.services.collection_manager import CHUNK_PAYLOAD_INDEXES, CollectionManager
from second_brain.services.embedding_service import EmbeddingService
from second_brain.services.point_ids import new_chunk_point_id
from second_brain.services.qdrant_service import QdrantService

logger = get_logger(__name__)


class ChunkRepository:
    """Upsert, filtered search, full scan and delete for chunk points."""

    def __init__(
        self,
        settings: Settings,
        qdrant_service: QdrantService,
        embedding_service: EmbeddingService,
        collection_manager: CollectionManager | None = None,
        delete_strategy: DeleteStrategy | None = None,
    ):
        self.settings = settings
        self.collection_name = settings.qdrant_collection_name
        self._qdrant = qdrant_service
        self._embeddings = embedding_service
        self._collections = collection_manager or CollectionManager(qdrant_service)
        self._delete_strategy = delete_strategy or build_delete_strategy(
            settings,
            qdrant_service,
            cap=settings.chunk_scan_cap,
        )

    async def collection_exists(self) -> bool:
        return await self._qdrant.collection_exists(self.collection_name)

    def require_embedding_provider(self) -> None:
        """Raise ConfigurationError now if no embedding credential is configured."""
        _ = self._embeddings.embed_model

    async def ensure_collection(self) -> CollectionDescriptor:
        """Make sure the chunk collection matches the embedding dimensionality."""
        return await self._collections.ensure_collection(
            self.collection_name,
            self._embeddings.dimensions,
            payload_indexes=CHUNK_PAYLOAD_INDEXES,
        )

    async def upsert_chunks(
        self,
        chunks: Sequence[str],
        document_id: str,
        filename: str,
        upload_date: str | None = None,
        file_type: str | None = None,
    ) -> ChunkUpsertResult:
        """Embed every chunk and write them in a single batch.

        All embeddings must succeed before anything is written. A failed write
        is reported in the result instead of raised.

        Raises:
            StoreUnavailable: The collection could not be validated or created.
            ConfigurationError: No embedding credential configured.
            ProviderError: Any embedding call failed.
        """
        await self.ensure_collection()

        if not chunks:
            return ChunkUpsertResult(success=True, message="No chunks to store", count=0)

        logger.info(
            "Generating embeddings for %d chunks of '%s' using %s",
            len(chunks),
            document_id,
            self._embeddings.model_name,
        )
        vectors = await self._embeddings.embed_many(chunks)

        upload_timestamp = upload_date or utc_now_iso()
        points = [
            qdrant_mapper.chunk_to_point(
                ChunkPoint(
                    id=new_chunk_point_id(),
                    document_id=document_id,
                    filename=filename,
                    chunk_index=index,
                    content=chunk,
                    upload_date=upload_timestamp,
                    embedding_model=self._embeddings.model_name,
                    file_type=file_type or FILE_TYPE_TEXT,
                    embedding=vector,
                )
            )
            for index, (chunk, vector) in enumerate(zip(chunks, vectors, strict=True))
        ]

        try:
            await self._qdrant.upsert_points(self.collection_name, points)
        except StoreUnavailable as exc:
            logger.error("Error storing chunks for '%s': %s", document_id, exc.message)
            return ChunkUpsertResult(success=False, message=exc.message)

        logger.info("Stored %d chunks for '%s'", len(points), document_id)
        return ChunkUpsertResult(
            success=True,
            message=(
                f"Stored {len(points)} chunks with {self._embeddings.model_name} "
                f"embeddings in Qdrant"
            ),
            count=len(points),
            model=self._embeddings.model_name,
            dimensions=len(vectors[0]),
            point_ids=[int(point.id) for point in points],
        )

    @overload
    async def search(
        self,
        query_vector: Sequence[float],
        limit: int = ...,
        predicate: FilterPredicate | None = ...,
        include_metadata: Literal[False] = ...,
    ) -> list[str]: ...

    @overload
    async def search(
        self,
        query_vector: Sequence[float],
        limit: int = ...,
        predicate: FilterPredicate | None = ...,
        *,
        include_metadata: Literal[True],
    ) -> list[ChunkHit]: ...

    async def search(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
        predicate: FilterPredicate | None = None,
        include_metadata: bool = False,
    ) -> list[str] | list[ChunkHit]:
        """Nearest chunks by descending score, constrained by ``predicate``.

        A missing collection means nothing has been ingested yet and yields ``[]``.
        """
        if not await self._qdrant.collection_exists(self.collection_name):
            logger.info("Collection '%s' doesn't exist yet", self.collection_name)
            return []

        filter_ = compile_filter(predicate)
        if filter_ is not None:
            logger.info("Applying filters: %s", filter_.model_dump(exclude_none=True))

        points = await self._qdrant.search(
            self.collection_name,
            query_vector,
            limit=limit,
            filter_=filter_,
        )
        logger.info("Found %d relevant chunks", len(points))

        hits = [qdrant_mapper.scored_point_to_hit(point) for point in points]
        if include_metadata:
            return hits
        return [hit.content for hit in hits if hit.content]

    async def scan(self, predicate: FilterPredicate | None = None) -> list[ChunkPoint]:
        """Read chunks (up to the scan cap) matching ``predicate`` client-side."""
        if not await self._qdrant.collection_exists(self.collection_name):
            return []

        records = await self._qdrant.scroll_all(
            self.collection_name,
            cap=self.settings.chunk_scan_cap,
            page_size=self.settings.scroll_page_size,
        )
        return [
            qdrant_mapper.record_to_chunk(record)
            for record in records
            if matches(predicate, record.payload)
        ]

    async def get_document_chunks(self, document_id: str) -> list[ChunkPoint]:
        """All chunks of one document in ``chunk_index`` order."""
        chunks = await self.scan(DocumentIdEquals(document_id))
        return sorted(chunks, key=lambda chunk: chunk.chunk_index)

    async def delete_by_document_id(self, document_id: str) -> int | None:
        """Delete every chunk of a document; returns the count when known."""
        if not await self._qdrant.collection_exists(self.collection_name):
            return 0

        deleted = await self._delete_strategy.delete_matching(
            self.collection_name,
            DocumentIdEquals(document_id),
        )
        logger.info("Deleted chunks of document '%s' (count=%s)", document_id, deleted)
        return deleted
