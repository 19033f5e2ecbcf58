"""Collection lifecycle: create on demand, recreate on dimensionality drift."""

from __future__ import annotations

from collections.abc import Mapping

from qdrant_client import models as q

from second_brain.core.constants import K_DOCUMENT_ID, K_FILENAME, K_FULL_DOCUMENT_ID, K_UPLOAD_DATE
from second_brain.core.exceptions import StoreUnavailable
from second_brain.core.logging import get_logger
from second_brain.core.models import CollectionDescriptor
from second_brain.services.qdrant_service import QdrantService

logger = get_logger(__name__)

# Fields the filters and filtered deletes match on.
CHUNK_PAYLOAD_INDEXES: dict[str, q.PayloadSchemaType] = {
    K_DOCUMENT_ID: q.PayloadSchemaType.KEYWORD,
    K_FILENAME: q.PayloadSchemaType.KEYWORD,
    K_UPLOAD_DATE: q.PayloadSchemaType.DATETIME,
}
FULL_DOCUMENT_PAYLOAD_INDEXES: dict[str, q.PayloadSchemaType] = {
    K_FULL_DOCUMENT_ID: q.PayloadSchemaType.KEYWORD,
}


class CollectionManager:
    """Guarantees a named collection exists with the expected vector size.

    A collection whose vector size differs from the expected one is dropped and
    recreated empty. This loses every stored point; re-ingesting the source
    documents is the only recovery.
    """

    def __init__(self, qdrant_service: QdrantService):
        self._qdrant = qdrant_service

    async def ensure_collection(
        self,
        collection_name: str,
        expected_dim: int,
        distance: q.Distance = q.Distance.COSINE,
        payload_indexes: Mapping[str, q.PayloadSchemaType] | None = None,
    ) -> CollectionDescriptor:
        """Create or recreate the collection as needed and return its descriptor.

        ``payload_indexes`` are created together with a new collection; a
        failing index is logged and skipped.

        Raises:
            StoreUnavailable: If any backend call fails.
        """
        current = await self._qdrant.get_collection_info(collection_name)

        needs_create = current is None
        if current is not None and current.vector_size != expected_dim:
            logger.warning(
                "Collection '%s' has %s-dimensional vectors, expected %d; recreating "
                "it and discarding %s points",
                collection_name,
                current.vector_size,
                expected_dim,
                current.points_count,
            )
            await self._qdrant.delete_collection(collection_name)
            needs_create = True

        if not needs_create:
            logger.debug(
                "Collection '%s' already exists with %d dimensions",
                collection_name,
                expected_dim,
            )
            return current  # type: ignore[return-value]

        await self._qdrant.create_collection(
            collection_name,
            vector_size=expected_dim,
            distance=distance,
        )
        await self._ensure_payload_indexes(collection_name, payload_indexes or {})
        return CollectionDescriptor(
            name=collection_name,
            vector_size=expected_dim,
            distance=distance.value,
            points_count=0,
        )

    async def _ensure_payload_indexes(
        self,
        collection_name: str,
        payload_indexes: Mapping[str, q.PayloadSchemaType],
    ) -> None:
        for field_name, schema in payload_indexes.items():
            try:
                await self._qdrant.create_payload_index(collection_name, field_name, schema)
            except StoreUnavailable as exc:
                logger.warning("Failed to create index '%s': %s", field_name, exc.message)
            else:
                logger.debug("Indexed '%s' on '%s' as %s", field_name, collection_name, schema)
