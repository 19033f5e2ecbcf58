"""Thin async wrapper around the Qdrant client used by every store."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from qdrant_client import AsyncQdrantClient
from qdrant_client import models as q
from qdrant_client.conversions.common_types import PointId
from qdrant_client.http.exceptions import ApiException

from second_brain.adapters.qdrant_mapper import collection_info_to_descriptor
from second_brain.config import Settings
from second_brain.core.exceptions import StoreUnavailable
from second_brain.core.logging import get_logger
from second_brain.core.models import CollectionDescriptor

logger = get_logger(__name__)

# Errors raised by the remote client (HTTP status / transport) and by local mode.
_BACKEND_ERRORS = (ApiException, ValueError, OSError)


class QdrantService:
    """Point-level primitives (collections, upsert, search, scroll, delete) over Qdrant."""

    def __init__(
        self,
        settings: Settings,
        aclient: AsyncQdrantClient | None = None,
    ):
        self.settings = settings

        self.aclient = aclient or AsyncQdrantClient(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key,
            prefer_grpc=settings.qdrant_prefer_grpc,
            timeout=settings.qdrant_timeout,
        )

        logger.info("QdrantService initialized for %s", settings.qdrant_url)

    async def aclose(self) -> None:
        """Close the client."""
        await self.aclient.close()

    @asynccontextmanager
    async def _backend_call(self, operation: str, collection_name: str) -> AsyncIterator[None]:
        try:
            yield
        except _BACKEND_ERRORS as exc:
            logger.error("Qdrant %s on '%s' failed: %s", operation, collection_name, exc)
            raise StoreUnavailable(
                f"Qdrant {operation} on '{collection_name}' failed: {exc}"
            ) from exc

    async def ping(self) -> bool:
        """True if the backend answers a collection listing."""
        try:
            await self.aclient.get_collections()
        except _BACKEND_ERRORS as exc:
            logger.warning("Qdrant health check failed: %s", exc)
            return False
        return True

    async def collection_exists(self, collection_name: str) -> bool:
        """Return True if the collection already exists."""
        async with self._backend_call("collection_exists", collection_name):
            return await self.aclient.collection_exists(collection_name)

    async def get_collection_info(self, collection_name: str) -> CollectionDescriptor | None:
        """Fetch vector size, distance and point count, or ``None`` if missing."""
        if not await self.collection_exists(collection_name):
            return None
        async with self._backend_call("get_collection", collection_name):
            info = await self.aclient.get_collection(collection_name)
        return collection_info_to_descriptor(collection_name, info)

    async def create_collection(
        self,
        collection_name: str,
        *,
        vector_size: int,
        distance: q.Distance = q.Distance.COSINE,
    ) -> None:
        """Create a collection with a single unnamed dense vector."""
        async with self._backend_call("create_collection", collection_name):
            await self.aclient.create_collection(
                collection_name=collection_name,
                vectors_config=q.VectorParams(size=vector_size, distance=distance),
            )
        logger.info(
            "Created collection '%s' (size=%d, distance=%s)",
            collection_name,
            vector_size,
            distance,
        )

    async def create_payload_index(
        self,
        collection_name: str,
        field_name: str,
        field_schema: q.PayloadSchemaType,
    ) -> None:
        """Index a payload field so filters on it are served server-side."""
        async with self._backend_call("create_payload_index", collection_name):
            await self.aclient.create_payload_index(
                collection_name=collection_name,
                field_name=field_name,
                field_schema=field_schema,
            )

    async def delete_collection(self, collection_name: str) -> None:
        """Drop a collection and every point in it."""
        async with self._backend_call("delete_collection", collection_name):
            await self.aclient.delete_collection(collection_name)
        logger.warning("Deleted collection '%s'", collection_name)

    async def upsert_points(
        self,
        collection_name: str,
        points: Sequence[q.PointStruct],
        *,
        wait: bool = True,
    ) -> None:
        """Upsert raw points into the collection in one request."""
        if not points:
            return

        async with self._backend_call("upsert", collection_name):
            await self.aclient.upsert(
                collection_name=collection_name,
                points=list(points),
                wait=wait,
            )
        logger.debug("Upserted %d points into '%s'", len(points), collection_name)

    async def search(
        self,
        collection_name: str,
        vector: Sequence[float],
        *,
        limit: int,
        filter_: q.Filter | None = None,
        with_payload: bool = True,
    ) -> list[q.ScoredPoint]:
        """Nearest-neighbour search ordered by descending score."""
        async with self._backend_call("query_points", collection_name):
            response = await self.aclient.query_points(
                collection_name=collection_name,
                query=list(vector),
                limit=limit,
                query_filter=filter_,
                with_payload=with_payload,
            )
        return list(response.points)

    async def retrieve_by_ids(
        self,
        collection_name: str,
        point_ids: Sequence[PointId],
        *,
        with_payload: bool = True,
        with_vectors: bool = False,
    ) -> list[q.Record]:
        """Fetch records by their IDs."""
        if not point_ids:
            return []

        async with self._backend_call("retrieve", collection_name):
            return await self.aclient.retrieve(
                collection_name=collection_name,
                ids=list(point_ids),
                with_payload=with_payload,
                with_vectors=with_vectors,
            )

    async def scroll(
        self,
        collection_name: str,
        *,
        limit: int,
        offset: PointId | None = None,
        filter_: q.Filter | None = None,
        with_payload: bool = True,
        with_vectors: bool = False,
    ) -> tuple[list[q.Record], PointId | None]:
        """One page of cursor-based pagination; a ``None`` offset means the end."""
        async with self._backend_call("scroll", collection_name):
            return await self.aclient.scroll(
                collection_name=collection_name,
                scroll_filter=filter_,
                limit=limit,
                offset=offset,
                with_payload=with_payload,
                with_vectors=with_vectors,
            )

    async def scroll_all(
        self,
        collection_name: str,
        *,
        cap: int,
        page_size: int,
        filter_: q.Filter | None = None,
    ) -> list[q.Record]:
        """Page through the collection until exhausted or ``cap`` records are read.

        Records past the cap are silently omitted from the result (logged only).
        """
        records: list[q.Record] = []
        offset: PointId | None = None

        while len(records) < cap:
            page, offset = await self.scroll(
                collection_name,
                limit=min(page_size, cap - len(records)),
                offset=offset,
                filter_=filter_,
            )
            if not page:
                break
            records.extend(page)
            if offset is None:
                break
        else:
            if offset is not None:
                logger.warning(
                    "Scan of '%s' stopped at the safety cap of %d records",
                    collection_name,
                    cap,
                )

        return records

    async def delete(
        self,
        collection_name: str,
        *,
        ids: Sequence[PointId] | None = None,
        filter_: q.Filter | None = None,
        wait: bool = True,
    ) -> None:
        """Delete points by IDs or filter."""
        points_selector: Any
        if ids is not None:
            points_selector = q.PointIdsList(points=list(ids))
        elif filter_ is not None:
            points_selector = q.FilterSelector(filter=filter_)
        else:
            raise ValueError("Either ids or filter_ must be provided to delete points")

        async with self._backend_call("delete", collection_name):
            await self.aclient.delete(
                collection_name=collection_name,
                points_selector=points_selector,
                wait=wait,
            )


__all__ = ["QdrantService"]
