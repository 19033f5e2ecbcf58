"""Tests for the Qdrant service wrapper against in-memory Qdrant."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest
from qdrant_client import models as q
from qdrant_client.http.exceptions import UnexpectedResponse

from second_brain.core.exceptions import StoreUnavailable
from second_brain.services.qdrant_service import QdrantService

pytestmark = pytest.mark.asyncio

COLLECTION = "test-points"


def _v(x: float = 1.0, n: int = 4) -> list[float]:
    return [x] + [0.0] * (n - 1)


def _points(count: int, document_id: str = "doc1") -> list[q.PointStruct]:
    return [
        q.PointStruct(
            id=index + 1,
            vector=_v(),
            payload={"document_id": document_id, "chunk_index": index},
        )
        for index in range(count)
    ]


async def test_create_and_describe_collection(qdrant_service: QdrantService) -> None:
    assert not await qdrant_service.collection_exists(COLLECTION)
    assert await qdrant_service.get_collection_info(COLLECTION) is None

    await qdrant_service.create_collection(COLLECTION, vector_size=4)

    assert await qdrant_service.collection_exists(COLLECTION)
    info = await qdrant_service.get_collection_info(COLLECTION)
    assert info is not None
    assert info.vector_size == 4
    assert info.distance == "Cosine"


async def test_ping(qdrant_service: QdrantService) -> None:
    assert await qdrant_service.ping()


async def test_upsert_search_and_retrieve(qdrant_service: QdrantService) -> None:
    await qdrant_service.create_collection(COLLECTION, vector_size=4)
    await qdrant_service.upsert_points(COLLECTION, _points(3))

    hits = await qdrant_service.search(COLLECTION, _v(), limit=2)
    assert len(hits) == 2
    assert hits[0].score >= hits[1].score

    records = await qdrant_service.retrieve_by_ids(COLLECTION, [1, 3])
    assert sorted(record.id for record in records) == [1, 3]
    assert await qdrant_service.retrieve_by_ids(COLLECTION, []) == []


async def test_search_with_filter(qdrant_service: QdrantService) -> None:
    await qdrant_service.create_collection(COLLECTION, vector_size=4)
    await qdrant_service.upsert_points(COLLECTION, _points(2, "doc1"))
    await qdrant_service.upsert_points(
        COLLECTION,
        [q.PointStruct(id=100, vector=_v(), payload={"document_id": "doc2"})],
    )

    hits = await qdrant_service.search(
        COLLECTION,
        _v(),
        limit=10,
        filter_=q.Filter(
            must=[q.FieldCondition(key="document_id", match=q.MatchValue(value="doc2"))]
        ),
    )
    assert [hit.id for hit in hits] == [100]


async def test_scroll_all_pages_until_exhausted(qdrant_service: QdrantService) -> None:
    await qdrant_service.create_collection(COLLECTION, vector_size=4)
    await qdrant_service.upsert_points(COLLECTION, _points(25))

    records = await qdrant_service.scroll_all(COLLECTION, cap=1000, page_size=10)
    assert len(records) == 25
    assert len({record.id for record in records}) == 25


async def test_scroll_all_stops_at_cap(
    qdrant_service: QdrantService,
    caplog: pytest.LogCaptureFixture,
) -> None:
    await qdrant_service.create_collection(COLLECTION, vector_size=4)
    await qdrant_service.upsert_points(COLLECTION, _points(25))

    records = await qdrant_service.scroll_all(COLLECTION, cap=12, page_size=5)
    assert len(records) == 12
    assert "safety cap" in caplog.text


async def test_delete_by_ids_and_filter(qdrant_service: QdrantService) -> None:
    await qdrant_service.create_collection(COLLECTION, vector_size=4)
    await qdrant_service.upsert_points(COLLECTION, _points(3, "doc1"))
    await qdrant_service.upsert_points(
        COLLECTION,
        [q.PointStruct(id=100, vector=_v(), payload={"document_id": "doc2"})],
    )

    await qdrant_service.delete(COLLECTION, ids=[1])
    await qdrant_service.delete(
        COLLECTION,
        filter_=q.Filter(
            must=[q.FieldCondition(key="document_id", match=q.MatchValue(value="doc2"))]
        ),
    )

    remaining = await qdrant_service.scroll_all(COLLECTION, cap=100, page_size=100)
    assert sorted(record.id for record in remaining) == [2, 3]


async def test_delete_requires_a_selector(qdrant_service: QdrantService) -> None:
    with pytest.raises(ValueError, match="Either ids or filter_"):
        await qdrant_service.delete(COLLECTION)


async def test_backend_errors_become_store_unavailable(qdrant_service: QdrantService) -> None:
    qdrant_service.aclient.scroll = AsyncMock(  # type: ignore[method-assign]
        side_effect=UnexpectedResponse(
            status_code=500,
            reason_phrase="Internal Server Error",
            content=b"boom",
            headers=httpx.Headers(),
        )
    )
    with pytest.raises(StoreUnavailable, match="scroll"):
        await qdrant_service.scroll(COLLECTION, limit=10)


async def test_missing_collection_is_store_unavailable(qdrant_service: QdrantService) -> None:
    with pytest.raises(StoreUnavailable):
        await qdrant_service.scroll("does-not-exist", limit=10)
