"""Tests for Qdrant mapper helpers."""

import pytest
from qdrant_client import models as q

from second_brain.adapters import qdrant_mapper
from second_brain.core.models import ChunkPoint, FullDocumentRecord
from second_brain.services.point_ids import document_point_id


def _chunk(**overrides) -> ChunkPoint:
    values = dict(
        id=42,
        document_id="doc1",
        filename="notes.txt",
        chunk_index=3,
        content="hello",
        upload_date="2025-01-01T00:00:00.000Z",
        embedding_model="text-embedding-004",
        file_type="text",
        embedding=[0.1, 0.2],
    )
    values.update(overrides)
    return ChunkPoint(**values)


def test_chunk_to_point_payload_keys() -> None:
    point = qdrant_mapper.chunk_to_point(_chunk())
    assert point.id == 42
    assert point.vector == [0.1, 0.2]
    assert point.payload == {
        "document_id": "doc1",
        "filename": "notes.txt",
        "chunk_index": 3,
        "content": "hello",
        "uploadDate": "2025-01-01T00:00:00.000Z",
        "embedding_model": "text-embedding-004",
        "fileType": "text",
    }


def test_chunk_to_point_requires_embedding() -> None:
    with pytest.raises(ValueError):
        qdrant_mapper.chunk_to_point(_chunk(embedding=None))


def test_record_to_chunk_defaults_missing_fields() -> None:
    chunk = qdrant_mapper.record_to_chunk(q.Record(id=7, payload={"content": "x"}))
    assert chunk.id == 7
    assert chunk.document_id == ""
    assert chunk.chunk_index == 0
    assert chunk.file_type == "text"


def test_scored_point_to_hit() -> None:
    hit = qdrant_mapper.scored_point_to_hit(
        q.ScoredPoint(
            id=1,
            version=0,
            score=0.87,
            payload={"content": "text", "filename": "a.mp3", "fileType": "audio"},
        )
    )
    assert (hit.content, hit.score, hit.filename, hit.file_type) == ("text", 0.87, "a.mp3", "audio")


def test_full_document_round_trip_through_payload() -> None:
    record = FullDocumentRecord(
        document_id="doc1",
        filename="notes.txt",
        file_type="text",
        file_size=11,
        upload_date="2025-01-01T00:00:00.000Z",
        chunk_count=1,
        embedding_model="text-embedding-004",
        full_content="hello world",
    )
    point = qdrant_mapper.full_document_to_point(record)
    assert point.id == document_point_id("doc1")
    assert point.vector == [1.0]
    assert point.payload["isFullDocument"] is True  # type: ignore[index]
    assert point.payload["documentId"] == "doc1"  # type: ignore[index]

    assert qdrant_mapper.payload_to_full_document(point.payload) == record
    summary = qdrant_mapper.payload_to_full_document(point.payload, include_content=False)
    assert summary.full_content is None
