"""Helpers to translate between domain models and Qdrant transport objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from qdrant_client import models as q

from second_brain.core.constants import (
    FILE_TYPE_TEXT,
    FULL_DOCUMENT_PLACEHOLDER_VECTOR,
    K_CHUNK_COUNT,
    K_CHUNK_INDEX,
    K_CONTENT,
    K_DOCUMENT_ID,
    K_EMBEDDING_MODEL,
    K_FILE_SIZE,
    K_FILE_TYPE,
    K_FILENAME,
    K_FULL_CONTENT,
    K_FULL_DOCUMENT_ID,
    K_FULL_EMBEDDING_MODEL,
    K_IS_FULL_DOCUMENT,
    K_UPLOAD_DATE,
)
from second_brain.core.models import ChunkHit, ChunkPoint, CollectionDescriptor, FullDocumentRecord
from second_brain.services.point_ids import document_point_id


def chunk_to_point(chunk: ChunkPoint) -> q.PointStruct:
    """Convert an embedded chunk into a Qdrant point."""
    if chunk.embedding is None:
        raise ValueError(f"Chunk {chunk.chunk_index} of {chunk.document_id!r} has no embedding")

    payload = {
        K_DOCUMENT_ID: chunk.document_id,
        K_FILENAME: chunk.filename,
        K_CHUNK_INDEX: chunk.chunk_index,
        K_CONTENT: chunk.content,
        K_UPLOAD_DATE: chunk.upload_date,
        K_EMBEDDING_MODEL: chunk.embedding_model,
        K_FILE_TYPE: chunk.file_type,
    }
    return q.PointStruct(id=chunk.id, vector=list(chunk.embedding), payload=payload)


def record_to_chunk(record: q.Record) -> ChunkPoint:
    """Convert a scrolled Qdrant record into a chunk (without its vector)."""
    payload = record.payload or {}
    return ChunkPoint(
        id=_coerce_int_id(record.id),
        document_id=cast(str | None, payload.get(K_DOCUMENT_ID)) or "",
        filename=cast(str | None, payload.get(K_FILENAME)) or "",
        chunk_index=cast(int | None, payload.get(K_CHUNK_INDEX)) or 0,
        content=cast(str | None, payload.get(K_CONTENT)) or "",
        upload_date=cast(str | None, payload.get(K_UPLOAD_DATE)) or "",
        embedding_model=cast(str | None, payload.get(K_EMBEDDING_MODEL)) or "",
        file_type=cast(str | None, payload.get(K_FILE_TYPE)) or FILE_TYPE_TEXT,
    )


def scored_point_to_hit(point: q.ScoredPoint) -> ChunkHit:
    """Shape a search hit as content plus source metadata."""
    payload = point.payload or {}
    return ChunkHit(
        content=cast(str | None, payload.get(K_CONTENT)) or "",
        score=point.score,
        filename=cast(str | None, payload.get(K_FILENAME)) or "",
        file_type=cast(str | None, payload.get(K_FILE_TYPE)) or FILE_TYPE_TEXT,
    )


def full_document_to_point(document: FullDocumentRecord) -> q.PointStruct:
    """Convert a full-document record into its key-value style point."""
    payload = {
        K_FULL_DOCUMENT_ID: document.document_id,
        K_FILENAME: document.filename,
        K_FILE_TYPE: document.file_type,
        K_FILE_SIZE: document.file_size,
        K_UPLOAD_DATE: document.upload_date,
        K_CHUNK_COUNT: document.chunk_count,
        K_FULL_CONTENT: document.full_content or "",
        K_FULL_EMBEDDING_MODEL: document.embedding_model,
        K_IS_FULL_DOCUMENT: True,
    }
    return q.PointStruct(
        id=document_point_id(document.document_id),
        vector=list(FULL_DOCUMENT_PLACEHOLDER_VECTOR),
        payload=payload,
    )


def payload_to_full_document(
    payload: Mapping[str, Any] | None,
    *,
    include_content: bool = True,
) -> FullDocumentRecord:
    """Convert a full-document payload into a record, optionally dropping the text."""
    payload = payload or {}
    return FullDocumentRecord(
        document_id=cast(str | None, payload.get(K_FULL_DOCUMENT_ID)) or "",
        filename=cast(str | None, payload.get(K_FILENAME)) or "",
        file_type=cast(str | None, payload.get(K_FILE_TYPE)) or FILE_TYPE_TEXT,
        file_size=_coerce_int(payload.get(K_FILE_SIZE)),
        upload_date=cast(str | None, payload.get(K_UPLOAD_DATE)) or "",
        chunk_count=_coerce_int(payload.get(K_CHUNK_COUNT)),
        embedding_model=cast(str | None, payload.get(K_FULL_EMBEDDING_MODEL)) or "",
        full_content=cast(str | None, payload.get(K_FULL_CONTENT)) if include_content else None,
        is_full_document=bool(payload.get(K_IS_FULL_DOCUMENT, True)),
    )


def collection_info_to_descriptor(name: str, info: q.CollectionInfo) -> CollectionDescriptor:
    """Extract the single unnamed vector config of a collection.

    Collections configured with named vectors report ``vector_size=None``, which
    callers treat as a dimensionality mismatch.
    """
    vectors = info.config.params.vectors
    vector_size: int | None = None
    distance: str | None = None
    if isinstance(vectors, q.VectorParams):
        vector_size = vectors.size
        distance = _distance_name(vectors.distance)

    return CollectionDescriptor(
        name=name,
        vector_size=vector_size,
        distance=distance,
        points_count=info.points_count,
    )


def _distance_name(distance: q.Distance | str) -> str:
    return distance.value if isinstance(distance, q.Distance) else str(distance)


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _coerce_int_id(value: Any) -> int:
    if isinstance(value, int):
        return value
    raise ValueError(f"Expected a numeric point id, got {value!r}")
