"""Document-level views over point-level storage.

Two listings exist side by side: one reads the dedicated full-document records,
the other derives document metadata by grouping chunk payloads (the older path,
kept for compatibility). Callers are responsible for keeping both consistent.
"""

from __future__ import annotations

from collections.abc import Iterable

from second_brain.core.constants import K_UPLOAD_DATE
from second_brain.core.exceptions import AppException
from second_brain.core.filters import DateInput, DateRange, matches
from second_brain.core.logging import get_logger
from second_brain.core.models import ChunkPoint, DocumentSummary, FullDocumentRecord
from second_brain.core.timestamps import timestamp_sort_key
from second_brain.repositories.chunk_repository import ChunkRepository
from second_brain.repositories.full_document_repository import FullDocumentRepository
from second_brain.schemas.documents import (
    CleanupResult,
    CollectionInfoResponse,
    DocumentListResponse,
    FullDocumentSummary,
    GroupedDocument,
    GroupedDocumentListResponse,
)
from second_brain.services.qdrant_service import QdrantService
from second_brain.text_processing.binary_detection import has_control_chars

logger = get_logger(__name__)


def group_chunks_by_document(chunks: Iterable[ChunkPoint]) -> list[DocumentSummary]:
    """Summarize chunks per ``document_id``, newest document first.

    Each summary keeps the first filename and model seen, counts the chunks and
    takes the earliest ``uploadDate`` in the group.
    """
    documents: dict[str, DocumentSummary] = {}
    for chunk in chunks:
        if not chunk.document_id:
            continue

        summary = documents.get(chunk.document_id)
        if summary is None:
            documents[chunk.document_id] = DocumentSummary(
                document_id=chunk.document_id,
                filename=chunk.filename or None,
                upload_date=chunk.upload_date or None,
                embedding_model=chunk.embedding_model or None,
                chunks_count=1,
            )
            continue

        summary.chunks_count += 1
        if chunk.upload_date and (
            summary.upload_date is None
            or timestamp_sort_key(chunk.upload_date) < timestamp_sort_key(summary.upload_date)
        ):
            summary.upload_date = chunk.upload_date

    return sorted(
        documents.values(),
        key=lambda doc: timestamp_sort_key(doc.upload_date),
        reverse=True,
    )


def filter_by_date_range(
    documents: Iterable[DocumentSummary],
    date_from: DateInput | None = None,
    date_to: DateInput | None = None,
) -> list[DocumentSummary]:
    """Keep documents whose upload date lies in the inclusive range."""
    if not date_from and not date_to:
        return list(documents)

    date_range = DateRange.between(date_from, date_to)
    return [
        doc for doc in documents if matches(date_range, {K_UPLOAD_DATE: doc.upload_date})
    ]


class DocumentService:
    """Listing, lookup, reporting and cleanup across both collections."""

    def __init__(
        self,
        qdrant_service: QdrantService,
        chunk_repository: ChunkRepository,
        full_document_repository: FullDocumentRepository,
    ):
        self._qdrant = qdrant_service
        self._chunks = chunk_repository
        self._full_documents = full_document_repository

    async def list_documents_grouped_from_chunks(self) -> list[DocumentSummary]:
        """Derive document summaries from every chunk (up to the scan cap)."""
        chunks = await self._chunks.scan()
        return group_chunks_by_document(chunks)

    async def list_grouped(
        self,
        date_from: DateInput | None = None,
        date_to: DateInput | None = None,
    ) -> GroupedDocumentListResponse:
        """Chunk-derived listing, optionally restricted to an upload date range."""
        try:
            documents = filter_by_date_range(
                await self.list_documents_grouped_from_chunks(),
                date_from,
                date_to,
            )
        except (AppException, ValueError) as exc:
            logger.error("Error getting documents: %s", exc)
            return GroupedDocumentListResponse(success=False, error=str(exc))

        return GroupedDocumentListResponse(
            success=True,
            documents=[GroupedDocument.from_summary(doc) for doc in documents],
            total=len(documents),
        )

    async def list_full_documents(self) -> DocumentListResponse:
        """Full-document summaries, newest first."""
        try:
            documents = await self._full_documents.list_all()
        except AppException as exc:
            logger.error("Error listing full documents: %s", exc.message)
            return DocumentListResponse(success=False, error=exc.message)

        return DocumentListResponse(
            success=True,
            documents=[FullDocumentSummary.from_record(doc) for doc in documents],
            total=len(documents),
        )

    async def get_full_document(self, document_id: str) -> FullDocumentRecord | None:
        return await self._full_documents.get(document_id)

    async def get_document_chunks(self, document_id: str) -> list[ChunkPoint]:
        return await self._chunks.get_document_chunks(document_id)

    async def get_collection_info(self) -> CollectionInfoResponse:
        """Vector size, distance and point count of the chunk collection."""
        name = self._chunks.collection_name
        try:
            descriptor = await self._qdrant.get_collection_info(name)
        except AppException as exc:
            return CollectionInfoResponse(success=False, collection=name, error=exc.message)

        if descriptor is None:
            return CollectionInfoResponse(
                success=False,
                collection=name,
                error=f"Collection '{name}' doesn't exist yet",
            )
        return CollectionInfoResponse.from_descriptor(descriptor)

    async def cleanup_corrupted_documents(self) -> CleanupResult:
        """Remove documents whose chunks contain binary control characters."""
        try:
            chunks = await self._chunks.scan()
            corrupted = sorted(
                {
                    chunk.document_id
                    for chunk in chunks
                    if chunk.document_id and chunk.content and has_control_chars(chunk.content)
                }
            )
            if not corrupted:
                logger.info("No corrupted documents found")
                return CleanupResult(success=True)

            logger.warning("Found %d corrupted documents: %s", len(corrupted), corrupted)
            chunks_deleted = sum(1 for chunk in chunks if chunk.document_id in corrupted)
            full_documents_deleted = 0
            for document_id in corrupted:
                await self._chunks.delete_by_document_id(document_id)
                full_documents_deleted += await self._full_documents.delete(document_id)
        except (AppException, ValueError) as exc:
            logger.error("Error cleaning up corrupted documents: %s", exc)
            return CleanupResult(success=False, error=str(exc))

        return CleanupResult(
            success=True,
            document_ids=corrupted,
            chunks_deleted=chunks_deleted,
            full_documents_deleted=full_documents_deleted,
        )
