"""Full-document store emulated on a placeholder-vector Qdrant collection.

The collection is used as a key-value table: one point per document, keyed by
a hash of the string document id, never searched by similarity. Lookups go
through the ``documentId`` payload field, which is the source of truth.
"""

from __future__ import annotations

from qdrant_client import models as q

from second_brain.adapters import qdrant_mapper
from second_brain.config import Settings
from second_brain.core.constants import FULL_DOCUMENT_VECTOR_SIZE, K_FULL_DOCUMENT_ID
from second_brain.core.exceptions import DocumentIdCollisionError
from second_brain.core.filters import DocumentIdEquals
from second_brain.core.logging import get_logger
from second_brain.core.models import FullDocumentRecord
from second_brain.core.timestamps import timestamp_sort_key, utc_now_iso
from second_brain.repositories.delete_strategies import ScanDeleteStrategy
from second_brain.services.collection_manager import (
    FULL_DOCUMENT_PAYLOAD_INDEXES,
    CollectionManager,
)
from second_brain.services.point_ids import document_point_id
from second_brain.services.qdrant_service import QdrantService

logger = get_logger(__name__)


class FullDocumentRepository:
    """Whole-document put/get/list/delete independent of chunk search."""

    def __init__(
        self,
        settings: Settings,
        qdrant_service: QdrantService,
        collection_manager: CollectionManager | None = None,
    ):
        self.settings = settings
        self.collection_name = settings.qdrant_full_documents_collection_name
        self._qdrant = qdrant_service
        self._collections = collection_manager or CollectionManager(qdrant_service)
        self._scan_delete = ScanDeleteStrategy(
            qdrant_service,
            cap=settings.full_document_scan_cap,
            page_size=settings.scroll_page_size,
            batch_size=settings.delete_batch_size,
        )

    async def put(
        self,
        document_id: str,
        filename: str,
        full_content: str,
        file_type: str,
        file_size: int,
        chunk_count: int,
        upload_date: str | None = None,
        embedding_model: str | None = None,
    ) -> FullDocumentRecord:
        """Create or overwrite the record for ``document_id``.

        Raises:
            DocumentIdCollisionError: A different document already owns the hashed id.
            StoreUnavailable: Any backend failure.
        """
        await self._collections.ensure_collection(
            self.collection_name,
            FULL_DOCUMENT_VECTOR_SIZE,
            payload_indexes=FULL_DOCUMENT_PAYLOAD_INDEXES,
        )
        await self._check_collision(document_id, document_point_id(document_id))

        record = FullDocumentRecord(
            document_id=document_id,
            filename=filename,
            file_type=file_type,
            file_size=file_size,
            upload_date=upload_date or utc_now_iso(),
            chunk_count=chunk_count,
            embedding_model=embedding_model or self.settings.embedding_model,
            full_content=full_content,
        )
        await self._qdrant.upsert_points(
            self.collection_name,
            [qdrant_mapper.full_document_to_point(record)],
        )
        logger.info(
            "Stored full document: %s (%d bytes, %d chunks)",
            filename,
            file_size,
            chunk_count,
        )
        return record

    async def get(self, document_id: str) -> FullDocumentRecord | None:
        """Look a document up by its ``documentId`` payload, not its hashed id."""
        if not await self._qdrant.collection_exists(self.collection_name):
            return None

        records, _ = await self._qdrant.scroll(
            self.collection_name,
            limit=1,
            filter_=q.Filter(
                must=[
                    q.FieldCondition(
                        key=K_FULL_DOCUMENT_ID,
                        match=q.MatchValue(value=document_id),
                    )
                ]
            ),
        )
        if not records:
            return None
        return qdrant_mapper.payload_to_full_document(records[0].payload)

    async def list_all(self) -> list[FullDocumentRecord]:
        """All document summaries (no content), newest upload first."""
        if not await self._qdrant.collection_exists(self.collection_name):
            logger.info("Collection '%s' doesn't exist yet", self.collection_name)
            return []

        records = await self._qdrant.scroll_all(
            self.collection_name,
            cap=self.settings.full_document_scan_cap,
            page_size=self.settings.scroll_page_size,
        )
        documents = [
            qdrant_mapper.payload_to_full_document(record.payload, include_content=False)
            for record in records
        ]
        documents.sort(key=lambda doc: timestamp_sort_key(doc.upload_date), reverse=True)
        return documents

    async def delete(self, document_id: str) -> int:
        """Delete the record(s) whose ``documentId`` matches; returns how many."""
        if not await self._qdrant.collection_exists(self.collection_name):
            return 0

        deleted = await self._scan_delete.delete_matching(
            self.collection_name,
            DocumentIdEquals(document_id, key=K_FULL_DOCUMENT_ID),
        )
        logger.info("Deleted %s full document points for '%s'", deleted, document_id)
        return deleted or 0

    async def _check_collision(self, document_id: str, point_id: int) -> None:
        existing = await self._qdrant.retrieve_by_ids(self.collection_name, [point_id])
        if not existing:
            return

        stored_id = (existing[0].payload or {}).get(K_FULL_DOCUMENT_ID)
        if stored_id and stored_id != document_id:
            logger.error(
                "Point id %d of '%s' already belongs to '%s'",
                point_id,
                document_id,
                stored_id,
            )
            raise DocumentIdCollisionError(document_id, stored_id, point_id)
