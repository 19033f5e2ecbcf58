"""Ingestion and deletion across the full-document and chunk collections."""

from __future__ import annotations

import re
import secrets
import time

from second_brain.config import Settings
from second_brain.core.constants import FILE_TYPE_PDF
from second_brain.core.exceptions import AppException, ValidationException
from second_brain.core.logging import get_logger
from second_brain.core.models import ChunkUpsertResult
from second_brain.core.timestamps import utc_now_iso
from second_brain.repositories.chunk_repository import ChunkRepository
from second_brain.repositories.full_document_repository import FullDocumentRepository
from second_brain.schemas.documents import DeleteResult
from second_brain.schemas.ingest import (
    DocumentStoreStatus,
    EmbeddingStatus,
    IngestionResult,
)
from second_brain.text_processing.binary_detection import looks_binary
from second_brain.text_processing.chunker import TextChunker

logger = get_logger(__name__)

_NON_WORD = re.compile(r"\W+", re.ASCII)
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
PREVIEW_CHUNKS = 3


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_document_id(filename: str) -> str:
    """``<sanitized filename>_<base36 ms timestamp>_<6 random base36 chars>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{_NON_WORD.sub('_', filename)}_{_to_base36(time.time_ns() // 1_000_000)}_{suffix}"


class IngestionService:
    """Writes a document to both collections and removes it from both.

    The full-document record is written first and acts as the record of
    existence. If the chunk write then fails, the record is deleted again; if
    that compensation also fails, the result asks for reconciliation.
    """

    def __init__(
        self,
        settings: Settings,
        chunk_repository: ChunkRepository,
        full_document_repository: FullDocumentRepository,
        chunker: TextChunker | None = None,
    ):
        self.settings = settings
        self._chunks = chunk_repository
        self._full_documents = full_document_repository
        self._chunker = chunker or TextChunker(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        )

    def prepare_chunks(self, content: str, filename: str, file_type: str) -> list[str]:
        """Validate the extracted text and split it.

        Raises:
            ValidationException: Missing fields, binary data or nothing to chunk.
        """
        if not content or not filename or not file_type:
            raise ValidationException("Missing required fields: content, filename, type")

        if looks_binary(content):
            raise ValidationException(
                "Content appears to be binary data. Please ensure DOCX, PDF, or other "
                "binary files are properly extracted before upload."
            )

        if file_type == FILE_TYPE_PDF and not content.strip():
            raise ValidationException("No text content provided for PDF")

        chunks = self._chunker.split(content)
        if not chunks:
            raise ValidationException("No text content found to chunk")
        return chunks

    async def ingest(self, content: str, filename: str, file_type: str) -> IngestionResult:
        """Chunk, embed and store one document; never raises for storage failures.

        Raises:
            ValidationException: The content cannot be ingested at all.
            ConfigurationError: No embedding credential configured.
        """
        chunks = self.prepare_chunks(content, filename, file_type)
        self._chunks.require_embedding_provider()

        document_id = generate_document_id(filename)
        file_size = len(content.encode("utf-8"))
        upload_date = utc_now_iso()

        logger.info(
            "Ingesting '%s' as %s (%d bytes, %d chunks)",
            filename,
            document_id,
            file_size,
            len(chunks),
        )

        result = IngestionResult(
            success=False,
            status="failed",
            filename=filename,
            document_id=document_id,
            chunks_count=len(chunks),
            file_size=file_size,
            upload_date=upload_date,
            preview_chunks=chunks[:PREVIEW_CHUNKS],
        )

        try:
            await self._full_documents.put(
                document_id=document_id,
                filename=filename,
                full_content=content,
                file_type=file_type,
                file_size=file_size,
                chunk_count=len(chunks),
                upload_date=upload_date,
                embedding_model=self.settings.embedding_model,
            )
        except AppException as exc:
            logger.error("Error storing full document %s: %s", document_id, exc.message)
            result.document_store_status = DocumentStoreStatus(success=False, error=exc.message)
            result.message = f"Full document could not be stored: {exc.message}"
            return result

        result.document_store_status = DocumentStoreStatus(success=True)

        try:
            chunk_result = await self._chunks.upsert_chunks(
                chunks,
                document_id=document_id,
                filename=filename,
                upload_date=upload_date,
                file_type=file_type,
            )
        except AppException as exc:
            logger.error("Error embedding chunks of %s: %s", document_id, exc.message)
            chunk_result = ChunkUpsertResult(success=False, message=exc.message)

        result.embedding_status = EmbeddingStatus.from_result(chunk_result)
        if chunk_result.success:
            result.success = True
            result.status = "stored"
            result.message = chunk_result.message
            return result

        await self._compensate(result, chunk_result.message)
        return result

    async def _compensate(self, result: IngestionResult, reason: str) -> None:
        try:
            await self._full_documents.delete(result.document_id)
        except AppException as exc:
            logger.error(
                "Document %s needs reconciliation: chunks failed (%s) and the full "
                "document could not be removed (%s)",
                result.document_id,
                reason,
                exc.message,
            )
            result.status = "reconciliation_needed"
            result.message = (
                f"Chunks could not be stored ({reason}) and the full document record "
                f"could not be removed ({exc.message})"
            )
            return

        logger.warning("Rolled back full document %s after chunk failure", result.document_id)
        result.status = "rolled_back"
        result.document_store_status = DocumentStoreStatus(
            success=False,
            error="Removed after chunk storage failed",
        )
        result.message = f"Chunks could not be stored: {reason}"

    async def delete(self, document_id: str) -> DeleteResult:
        """Delete the full-document record and every chunk of a document.

        A failure on the full-document side is logged and tolerated; a failure
        deleting chunks fails the operation.
        """
        full_documents_deleted = 0
        try:
            full_documents_deleted = await self._full_documents.delete(document_id)
        except AppException as exc:
            logger.warning(
                "Could not delete %s from full documents: %s",
                document_id,
                exc.message,
            )

        try:
            chunks_deleted = await self._chunks.delete_by_document_id(document_id)
        except AppException as exc:
            logger.error("Error deleting chunks of %s: %s", document_id, exc.message)
            return DeleteResult(
                success=False,
                error=exc.message,
                full_documents_deleted=full_documents_deleted,
            )

        logger.info("Deleted document and chunks: %s", document_id)
        return DeleteResult(
            success=True,
            message=f"Document {document_id} deleted successfully",
            chunks_deleted=chunks_deleted,
            full_documents_deleted=full_documents_deleted,
        )
