"""Ingestion request and result schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from second_brain.core.models import ChunkUpsertResult

FileType = Literal["text", "pdf", "audio", "image"]
IngestionStatus = Literal["stored", "failed", "rolled_back", "reconciliation_needed"]


class IngestRequest(BaseModel):
    """Already-extracted text of one uploaded source."""

    content: str = Field(..., description="Extracted text, transcription or image description")
    filename: str = Field(..., description="Original filename or URL", min_length=1)
    type: FileType = Field(..., description="Source type")


class EmbeddingStatus(BaseModel):
    """Chunk store write outcome."""

    success: bool
    message: str
    count: int = 0
    model: str | None = None
    dimensions: int | None = None

    @classmethod
    def from_result(cls, result: ChunkUpsertResult) -> "EmbeddingStatus":
        return cls(
            success=result.success,
            message=result.message,
            count=result.count,
            model=result.model,
            dimensions=result.dimensions,
        )


class DocumentStoreStatus(BaseModel):
    """Full-document store write outcome."""

    success: bool
    error: str | None = None


class IngestionResult(BaseModel):
    """Outcome of ingesting one document into both collections.

    ``status`` is ``reconciliation_needed`` when the chunk write failed and the
    full-document record could not be removed again.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status: IngestionStatus
    filename: str
    document_id: str = Field(..., alias="documentId")
    chunks_count: int = Field(0, alias="chunksCount")
    file_size: int = Field(0, alias="fileSize")
    upload_date: str | None = Field(None, alias="uploadDate")
    preview_chunks: list[str] = Field(default_factory=list, alias="previewChunks")
    embedding_status: EmbeddingStatus | None = Field(None, alias="embeddingStatus")
    document_store_status: DocumentStoreStatus | None = Field(None, alias="documentStoreStatus")
    message: str | None = None
