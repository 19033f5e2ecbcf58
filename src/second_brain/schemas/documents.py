"""Document listing, retrieval and deletion schemas.

Field aliases keep the payload names other consumers already read.
"""

from pydantic import BaseModel, ConfigDict, Field

from second_brain.core.models import CollectionDescriptor, DocumentSummary, FullDocumentRecord


class FullDocumentSummary(BaseModel):
    """Full-document record without its text."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId", description="Document ID")
    filename: str = Field(..., description="Original filename")
    file_type: str = Field(..., alias="fileType", description="text, pdf, audio or image")
    file_size: int = Field(..., alias="fileSize", description="Size of the text in bytes")
    upload_date: str = Field(..., alias="uploadDate", description="ISO-8601 UTC upload time")
    chunk_count: int = Field(..., alias="chunkCount", description="Number of stored chunks")
    embedding_model: str = Field(..., alias="embeddingModel", description="Embedding model used")

    @classmethod
    def from_record(cls, record: FullDocumentRecord) -> "FullDocumentSummary":
        return cls(
            document_id=record.document_id,
            filename=record.filename,
            file_type=record.file_type,
            file_size=record.file_size,
            upload_date=record.upload_date,
            chunk_count=record.chunk_count,
            embedding_model=record.embedding_model,
        )


class FullDocument(FullDocumentSummary):
    """Full-document record including the complete text."""

    full_content: str = Field("", alias="fullContent", description="Entire original text")
    is_full_document: bool = Field(True, alias="isFullDocument")

    @classmethod
    def from_record(cls, record: FullDocumentRecord) -> "FullDocument":
        return cls(
            document_id=record.document_id,
            filename=record.filename,
            file_type=record.file_type,
            file_size=record.file_size,
            upload_date=record.upload_date,
            chunk_count=record.chunk_count,
            embedding_model=record.embedding_model,
            full_content=record.full_content or "",
            is_full_document=record.is_full_document,
        )


class GroupedDocument(BaseModel):
    """Document metadata derived from its chunk payloads."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., description="Document ID")
    filename: str | None = Field(None, description="Original filename")
    upload_date: str | None = Field(
        None, alias="uploadDate", description="Earliest upload time among the chunks"
    )
    embedding_model: str | None = Field(None, description="Embedding model used")
    chunks_count: int = Field(..., description="Number of chunks seen")

    @classmethod
    def from_summary(cls, summary: DocumentSummary) -> "GroupedDocument":
        return cls(
            document_id=summary.document_id,
            filename=summary.filename,
            upload_date=summary.upload_date,
            embedding_model=summary.embedding_model,
            chunks_count=summary.chunks_count,
        )


class DocumentListResponse(BaseModel):
    """Listing of full-document summaries, newest first."""

    success: bool
    documents: list[FullDocumentSummary] = Field(default_factory=list)
    total: int = 0
    error: str | None = None


class GroupedDocumentListResponse(BaseModel):
    """Listing of chunk-derived document summaries, newest first."""

    success: bool
    documents: list[GroupedDocument] = Field(default_factory=list)
    total: int = 0
    error: str | None = None


class DocumentResponse(BaseModel):
    """A single full document."""

    success: bool
    document: FullDocument


class DeleteResult(BaseModel):
    """Outcome of deleting a document from both collections."""

    success: bool
    message: str | None = None
    error: str | None = None
    chunks_deleted: int | None = Field(None, description="Unknown when deleted server-side")
    full_documents_deleted: int = 0


class CollectionInfoResponse(BaseModel):
    """Vector configuration of the chunk collection."""

    success: bool
    collection: str
    vector_size: int | None = None
    distance: str | None = None
    points_count: int | None = None
    error: str | None = None

    @classmethod
    def from_descriptor(cls, descriptor: CollectionDescriptor) -> "CollectionInfoResponse":
        return cls(
            success=True,
            collection=descriptor.name,
            vector_size=descriptor.vector_size,
            distance=descriptor.distance,
            points_count=descriptor.points_count,
        )


class CleanupResult(BaseModel):
    """Documents removed because their chunks held binary data."""

    success: bool
    document_ids: list[str] = Field(default_factory=list)
    chunks_deleted: int = 0
    full_documents_deleted: int = 0
    error: str | None = None
