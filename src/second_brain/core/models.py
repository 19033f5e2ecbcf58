"""Domain models for the chunk and full-document collections."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ChunkPoint:
    """One embedded chunk of a source document."""

    id: int
    document_id: str
    filename: str
    chunk_index: int
    content: str
    upload_date: str
    embedding_model: str
    file_type: str
    embedding: list[float] | None = None


@dataclass(frozen=True)
class ChunkHit:
    """A chunk returned by similarity search."""

    content: str
    score: float
    filename: str
    file_type: str


@dataclass(frozen=True)
class FullDocumentRecord:
    """Whole-document record kept in the full-document collection.

    ``full_content`` is ``None`` for listing summaries.
    """

    document_id: str
    filename: str
    file_type: str
    file_size: int
    upload_date: str
    chunk_count: int
    embedding_model: str
    full_content: str | None = None
    is_full_document: bool = True


@dataclass
class DocumentSummary:
    """Per-document metadata derived by grouping chunk payloads."""

    document_id: str
    filename: str | None
    upload_date: str | None
    embedding_model: str | None
    chunks_count: int = 0


@dataclass(frozen=True)
class CollectionDescriptor:
    """Vector configuration and size of a collection."""

    name: str
    vector_size: int | None
    distance: str | None
    points_count: int | None


@dataclass(slots=True)
class ChunkUpsertResult:
    """Outcome of writing a document's chunks."""

    success: bool
    message: str
    count: int = 0
    model: str | None = None
    dimensions: int | None = None
    point_ids: list[int] = field(default_factory=list)
