"""Search request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field

from second_brain.core.models import ChunkHit


class SearchRequest(BaseModel):
    """Request model for search endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., description="Search query text", min_length=1)
    limit: int = Field(5, description="Maximum number of chunks to return", ge=1, le=100)
    document_id: str | None = Field(None, alias="documentId", description="Only this document")
    filename: str | None = Field(None, description="Only chunks of this filename")
    date_from: str | None = Field(
        None, alias="dateFrom", description="Inclusive lower bound on upload date (ISO date or time)"
    )
    date_to: str | None = Field(
        None, alias="dateTo", description="Inclusive upper bound on upload date (ISO date or time)"
    )
    include_metadata: bool = Field(
        False, alias="includeMetadata", description="Return scored hits instead of plain text"
    )


class SearchHit(BaseModel):
    """Chunk with its similarity score and source."""

    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(..., description="Chunk text")
    score: float = Field(..., description="Similarity score")
    filename: str | None = Field(None, description="Source filename")
    file_type: str | None = Field(None, alias="fileType", description="Source type")

    @classmethod
    def from_hit(cls, hit: ChunkHit) -> "SearchHit":
        return cls(
            content=hit.content,
            score=hit.score,
            filename=hit.filename,
            file_type=hit.file_type,
        )


class SearchResponse(BaseModel):
    """Response model for search endpoint."""

    query: str = Field(..., description="Original search query")
    results: list[str] | list[SearchHit] = Field(..., description="Chunks by descending score")
    total_results: int = Field(..., description="Number of chunks returned")
