"""Search endpoint for filtered similarity search over chunks."""

from fastapi import APIRouter, status

from second_brain.core.logging import get_logger
from second_brain.dependencies import SearchServiceDep
from second_brain.schemas.search import SearchHit, SearchRequest, SearchResponse

logger = get_logger(__name__)

router = APIRouter(tags=["search"])


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Similarity Search",
    description="Returns the chunks nearest to the query, optionally filtered",
    status_code=status.HTTP_200_OK,
)
async def search(
    request: SearchRequest,
    search_service: SearchServiceDep,
) -> SearchResponse:
    """Search ingested chunks.

    Document id, filename and upload date range filters are combined with AND.
    With ``include_metadata`` each result carries its score, filename and type.
    """
    results = await search_service.search(
        request.query,
        request.limit,
        document_id=request.document_id,
        filename=request.filename,
        date_from=request.date_from,
        date_to=request.date_to,
        include_metadata=request.include_metadata,
    )

    if request.include_metadata:
        items: list[str] | list[SearchHit] = [SearchHit.from_hit(hit) for hit in results]
    else:
        items = list(results)

    logger.info("Search completed: %d results", len(items))
    return SearchResponse(query=request.query, results=items, total_results=len(items))
