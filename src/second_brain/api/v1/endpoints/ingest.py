"""Ingestion endpoint for already-extracted text."""

from fastapi import APIRouter, status

from second_brain.core.logging import get_logger
from second_brain.dependencies import IngestionServiceDep
from second_brain.schemas.ingest import IngestionResult, IngestRequest

logger = get_logger(__name__)

router = APIRouter(tags=["ingest"])


@router.post(
    "/ingest",
    response_model=IngestionResult,
    summary="Ingest Document",
    description="Chunks, embeds and stores a document in the chunk and full-document collections",
    status_code=status.HTTP_200_OK,
)
async def ingest(
    request: IngestRequest,
    ingestion_service: IngestionServiceDep,
) -> IngestionResult:
    """Store one document.

    Invalid content is rejected with 422 and a missing embedding credential
    with 500. Storage failures are reported in the body with ``success=false``
    and a ``status`` of ``failed``, ``rolled_back`` or ``reconciliation_needed``.
    """
    logger.info("Ingest request: filename='%s', type=%s", request.filename, request.type)
    result = await ingestion_service.ingest(request.content, request.filename, request.type)
    logger.info("Ingest completed: %s -> %s", result.document_id, result.status)
    return result
