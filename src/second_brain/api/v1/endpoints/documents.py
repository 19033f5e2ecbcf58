"""Document listing, retrieval, deletion and collection info endpoints."""

from fastapi import APIRouter, Query, status

from second_brain.core.exceptions import AppException, NotFoundException
from second_brain.core.logging import get_logger
from second_brain.dependencies import DocumentServiceDep, IngestionServiceDep
from second_brain.schemas.documents import (
    CleanupResult,
    CollectionInfoResponse,
    DeleteResult,
    DocumentListResponse,
    DocumentResponse,
    FullDocument,
    GroupedDocumentListResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["documents"])


@router.get(
    "/documents",
    response_model=DocumentListResponse,
    summary="List Documents",
    description="Lists full-document records without their text, newest first",
)
async def list_documents(document_service: DocumentServiceDep) -> DocumentListResponse:
    return await document_service.list_full_documents()


@router.get(
    "/documents/grouped",
    response_model=GroupedDocumentListResponse,
    summary="List Documents From Chunks",
    description="Groups chunk payloads by document, optionally within an upload date range",
)
async def list_grouped_documents(
    document_service: DocumentServiceDep,
    date_from: str | None = Query(None, description="Inclusive lower bound (ISO date or time)"),
    date_to: str | None = Query(None, description="Inclusive upper bound (ISO date or time)"),
) -> GroupedDocumentListResponse:
    return await document_service.list_grouped(date_from, date_to)


@router.post(
    "/documents/cleanup",
    response_model=CleanupResult,
    summary="Clean Up Corrupted Documents",
    description="Deletes documents whose chunks contain binary control characters",
)
async def cleanup_documents(document_service: DocumentServiceDep) -> CleanupResult:
    return await document_service.cleanup_corrupted_documents()


@router.get(
    "/documents/{document_id}",
    response_model=DocumentResponse,
    summary="Get Document",
    description="Returns one full-document record including its text",
)
async def get_document(
    document_id: str,
    document_service: DocumentServiceDep,
) -> DocumentResponse:
    """Fetch a full-document record.

    Raises:
        NotFoundException: No record for ``document_id``.
    """
    record = await document_service.get_full_document(document_id)
    if record is None:
        raise NotFoundException(f"Document {document_id} not found")
    return DocumentResponse(success=True, document=FullDocument.from_record(record))


@router.delete(
    "/documents/{document_id}",
    response_model=DeleteResult,
    summary="Delete Document",
    description="Deletes a document's full-document record and all of its chunks",
    status_code=status.HTTP_200_OK,
)
async def delete_document(
    document_id: str,
    ingestion_service: IngestionServiceDep,
) -> DeleteResult:
    result = await ingestion_service.delete(document_id)
    if not result.success:
        logger.error("Delete of %s failed: %s", document_id, result.error)
        raise AppException(f"Failed to delete document: {result.error}")
    return result


@router.get(
    "/collections/info",
    response_model=CollectionInfoResponse,
    summary="Chunk Collection Info",
    description="Vector size, distance and point count of the chunk collection",
)
async def collection_info(document_service: DocumentServiceDep) -> CollectionInfoResponse:
    return await document_service.get_collection_info()
