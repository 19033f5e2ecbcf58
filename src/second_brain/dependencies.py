"""FastAPI dependency injection utilities.

Services are built once per process and shared by every request.
"""

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends

from second_brain.config import Settings, get_settings

if TYPE_CHECKING:
    from second_brain.repositories.chunk_repository import ChunkRepository
    from second_brain.repositories.full_document_repository import FullDocumentRepository
    from second_brain.services.chat_service import ChatService
    from second_brain.services.document_service import DocumentService
    from second_brain.services.embedding_service import EmbeddingService
    from second_brain.services.ingestion_service import IngestionService
    from second_brain.services.qdrant_service import QdrantService
    from second_brain.services.search_service import SearchService

SettingsDep = Annotated[Settings, Depends(get_settings)]


_qdrant_service_cache: "QdrantService | None" = None
_embedding_service_cache: "EmbeddingService | None" = None
_chunk_repository_cache: "ChunkRepository | None" = None
_full_document_repository_cache: "FullDocumentRepository | None" = None
_search_service_cache: "SearchService | None" = None
_document_service_cache: "DocumentService | None" = None
_ingestion_service_cache: "IngestionService | None" = None
_chat_service_cache: "ChatService | None" = None


def get_qdrant_service(settings: SettingsDep) -> "QdrantService":
    """Get or create the shared QdrantService."""
    global _qdrant_service_cache

    if _qdrant_service_cache is None:
        from second_brain.services.qdrant_service import QdrantService

        _qdrant_service_cache = QdrantService(settings)

    return _qdrant_service_cache


def get_embedding_service(settings: SettingsDep) -> "EmbeddingService":
    """Get or create the shared EmbeddingService.

    The provider model itself is built on first use, so a missing API key only
    fails the requests that need embeddings.
    """
    global _embedding_service_cache

    if _embedding_service_cache is None:
        from second_brain.services.embedding_service import EmbeddingService

        _embedding_service_cache = EmbeddingService(settings)

    return _embedding_service_cache


def get_chunk_repository(
    settings: SettingsDep,
    qdrant_service: Annotated["QdrantService", Depends(get_qdrant_service)],
    embedding_service: Annotated["EmbeddingService", Depends(get_embedding_service)],
) -> "ChunkRepository":
    global _chunk_repository_cache

    if _chunk_repository_cache is None:
        from second_brain.repositories.chunk_repository import ChunkRepository

        _chunk_repository_cache = ChunkRepository(settings, qdrant_service, embedding_service)

    return _chunk_repository_cache


def get_full_document_repository(
    settings: SettingsDep,
    qdrant_service: Annotated["QdrantService", Depends(get_qdrant_service)],
) -> "FullDocumentRepository":
    global _full_document_repository_cache

    if _full_document_repository_cache is None:
        from second_brain.repositories.full_document_repository import FullDocumentRepository

        _full_document_repository_cache = FullDocumentRepository(settings, qdrant_service)

    return _full_document_repository_cache


def get_search_service(
    settings: SettingsDep,
    chunk_repository: Annotated["ChunkRepository", Depends(get_chunk_repository)],
    embedding_service: Annotated["EmbeddingService", Depends(get_embedding_service)],
) -> "SearchService":
    """Get or create the shared SearchService."""
    global _search_service_cache

    if _search_service_cache is None:
        from second_brain.services.search_service import SearchService

        _search_service_cache = SearchService(settings, chunk_repository, embedding_service)

    return _search_service_cache


def get_document_service(
    qdrant_service: Annotated["QdrantService", Depends(get_qdrant_service)],
    chunk_repository: Annotated["ChunkRepository", Depends(get_chunk_repository)],
    full_document_repository: Annotated[
        "FullDocumentRepository", Depends(get_full_document_repository)
    ],
) -> "DocumentService":
    """Get or create the shared DocumentService."""
    global _document_service_cache

    if _document_service_cache is None:
        from second_brain.services.document_service import DocumentService

        _document_service_cache = DocumentService(
            qdrant_service,
            chunk_repository,
            full_document_repository,
        )

    return _document_service_cache


def get_ingestion_service(
    settings: SettingsDep,
    chunk_repository: Annotated["ChunkRepository", Depends(get_chunk_repository)],
    full_document_repository: Annotated[
        "FullDocumentRepository", Depends(get_full_document_repository)
    ],
) -> "IngestionService":
    """Get or create the shared IngestionService."""
    global _ingestion_service_cache

    if _ingestion_service_cache is None:
        from second_brain.services.ingestion_service import IngestionService

        _ingestion_service_cache = IngestionService(
            settings,
            chunk_repository,
            full_document_repository,
        )

    return _ingestion_service_cache


def get_chat_service(
    settings: SettingsDep,
    search_service: Annotated["SearchService", Depends(get_search_service)],
    document_service: Annotated["DocumentService", Depends(get_document_service)],
) -> "ChatService":
    """Get or create the shared ChatService."""
    global _chat_service_cache

    if _chat_service_cache is None:
        from second_brain.services.chat_service import ChatService

        _chat_service_cache = ChatService(settings, search_service, document_service)

    return _chat_service_cache


async def close_dependencies() -> None:
    """Close the Qdrant client and forget every cached service."""
    global _qdrant_service_cache, _embedding_service_cache, _chunk_repository_cache
    global _full_document_repository_cache, _search_service_cache, _document_service_cache
    global _ingestion_service_cache, _chat_service_cache

    if _qdrant_service_cache is not None:
        await _qdrant_service_cache.aclose()

    _qdrant_service_cache = None
    _embedding_service_cache = None
    _chunk_repository_cache = None
    _full_document_repository_cache = None
    _search_service_cache = None
    _document_service_cache = None
    _ingestion_service_cache = None
    _chat_service_cache = None


# Type aliases for dependency injection
QdrantServiceDep = Annotated["QdrantService", Depends(get_qdrant_service)]
SearchServiceDep = Annotated["SearchService", Depends(get_search_service)]
DocumentServiceDep = Annotated["DocumentService", Depends(get_document_service)]
IngestionServiceDep = Annotated["IngestionService", Depends(get_ingestion_service)]
ChatServiceDep = Annotated["ChatService", Depends(get_chat_service)]
