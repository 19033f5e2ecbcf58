# conftest.py
import pytest
import pytest_asyncio
from llama_index.core.embeddings.mock_embed_model import MockEmbedding
from qdrant_client import AsyncQdrantClient

from second_brain.config import Settings
from second_brain.repositories.chunk_repository import ChunkRepository
from second_brain.repositories.full_document_repository import FullDocumentRepository
from second_brain.services.document_service import DocumentService
from second_brain.services.embedding_service import EmbeddingService
from second_brain.services.ingestion_service import IngestionService
from second_brain.services.qdrant_service import QdrantService
from second_brain.services.search_service import SearchService

EMBED_DIM = 768


@pytest_asyncio.fixture
async def aclient_local():
    """In-memory embedded Qdrant for tests."""
    client = AsyncQdrantClient(path=":memory:")
    try:
        yield client
    finally:
        await client.close()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        qdrant_url="http://unused-in-local-mode",
        qdrant_api_key=None,
        qdrant_prefer_grpc=False,
        qdrant_collection_name="test-documents",
        qdrant_full_documents_collection_name="test-full-documents",
        embedding_dimensions=EMBED_DIM,
        google_api_key="test-google-key",
        groq_api_key="test-groq-key",
        chunk_size=200,
        chunk_overlap=20,
    )


@pytest.fixture
def mock_embed_model() -> MockEmbedding:
    return MockEmbedding(embed_dim=EMBED_DIM)


@pytest.fixture
def qdrant_service(aclient_local: AsyncQdrantClient, test_settings: Settings) -> QdrantService:
    return QdrantService(settings=test_settings, aclient=aclient_local)


@pytest.fixture
def embedding_service(test_settings: Settings, mock_embed_model: MockEmbedding) -> EmbeddingService:
    return EmbeddingService(test_settings, embed_model=mock_embed_model)


@pytest.fixture
def chunk_repository(
    test_settings: Settings,
    qdrant_service: QdrantService,
    embedding_service: EmbeddingService,
) -> ChunkRepository:
    return ChunkRepository(test_settings, qdrant_service, embedding_service)


@pytest.fixture
def full_document_repository(
    test_settings: Settings,
    qdrant_service: QdrantService,
) -> FullDocumentRepository:
    return FullDocumentRepository(test_settings, qdrant_service)


@pytest.fixture
def search_service(
    test_settings: Settings,
    chunk_repository: ChunkRepository,
    embedding_service: EmbeddingService,
) -> SearchService:
    return SearchService(test_settings, chunk_repository, embedding_service)


@pytest.fixture
def document_service(
    qdrant_service: QdrantService,
    chunk_repository: ChunkRepository,
    full_document_repository: FullDocumentRepository,
) -> DocumentService:
    return DocumentService(qdrant_service, chunk_repository, full_document_repository)


@pytest.fixture
def ingestion_service(
    test_settings: Settings,
    chunk_repository: ChunkRepository,
    full_document_repository: FullDocumentRepository,
) -> IngestionService:
    return IngestionService(test_settings, chunk_repository, full_document_repository)
