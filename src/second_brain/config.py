"""Application configuration and settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = "Second Brain API"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]
    cors_credentials: bool = True
    cors_methods: list[str] = ["*"]
    cors_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # Qdrant Configuration
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str | None = None
    qdrant_prefer_grpc: bool = False
    qdrant_timeout: int = 30  # Timeout in seconds
    qdrant_collection_name: str = "documents"
    qdrant_full_documents_collection_name: str = "full_documents"
    # "filter" always deletes server-side, "scan" never does, "auto" switches to scan after a 4xx rejection
    qdrant_delete_strategy: Literal["auto", "filter", "scan"] = "auto"

    # Embedding Configuration
    embedding_provider: Literal["google", "openai"] = "google"
    google_api_key: str | None = None
    openai_api_key: str | None = None
    embedding_model: str = "text-embedding-004"
    embedding_dimensions: int = 768
    strict_embedding_dimensions: bool = True

    # LLM Configuration (Groq)
    groq_api_key: str | None = None
    llm_model: str = "llama-3.3-70b-versatile"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    summary_max_chars: int = 8000

    # Chunking Configuration
    chunk_size: int = 1000
    chunk_overlap: int = 200

    # Retrieval / scan bounds
    search_default_limit: int = 5
    scroll_page_size: int = 100
    chunk_scan_cap: int = 10000
    full_document_scan_cap: int = 1000
    delete_batch_size: int = 100


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
