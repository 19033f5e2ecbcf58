"""Tests for configuration."""

import pytest
from pydantic import ValidationError

from second_brain.config import Settings, get_settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that settings have correct default values."""
    for name in ("QDRANT_URL", "QDRANT_COLLECTION_NAME", "EMBEDDING_PROVIDER", "EMBEDDING_MODEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)  # type: ignore[call-arg]
    assert settings.app_name == "Second Brain API"
    assert settings.api_v1_prefix == "/api/v1"
    assert settings.qdrant_url == "http://localhost:6333"
    assert settings.qdrant_collection_name == "documents"
    assert settings.qdrant_full_documents_collection_name == "full_documents"
    assert settings.qdrant_delete_strategy == "auto"
    assert settings.embedding_provider == "google"
    assert settings.embedding_model == "text-embedding-004"
    assert settings.embedding_dimensions == 768
    assert settings.strict_embedding_dimensions is True
    assert settings.chunk_size == 1000
    assert settings.chunk_overlap == 200
    assert settings.search_default_limit == 5


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QDRANT_URL", "https://qdrant.example.com")
    monkeypatch.setenv("EMBEDDING_DIMENSIONS", "1536")
    monkeypatch.setenv("QDRANT_DELETE_STRATEGY", "scan")

    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.qdrant_url == "https://qdrant.example.com"
    assert settings.embedding_dimensions == 1536
    assert settings.qdrant_delete_strategy == "scan"


def test_invalid_delete_strategy_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(qdrant_delete_strategy="sometimes")  # type: ignore[arg-type]


def test_settings_are_frozen() -> None:
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.chunk_size = 10  # type: ignore[misc]


def test_get_settings_returns_singleton() -> None:
    """Test that get_settings returns the same instance."""
    assert get_settings() is get_settings()
