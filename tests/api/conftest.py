"""Fixtures for the HTTP layer: the app with every service replaced by a mock."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from second_brain.dependencies import (
    get_chat_service,
    get_document_service,
    get_ingestion_service,
    get_qdrant_service,
    get_search_service,
)
from second_brain.main import app


@pytest.fixture
def qdrant_mock() -> MagicMock:
    mock = MagicMock()
    mock.ping = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def search_mock() -> MagicMock:
    mock = MagicMock()
    mock.search = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def documents_mock() -> MagicMock:
    return MagicMock()


@pytest.fixture
def ingestion_mock() -> MagicMock:
    return MagicMock()


@pytest.fixture
def chat_mock() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(
    qdrant_mock: MagicMock,
    search_mock: MagicMock,
    documents_mock: MagicMock,
    ingestion_mock: MagicMock,
    chat_mock: MagicMock,
) -> Iterator[TestClient]:
    app.dependency_overrides[get_qdrant_service] = lambda: qdrant_mock
    app.dependency_overrides[get_search_service] = lambda: search_mock
    app.dependency_overrides[get_document_service] = lambda: documents_mock
    app.dependency_overrides[get_ingestion_service] = lambda: ingestion_mock
    app.dependency_overrides[get_chat_service] = lambda: chat_mock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
