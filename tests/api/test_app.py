"""Tests for application-level behaviour: docs, CORS, security headers, health."""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient


def test_openapi_schema_available(client: TestClient) -> None:
    response = client.get("/openapi.json")
    assert response.status_code == 200
    schema = response.json()
    assert schema["info"]["title"] == "Second Brain API"
    assert "/api/v1/ingest" in schema["paths"]
    assert "/api/v1/collections/info" in schema["paths"]


def test_docs_available(client: TestClient) -> None:
    assert client.get("/docs").status_code == 200
    assert client.get("/redoc").status_code == 200


def test_health(client: TestClient) -> None:
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["vector_store"] == "ok"


def test_health_reports_unreachable_store(client: TestClient, qdrant_mock: MagicMock) -> None:
    qdrant_mock.ping = AsyncMock(return_value=False)
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["vector_store"] == "unavailable"


def test_cors_headers_present(client: TestClient) -> None:
    response = client.get("/api/v1/health", headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


def test_security_headers_present(client: TestClient) -> None:
    response = client.get("/api/v1/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "no-referrer"


def test_invalid_endpoint_returns_404(client: TestClient) -> None:
    assert client.get("/api/v1/nonexistent").status_code == 404
