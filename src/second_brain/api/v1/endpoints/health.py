"""Health check endpoint."""

from fastapi import APIRouter

from second_brain.dependencies import QdrantServiceDep, SettingsDep
from second_brain.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the API and whether Qdrant answers",
)
async def health_check(settings: SettingsDep, qdrant_service: QdrantServiceDep) -> HealthResponse:
    """Check API health and return status.

    The API stays ``healthy`` while Qdrant is down; ``vector_store`` says so.
    """
    reachable = await qdrant_service.ping()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
        vector_store="ok" if reachable else "unavailable",
    )
