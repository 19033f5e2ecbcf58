"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from second_brain.api.v1.router import api_router
from second_brain.config import get_settings
from second_brain.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)
from second_brain.core.logging import get_logger, setup_logging
from second_brain.core.security import security_headers_middleware
from second_brain.dependencies import close_dependencies

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and close the shared Qdrant client on shutdown."""
    settings = get_settings()
    logger.info(
        "Starting up %s (collections: %s, %s)",
        settings.app_name,
        settings.qdrant_collection_name,
        settings.qdrant_full_documents_collection_name,
    )
    yield
    logger.info("Shutting down %s", settings.app_name)
    await close_dependencies()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Personal knowledge base: ingest text, search it and chat over it",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    app.middleware("http")(security_headers_middleware)

    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()
