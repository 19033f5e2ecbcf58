"""Main API v1 router that combines all endpoint routers."""

from fastapi import APIRouter

from second_brain.api.v1.endpoints import chat, documents, health, ingest, search

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(ingest.router)
api_router.include_router(documents.router)
api_router.include_router(search.router)
api_router.include_router(chat.router)
