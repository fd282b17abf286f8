"""
API v1 Router - Aggregates all v1 endpoints.
Base Path: /api/v1
"""

from fastapi import APIRouter

from upload_api.api.v1 import adapters, files, health

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
api_router.include_router(adapters.router, prefix="/adapters", tags=["adapters"])
