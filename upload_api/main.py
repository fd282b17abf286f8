"""
Upload API - Main Application Entry Point.

FastAPI application that stores uploaded files through pluggable storage
adapters chosen per mime type.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from upload_api.api.v1.router import api_router
from upload_api.config import get_settings
from upload_api.core.exceptions import UploadAPIException
from upload_api.storage import AdapterRegistry, AdapterResolver, AppSettingsSource, CapabilityProbe

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Owns the adapter registry: created at startup, closed at shutdown.
    """
    # Startup
    logger.info(f"Starting {settings.PROJECT_NAME}")
    logger.info(f"Default upload adapter: {settings.UPLOAD_METHOD}")

    registry = AdapterRegistry()
    resolver = AdapterResolver(
        settings=AppSettingsSource(settings),
        registry=registry,
        probe=CapabilityProbe.detect(),
    )
    app.state.registry = registry
    app.state.resolver = resolver

    try:
        for requested, resolved in resolver.bind_all().items():
            logger.info(f"Upload adapter '{requested}' bound to '{resolved}'")
    except UploadAPIException as e:
        logger.error(f"Could not bind upload adapters at startup: {e.message}")

    yield

    # Shutdown
    await registry.aclose()
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
## Upload API

Stores uploaded files on the storage adapter configured for their mime type.

### Storage adapters
- **local**: local filesystem (always available)
- **aws-s3**: Amazon S3 and S3-compatible services
- **aliyun**: Alibaba Cloud OSS
- **ovh-svfs**: OVH Object Storage (Swift)
- **imgur**: Imgur image hosting
    """,
    version="1.0.0",
    openapi_tags=[
        {"name": "files", "description": "File uploads"},
        {"name": "adapters", "description": "Storage adapter status"},
        {"name": "health", "description": "Service health checks"},
    ],
    lifespan=lifespan,
)

# CORS middleware for cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UploadAPIException)
async def upload_api_exception_handler(request: Request, exc: UploadAPIException) -> JSONResponse:
    """
    Global exception handler for Upload API exceptions.
    Returns standardized error responses.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all exception handler for unexpected errors.
    Logs the full error but returns a sanitized response.
    """
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with service information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "openapi": "/openapi.json",
        "api": settings.API_V1_PREFIX,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "upload_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
