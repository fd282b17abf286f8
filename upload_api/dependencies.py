"""
FastAPI dependency injection functions.
Provides common dependencies used across endpoints.
"""

from typing import Annotated

from fastapi import Depends, Request

from upload_api.config import Settings, get_settings
from upload_api.storage import AdapterResolver


def get_resolver(request: Request) -> AdapterResolver:
    """
    Adapter resolver created in the application lifespan.

    Usage:
        @router.post("/files")
        async def upload(resolver: Resolver):
            adapter = resolver.resolve_for_mime_type("image/png")
    """
    return request.app.state.resolver


# Type aliases for cleaner endpoint signatures
Resolver = Annotated[AdapterResolver, Depends(get_resolver)]
AppSettings = Annotated[Settings, Depends(get_settings)]
