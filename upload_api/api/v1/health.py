"""
Health endpoint.
No authentication required.
"""

from fastapi import APIRouter

from upload_api.core.exceptions import UploadAPIException
from upload_api.dependencies import Resolver

router = APIRouter()


@router.get("/health")
async def health_check(resolver: Resolver):
    """
    Service health check endpoint.

    Returns:
        {"status": "ok"} when the default adapter is in use
        {"status": "degraded", "issues": [...]} when uploads fall back or cannot be stored
    """
    issues = []
    default = resolver.default_identity

    try:
        adapter = resolver.resolve(default)
    except UploadAPIException as e:
        return {
            "status": "degraded",
            "issues": [f"Storage: {e.message}"],
        }

    if adapter.identity != default:
        issues.append(f"Storage: adapter '{default}' unavailable, falling back to '{adapter.identity}'")

    if issues:
        return {
            "status": "degraded",
            "adapter": adapter.identity,
            "issues": issues,
        }

    return {
        "status": "ok",
        "adapter": adapter.identity,
    }
