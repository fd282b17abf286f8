"""
Pydantic schemas for error responses.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Examples:
        400: {"error": "validation_failed", "message": "..."}
        413: {"error": "payload_too_large", "message": "maximum size exceeded"}
        503: {"error": "no_capable_backend", "message": "...", "details": {...}}
    """

    error: str = Field(
        ...,
        description="Error code string",
        examples=["validation_failed", "payload_too_large", "configuration_error", "no_capable_backend"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional additional error details",
    )
