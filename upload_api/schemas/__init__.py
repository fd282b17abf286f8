"""Pydantic schemas for request/response validation."""

from upload_api.schemas.error import ErrorResponse
from upload_api.schemas.file import (
    AdapterStatusResponse,
    FileUploadResponse,
    MimeTypeBindingResponse,
)

__all__ = [
    "ErrorResponse",
    "AdapterStatusResponse",
    "FileUploadResponse",
    "MimeTypeBindingResponse",
]
