"""
File upload endpoints.
Each upload is stored by the adapter bound to its mime type.
"""

import logging
from pathlib import PurePosixPath
from uuid import uuid4

from fastapi import APIRouter, File, UploadFile

from upload_api.core.exceptions import PayloadTooLargeException, ValidationException
from upload_api.dependencies import AppSettings, Resolver
from upload_api.schemas.error import ErrorResponse
from upload_api.schemas.file import FileUploadResponse

router = APIRouter()
logger = logging.getLogger(__name__)


def build_storage_path(filename: str | None) -> str:
    """Unique storage path keeping only the base name of the client's filename."""
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    if name in ("", ".", ".."):
        name = "upload"
    return f"uploads/{uuid4()}/{name}"


@router.post(
    "",
    status_code=201,
    response_model=FileUploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def upload_file(
    resolver: Resolver,
    settings: AppSettings,
    file: UploadFile = File(..., description="File to upload"),
):
    """
    Upload a file.

    The storage adapter is chosen from the file's content type using the
    configured mime type bindings, falling back to local storage when the
    bound adapter is unavailable.
    """
    content = await file.read()
    size = len(content)

    if size == 0:
        raise ValidationException("Uploaded file is empty")
    if size > settings.MAX_UPLOAD_SIZE:
        raise PayloadTooLargeException(settings.MAX_UPLOAD_SIZE)

    mime_type = file.content_type or "application/octet-stream"
    adapter = resolver.resolve_for_mime_type(mime_type)

    path = await adapter.upload_bytes(content, build_storage_path(file.filename), mime_type)
    logger.info(f"Stored {size} bytes of {mime_type} via '{adapter.identity}' at {path}")

    return FileUploadResponse(
        path=path,
        url=adapter.get_url(path),
        adapter=adapter.identity,
        mime_type=mime_type,
        size=size,
    )
