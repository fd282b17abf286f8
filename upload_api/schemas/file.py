"""
Pydantic schemas for file uploads and adapter status.
"""

from pydantic import BaseModel, ConfigDict, Field


class FileUploadResponse(BaseModel):
    """Result of a stored upload."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(..., description="Storage path assigned by the adapter")
    url: str = Field(..., description="URL the file can be fetched from")
    adapter: str = Field(..., description="Identity of the adapter that stored the file")
    mime_type: str = Field(..., alias="mimeType")
    size: int = Field(..., ge=0, description="File size in bytes")


class MimeTypeBindingResponse(BaseModel):
    pattern: str
    adapter: str


class AdapterStatusResponse(BaseModel):
    """Capability table and current adapter bindings."""

    model_config = ConfigDict(populate_by_name=True)

    default_adapter: str = Field(..., alias="defaultAdapter")
    capabilities: dict[str, bool]
    mime_types: list[MimeTypeBindingResponse] = Field(..., alias="mimeTypes")
    bound: dict[str, str] = Field(
        ...,
        description="Requested identity -> identity of the adapter serving it",
    )
