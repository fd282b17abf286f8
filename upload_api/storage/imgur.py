"""
Imgur image hosting adapter.
Uploads anonymously with an application Client-ID over the Imgur v3 API.
"""

import logging
from pathlib import PurePosixPath
from typing import Any, AsyncGenerator

import httpx

from upload_api.core.exceptions import StorageException
from upload_api.storage.base import StorageAdapter

logger = logging.getLogger(__name__)

IMGUR_API_URL = "https://api.imgur.com/3/"
IMGUR_IMAGE_URL = "https://i.imgur.com"


class ImgurAdapter(StorageAdapter):
    """
    Imgur storage implementation.

    Storage paths are ``<image id><extension>`` as assigned by Imgur, the
    requested path only names the upload. Anonymous images can only be
    deleted with the delete hash returned at upload, which this adapter
    remembers for its own lifetime.
    """

    identity = "imgur"

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self._delete_hashes: dict[str, str] = {}

    @staticmethod
    def _image_id(path: str) -> str:
        return PurePosixPath(path).stem

    async def _request(self, method: str, url: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StorageException(
                message=f"Imgur request failed: {str(e)}",
                details={"path": path},
            )

    async def _image_info(self, path: str) -> dict[str, Any] | None:
        response = await self._request("GET", f"image/{self._image_id(path)}", path)
        if response.status_code == 404:
            return None
        if response.is_error:
            raise StorageException(
                message=f"Imgur returned {response.status_code}",
                details={"path": path},
            )
        return response.json()["data"]

    async def upload_bytes(self, data: bytes, path: str, content_type: str) -> str:
        """Upload an image; returns the Imgur-assigned path."""
        response = await self._request(
            "POST",
            "image",
            path,
            files={"image": (PurePosixPath(path).name, data, content_type)},
            data={"type": "file", "name": PurePosixPath(path).name},
        )
        if response.is_error:
            raise StorageException(
                message=f"Failed to upload image to Imgur: HTTP {response.status_code}",
                details={"path": path},
            )

        image = response.json()["data"]
        stored_path = PurePosixPath(image["link"]).name
        if image.get("deletehash"):
            self._delete_hashes[image["id"]] = image["deletehash"]
        logger.debug(f"Uploaded to Imgur: {stored_path}")
        return stored_path

    async def download(self, path: str) -> AsyncGenerator[bytes, None]:
        """Stream download an image."""
        info = await self._image_info(path)
        if info is None:
            raise StorageException(message=f"File not found: {path}", details={"path": path})

        try:
            async with self.client.stream("GET", info["link"]) as response:
                response.raise_for_status()
                async for chunk in response.aiter_bytes():
                    yield chunk
        except httpx.HTTPError as e:
            raise StorageException(
                message=f"Failed to download image from Imgur: {str(e)}",
                details={"path": path},
            )

    async def download_bytes(self, path: str) -> bytes:
        """Download entire image as bytes."""
        chunks = []
        async for chunk in self.download(path):
            chunks.append(chunk)
        return b"".join(chunks)

    async def delete(self, path: str) -> bool:
        """Delete an image by its delete hash, or by id for account-owned images."""
        image_id = self._image_id(path)
        target = self._delete_hashes.get(image_id, image_id)
        response = await self._request("DELETE", f"image/{target}", path)
        if response.status_code == 404:
            return False
        if response.is_error:
            raise StorageException(
                message=f"Failed to delete image from Imgur: HTTP {response.status_code}",
                details={"path": path},
            )
        self._delete_hashes.pop(image_id, None)
        return True

    async def exists(self, path: str) -> bool:
        """Check if an image exists."""
        return await self._image_info(path) is not None

    async def get_size(self, path: str) -> int:
        """Get image size in bytes."""
        info = await self._image_info(path)
        if info is None:
            raise StorageException(message=f"File not found: {path}", details={"path": path})
        return info["size"]

    def get_url(self, path: str) -> str:
        """Direct image link."""
        return f"{IMGUR_IMAGE_URL}/{path}"

    async def aclose(self) -> None:
        await self.client.aclose()
