"""
Local filesystem storage adapter.
Stores files on the local filesystem; the terminal fallback for every upload.
"""

from pathlib import Path
from typing import AsyncGenerator

import aiofiles
import aiofiles.os

from upload_api.core.exceptions import StorageException
from upload_api.storage.base import StorageAdapter

CHUNK_SIZE = 1024 * 1024  # 1MB


class LocalStorageAdapter(StorageAdapter):
    """
    Local filesystem storage implementation.

    Files are stored under ``base_path`` and served from ``public_url``.
    """

    identity = "local"

    def __init__(self, base_path: str, public_url: str = "/storage"):
        """
        Initialize local storage adapter.

        Args:
            base_path: Base directory for storage, created if missing
            public_url: URL prefix the directory is served under
        """
        self.base_path = Path(base_path)
        self.public_url = public_url.rstrip("/")
        # Ensure base directory exists
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, path: str) -> Path:
        """Get full filesystem path for a storage path, rejecting traversal."""
        full_path = (self.base_path / path).resolve()
        try:
            full_path.relative_to(self.base_path.resolve())
        except ValueError:
            raise StorageException(
                message=f"Path escapes storage directory: {path}",
                details={"path": path},
            )
        return full_path

    async def upload_bytes(self, data: bytes, path: str, content_type: str) -> str:
        """Upload raw bytes to storage."""
        full_path = self._get_full_path(path)

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(full_path, "wb") as f:
                await f.write(data)

            return path

        except OSError as e:
            raise StorageException(
                message=f"Failed to upload bytes: {str(e)}",
                details={"path": path},
            )

    async def download(self, path: str) -> AsyncGenerator[bytes, None]:
        """Stream download a file in chunks."""
        full_path = self._get_full_path(path)

        if not full_path.exists():
            raise StorageException(
                message=f"File not found: {path}",
                details={"path": path},
            )

        try:
            async with aiofiles.open(full_path, "rb") as f:
                while chunk := await f.read(CHUNK_SIZE):
                    yield chunk

        except OSError as e:
            raise StorageException(
                message=f"Failed to download file: {str(e)}",
                details={"path": path},
            )

    async def download_bytes(self, path: str) -> bytes:
        """Download entire file as bytes."""
        full_path = self._get_full_path(path)

        if not full_path.exists():
            raise StorageException(
                message=f"File not found: {path}",
                details={"path": path},
            )

        try:
            async with aiofiles.open(full_path, "rb") as f:
                return await f.read()

        except OSError as e:
            raise StorageException(
                message=f"Failed to download file: {str(e)}",
                details={"path": path},
            )

    async def delete(self, path: str) -> bool:
        """Delete a file from storage."""
        full_path = self._get_full_path(path)

        if not full_path.exists():
            return False

        try:
            await aiofiles.os.remove(full_path)

            # Try to remove empty parent directories
            base = self.base_path.resolve()
            parent = full_path.parent
            while parent != base:
                try:
                    parent.rmdir()  # Only removes if empty
                    parent = parent.parent
                except OSError:
                    break

            return True

        except OSError as e:
            raise StorageException(
                message=f"Failed to delete file: {str(e)}",
                details={"path": path},
            )

    async def exists(self, path: str) -> bool:
        """Check if a file exists."""
        return self._get_full_path(path).exists()

    async def get_size(self, path: str) -> int:
        """Get file size in bytes."""
        full_path = self._get_full_path(path)

        if not full_path.exists():
            raise StorageException(
                message=f"File not found: {path}",
                details={"path": path},
            )

        stat = await aiofiles.os.stat(full_path)
        return stat.st_size

    def get_url(self, path: str) -> str:
        """Get URL/path for file access."""
        return f"{self.public_url}/{path}"
