"""
Abstract storage adapter interface.
Defines the contract for all storage implementations.
"""

from abc import ABC, abstractmethod
from typing import AsyncGenerator

from fastapi import UploadFile


class StorageAdapter(ABC):
    """
    Abstract base class for storage adapters.

    All storage implementations (local, S3, Aliyun OSS, OVH, Imgur) must
    implement these methods so callers can treat them uniformly.
    """

    #: Backend identity this adapter implements, e.g. "aws-s3"
    identity: str = ""

    async def upload(self, file: UploadFile, path: str) -> str:
        """
        Upload a file to storage.

        Args:
            file: FastAPI UploadFile object
            path: Destination path in storage (e.g., "uploads/{id}/photo.png")

        Returns:
            The storage path where the file was saved

        Raises:
            StorageException: If upload fails
        """
        content = await file.read()
        content_type = file.content_type or "application/octet-stream"
        return await self.upload_bytes(content, path, content_type)

    @abstractmethod
    async def upload_bytes(self, data: bytes, path: str, content_type: str) -> str:
        """
        Upload raw bytes to storage.

        Args:
            data: Raw file bytes
            path: Destination path in storage
            content_type: MIME type of the content

        Returns:
            The storage path where the file was saved

        Raises:
            StorageException: If upload fails
        """
        pass

    @abstractmethod
    async def download(self, path: str) -> AsyncGenerator[bytes, None]:
        """
        Stream download a file from storage.

        Args:
            path: Path to the file in storage

        Yields:
            File content in chunks

        Raises:
            StorageException: If file not found or download fails
        """
        pass

    @abstractmethod
    async def download_bytes(self, path: str) -> bytes:
        """
        Download entire file as bytes.

        Raises:
            StorageException: If file not found or download fails
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if deleted successfully, False if file didn't exist

        Raises:
            StorageException: If deletion fails for other reasons
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a file exists in storage."""
        pass

    @abstractmethod
    async def get_size(self, path: str) -> int:
        """
        Get the size of a file in storage.

        Raises:
            StorageException: If file not found
        """
        pass

    @abstractmethod
    def get_url(self, path: str) -> str:
        """
        Get a URL for accessing the file.

        For local storage, this returns a relative path.
        For cloud storage, this may return a signed or public URL.
        """
        pass

    async def aclose(self) -> None:
        """Release client resources. Called once when the registry is closed."""
        return None
