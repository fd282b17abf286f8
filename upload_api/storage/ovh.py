"""
OVH Object Storage adapter.
Talks to OVH's OpenStack Swift endpoint through python-swiftclient.
"""

from typing import AsyncGenerator

from swiftclient.client import Connection
from swiftclient.exceptions import ClientException

from upload_api.core.exceptions import StorageException
from upload_api.storage.base import StorageAdapter

CHUNK_SIZE = 1024 * 1024  # 1MB


class OVHSwiftAdapter(StorageAdapter):
    """
    OVH Swift container storage implementation.

    The swiftclient ``Connection`` authenticates lazily on its first
    request, so constructing this adapter performs no network I/O.
    """

    identity = "ovh-svfs"

    def __init__(self, connection: Connection, container: str, public_url: str):
        """
        Args:
            connection: Swift connection for the OVH tenant
            container: Container files are stored in
            public_url: Public base URL of the container
        """
        self.connection = connection
        self.container = container
        self.public_url = public_url.rstrip("/")

    def _not_found(self, error: ClientException) -> bool:
        return error.http_status == 404

    async def upload_bytes(self, data: bytes, path: str, content_type: str) -> str:
        """Upload raw bytes to storage."""
        try:
            self.connection.put_object(self.container, path, contents=data, content_type=content_type)
            return path
        except ClientException as e:
            raise StorageException(
                message=f"Failed to upload bytes to OVH: {str(e)}",
                details={"path": path, "container": self.container},
            )

    async def download(self, path: str) -> AsyncGenerator[bytes, None]:
        """Stream download a file in chunks."""
        try:
            _, body = self.connection.get_object(self.container, path, resp_chunk_size=CHUNK_SIZE)
        except ClientException as e:
            raise self._download_error(e, path)

        for chunk in body:
            yield chunk

    async def download_bytes(self, path: str) -> bytes:
        """Download entire file as bytes."""
        try:
            _, body = self.connection.get_object(self.container, path)
            return body
        except ClientException as e:
            raise self._download_error(e, path)

    def _download_error(self, error: ClientException, path: str) -> StorageException:
        if self._not_found(error):
            return StorageException(
                message=f"File not found: {path}",
                details={"path": path, "container": self.container},
            )
        return StorageException(
            message=f"Failed to download file from OVH: {str(error)}",
            details={"path": path, "container": self.container},
        )

    async def delete(self, path: str) -> bool:
        """Delete a file from storage."""
        try:
            self.connection.delete_object(self.container, path)
            return True
        except ClientException as e:
            if self._not_found(e):
                return False
            raise StorageException(
                message=f"Failed to delete file from OVH: {str(e)}",
                details={"path": path, "container": self.container},
            )

    async def exists(self, path: str) -> bool:
        """Check if a file exists."""
        try:
            self.connection.head_object(self.container, path)
            return True
        except ClientException as e:
            if self._not_found(e):
                return False
            raise StorageException(
                message=f"Failed to check file existence: {str(e)}",
                details={"path": path, "container": self.container},
            )

    async def get_size(self, path: str) -> int:
        """Get file size in bytes."""
        try:
            headers = self.connection.head_object(self.container, path)
            return int(headers["content-length"])
        except ClientException as e:
            if self._not_found(e):
                raise StorageException(
                    message=f"File not found: {path}",
                    details={"path": path, "container": self.container},
                )
            raise StorageException(
                message=f"Failed to get file size: {str(e)}",
                details={"path": path, "container": self.container},
            )

    def get_url(self, path: str) -> str:
        """Public object URL inside the container."""
        return f"{self.public_url}/{path}"

    async def aclose(self) -> None:
        self.connection.close()
