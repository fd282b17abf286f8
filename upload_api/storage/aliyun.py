"""
Alibaba Cloud OSS storage adapter.
"""

import logging
from typing import AsyncGenerator

import oss2

from upload_api.core.exceptions import StorageException
from upload_api.storage.base import StorageAdapter

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB


class AliyunOSSAdapter(StorageAdapter):
    """
    Alibaba Cloud OSS storage implementation.

    Example:
        auth = oss2.Auth(access_key_id, access_key_secret)
        adapter = AliyunOSSAdapter(
            oss2.Bucket(auth, "https://oss-cn-shanghai.aliyuncs.com", "my-bucket")
        )
    """

    identity = "aliyun"

    def __init__(self, bucket: "oss2.Bucket"):
        self._bucket = bucket

    @property
    def bucket_name(self) -> str:
        return self._bucket.bucket_name

    async def upload_bytes(self, data: bytes, path: str, content_type: str) -> str:
        """Upload raw bytes to storage."""
        try:
            self._bucket.put_object(path, data, headers={"Content-Type": content_type})
            logger.debug(f"Uploaded to OSS: {path}")
            return path
        except oss2.exceptions.OssError as e:
            raise StorageException(
                message=f"Failed to upload bytes to OSS: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    async def download(self, path: str) -> AsyncGenerator[bytes, None]:
        """Stream download a file in chunks."""
        try:
            result = self._bucket.get_object(path)
        except oss2.exceptions.NoSuchKey:
            raise StorageException(
                message=f"File not found: {path}",
                details={"path": path, "bucket": self.bucket_name},
            )
        except oss2.exceptions.OssError as e:
            raise StorageException(
                message=f"Failed to download file from OSS: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

        while chunk := result.read(CHUNK_SIZE):
            yield chunk

    async def download_bytes(self, path: str) -> bytes:
        """Download entire file as bytes."""
        chunks = []
        async for chunk in self.download(path):
            chunks.append(chunk)
        return b"".join(chunks)

    async def delete(self, path: str) -> bool:
        """Delete a file from storage."""
        if not await self.exists(path):
            return False

        try:
            self._bucket.delete_object(path)
            return True
        except oss2.exceptions.OssError as e:
            raise StorageException(
                message=f"Failed to delete file from OSS: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    async def exists(self, path: str) -> bool:
        """Check if a file exists."""
        try:
            return self._bucket.object_exists(path)
        except oss2.exceptions.OssError as e:
            raise StorageException(
                message=f"Failed to check file existence: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    async def get_size(self, path: str) -> int:
        """Get file size in bytes."""
        try:
            return self._bucket.head_object(path).content_length
        except oss2.exceptions.NotFound:
            raise StorageException(
                message=f"File not found: {path}",
                details={"path": path, "bucket": self.bucket_name},
            )
        except oss2.exceptions.OssError as e:
            raise StorageException(
                message=f"Failed to get file size: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    def get_url(self, path: str) -> str:
        """Generate a signed URL for file access."""
        return self._bucket.sign_url("GET", path, 3600)
