"""
AWS S3 storage adapter.
Supports AWS S3 and S3-compatible services like MinIO.
"""

from typing import Any, AsyncGenerator

from botocore.exceptions import ClientError

from upload_api.core.exceptions import StorageException
from upload_api.storage.base import StorageAdapter

CHUNK_SIZE = 1024 * 1024  # 1MB


class S3StorageAdapter(StorageAdapter):
    """
    S3-compatible object storage implementation.

    Wraps an already configured boto3 S3 client; the bucket is expected
    to exist. No request is made until the first operation.
    """

    identity = "aws-s3"

    def __init__(self, client: Any, bucket_name: str, region: str, endpoint_url: str | None = None):
        """
        Initialize S3 storage adapter.

        Args:
            client: boto3 S3 client
            bucket_name: S3 bucket name
            region: AWS region the client was created for
            endpoint_url: Custom endpoint (MinIO, other S3-compatible services)
        """
        self.client = client
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url

    def _error_code(self, error: ClientError) -> str | None:
        return error.response.get("Error", {}).get("Code")

    async def upload_bytes(self, data: bytes, path: str, content_type: str) -> str:
        """Upload raw bytes to storage."""
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=path,
                Body=data,
                ContentType=content_type,
            )

            return path

        except ClientError as e:
            raise StorageException(
                message=f"Failed to upload bytes to S3: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    async def download(self, path: str) -> AsyncGenerator[bytes, None]:
        """Stream download a file in chunks."""
        try:
            response = self.client.get_object(
                Bucket=self.bucket_name,
                Key=path,
            )
        except ClientError as e:
            raise self._download_error(e, path)

        body = response["Body"]
        try:
            while chunk := body.read(CHUNK_SIZE):
                yield chunk
        finally:
            body.close()

    async def download_bytes(self, path: str) -> bytes:
        """Download entire file as bytes."""
        try:
            response = self.client.get_object(
                Bucket=self.bucket_name,
                Key=path,
            )

            return response["Body"].read()

        except ClientError as e:
            raise self._download_error(e, path)

    def _download_error(self, error: ClientError, path: str) -> StorageException:
        if self._error_code(error) == "NoSuchKey":
            return StorageException(
                message=f"File not found: {path}",
                details={"path": path, "bucket": self.bucket_name},
            )
        return StorageException(
            message=f"Failed to download file from S3: {str(error)}",
            details={"path": path, "bucket": self.bucket_name},
        )

    async def delete(self, path: str) -> bool:
        """Delete a file from storage."""
        try:
            # Check if exists first
            if not await self.exists(path):
                return False

            self.client.delete_object(
                Bucket=self.bucket_name,
                Key=path,
            )

            return True

        except ClientError as e:
            raise StorageException(
                message=f"Failed to delete file from S3: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    async def exists(self, path: str) -> bool:
        """Check if a file exists."""
        try:
            self.client.head_object(
                Bucket=self.bucket_name,
                Key=path,
            )
            return True
        except ClientError as e:
            if self._error_code(e) in ("404", "NoSuchKey"):
                return False
            raise StorageException(
                message=f"Failed to check file existence: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    async def get_size(self, path: str) -> int:
        """Get file size in bytes."""
        try:
            response = self.client.head_object(
                Bucket=self.bucket_name,
                Key=path,
            )
            return response["ContentLength"]

        except ClientError as e:
            if self._error_code(e) in ("404", "NoSuchKey"):
                raise StorageException(
                    message=f"File not found: {path}",
                    details={"path": path, "bucket": self.bucket_name},
                )
            raise StorageException(
                message=f"Failed to get file size: {str(e)}",
                details={"path": path, "bucket": self.bucket_name},
            )

    def get_url(self, path: str) -> str:
        """Generate a presigned URL for file access."""
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self.bucket_name,
                    "Key": path,
                },
                ExpiresIn=3600,  # 1 hour
            )
        except ClientError:
            # Fallback to direct URL construction
            if self.endpoint_url:
                return f"{self.endpoint_url}/{self.bucket_name}/{path}"
            return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{path}"
