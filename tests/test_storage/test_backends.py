"""
Tests for storage adapters.
"""

import boto3
import httpx
import pytest
from botocore.stub import Stubber

from upload_api.core.exceptions import StorageException
from upload_api.storage.imgur import IMGUR_API_URL, ImgurAdapter
from upload_api.storage.local import LocalStorageAdapter
from upload_api.storage.s3 import S3StorageAdapter


class TestLocalStorageAdapter:
    """Tests for local filesystem storage."""

    @pytest.fixture
    def storage(self, tmp_path) -> LocalStorageAdapter:
        """Create a local storage adapter for testing."""
        return LocalStorageAdapter(base_path=str(tmp_path))

    @pytest.mark.asyncio
    async def test_upload_bytes(self, storage: LocalStorageAdapter):
        """Test uploading bytes."""
        content = b"test file content"
        path = "test/file.txt"

        result = await storage.upload_bytes(content, path, "text/plain")

        assert result == path
        assert await storage.exists(path)

    @pytest.mark.asyncio
    async def test_download_bytes(self, storage: LocalStorageAdapter):
        """Test downloading bytes."""
        content = b"test file content"
        path = "test/file.txt"
        await storage.upload_bytes(content, path, "text/plain")

        result = await storage.download_bytes(path)

        assert result == content

    @pytest.mark.asyncio
    async def test_download_streaming(self, storage: LocalStorageAdapter):
        """Test streaming download."""
        content = b"test file content"
        path = "test/file.txt"
        await storage.upload_bytes(content, path, "text/plain")

        chunks = []
        async for chunk in storage.download(path):
            chunks.append(chunk)

        assert b"".join(chunks) == content

    @pytest.mark.asyncio
    async def test_download_missing(self, storage: LocalStorageAdapter):
        """Test downloading a file that was never stored."""
        with pytest.raises(StorageException):
            await storage.download_bytes("missing.txt")

    @pytest.mark.asyncio
    async def test_delete(self, storage: LocalStorageAdapter, tmp_path):
        """Test file deletion removes emptied directories."""
        path = "test/nested/file.txt"
        await storage.upload_bytes(b"test content", path, "text/plain")

        result = await storage.delete(path)

        assert result is True
        assert not await storage.exists(path)
        assert not (tmp_path / "test").exists()
        assert tmp_path.exists()

    @pytest.mark.asyncio
    async def test_delete_nonexistent(self, storage: LocalStorageAdapter):
        """Test deleting non-existent file."""
        assert await storage.delete("nonexistent/file.txt") is False

    @pytest.mark.asyncio
    async def test_get_size(self, storage: LocalStorageAdapter):
        """Test getting file size."""
        content = b"test file content with some length"
        path = "test/file.txt"
        await storage.upload_bytes(content, path, "text/plain")

        assert await storage.get_size(path) == len(content)

    def test_get_url(self, storage: LocalStorageAdapter):
        """Test getting file URL."""
        assert storage.get_url("test/file.txt") == "/storage/test/file.txt"

    @pytest.mark.asyncio
    async def test_path_traversal_rejected(self, storage: LocalStorageAdapter):
        """Test paths escaping the base directory are refused."""
        with pytest.raises(StorageException):
            await storage.upload_bytes(b"x", "../outside.txt", "text/plain")


class TestS3StorageAdapter:
    """Tests for the S3 adapter against a stubbed boto3 client."""

    @pytest.fixture
    def client(self):
        return boto3.client(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="K",
            aws_secret_access_key="S",
        )

    @pytest.fixture
    def storage(self, client) -> S3StorageAdapter:
        return S3StorageAdapter(client=client, bucket_name="b", region="us-east-1")

    @pytest.mark.asyncio
    async def test_upload_bytes(self, client, storage: S3StorageAdapter):
        with Stubber(client) as stubber:
            stubber.add_response(
                "put_object",
                {},
                {"Bucket": "b", "Key": "a.txt", "Body": b"data", "ContentType": "text/plain"},
            )

            assert await storage.upload_bytes(b"data", "a.txt", "text/plain") == "a.txt"
            stubber.assert_no_pending_responses()

    @pytest.mark.asyncio
    async def test_exists_missing(self, client, storage: S3StorageAdapter):
        with Stubber(client) as stubber:
            stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)

            assert await storage.exists("a.txt") is False

    @pytest.mark.asyncio
    async def test_get_size(self, client, storage: S3StorageAdapter):
        with Stubber(client) as stubber:
            stubber.add_response("head_object", {"ContentLength": 5}, {"Bucket": "b", "Key": "a.txt"})

            assert await storage.get_size("a.txt") == 5

    @pytest.mark.asyncio
    async def test_delete(self, client, storage: S3StorageAdapter):
        with Stubber(client) as stubber:
            stubber.add_response("head_object", {}, {"Bucket": "b", "Key": "a.txt"})
            stubber.add_response("delete_object", {}, {"Bucket": "b", "Key": "a.txt"})

            assert await storage.delete("a.txt") is True
            stubber.assert_no_pending_responses()

    @pytest.mark.asyncio
    async def test_upload_failure(self, client, storage: S3StorageAdapter):
        with Stubber(client) as stubber:
            stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)

            with pytest.raises(StorageException) as exc_info:
                await storage.upload_bytes(b"data", "a.txt", "text/plain")

        assert exc_info.value.details == {"path": "a.txt", "bucket": "b"}


class TestImgurAdapter:
    """Tests for the Imgur adapter against a mocked API."""

    @pytest.fixture
    def requests(self) -> list[httpx.Request]:
        return []

    @pytest.fixture
    def storage(self, requests) -> ImgurAdapter:
        image = {"id": "abc", "link": "https://i.imgur.com/abc.png", "size": 4}

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.host == "i.imgur.com":
                return httpx.Response(200, content=b"\x89PNG")
            if request.method == "POST" and request.url.path == "/3/image":
                return httpx.Response(200, json={"data": {**image, "deletehash": "dh1"}, "success": True})
            if request.method == "GET" and request.url.path == "/3/image/abc":
                return httpx.Response(200, json={"data": image, "success": True})
            if request.method == "DELETE" and request.url.path == "/3/image/dh1":
                return httpx.Response(200, json={"data": True, "success": True})
            return httpx.Response(404, json={"success": False})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=IMGUR_API_URL)
        return ImgurAdapter(client)

    @pytest.mark.asyncio
    async def test_upload_returns_imgur_path(self, storage: ImgurAdapter):
        path = await storage.upload_bytes(b"\x89PNG", "uploads/1/photo.png", "image/png")

        assert path == "abc.png"
        assert storage.get_url(path) == "https://i.imgur.com/abc.png"

    @pytest.mark.asyncio
    async def test_exists_and_size(self, storage: ImgurAdapter):
        assert await storage.exists("abc.png") is True
        assert await storage.exists("zzz.png") is False
        assert await storage.get_size("abc.png") == 4

    @pytest.mark.asyncio
    async def test_download_bytes(self, storage: ImgurAdapter):
        assert await storage.download_bytes("abc.png") == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_delete_uses_delete_hash(self, storage: ImgurAdapter, requests):
        path = await storage.upload_bytes(b"\x89PNG", "photo.png", "image/png")

        assert await storage.delete(path) is True
        assert requests[-1].url.path == "/3/image/dh1"

    @pytest.mark.asyncio
    async def test_delete_unknown(self, storage: ImgurAdapter):
        assert await storage.delete("zzz.png") is False

    @pytest.mark.asyncio
    async def test_aclose(self, storage: ImgurAdapter):
        await storage.aclose()

        assert storage.client.is_closed
