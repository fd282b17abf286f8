"""
Pytest configuration and fixtures for Upload API tests.
"""

import threading
import time
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from upload_api.config import Settings, get_settings
from upload_api.core.exceptions import StorageException
from upload_api.dependencies import get_resolver
from upload_api.main import app
from upload_api.storage import (
    ALIYUN,
    AWS_S3,
    IMGUR,
    LOCAL,
    OVH_SVFS,
    AdapterRegistry,
    AdapterResolver,
    AppSettingsSource,
    CapabilityProbe,
    DictSettingsSource,
    StorageAdapter,
)
from upload_api.storage.factory import build_local

ALL_ADAPTERS = (LOCAL, AWS_S3, ALIYUN, OVH_SVFS, IMGUR)


class MemoryStorageAdapter(StorageAdapter):
    """In-memory adapter standing in for a vendor-backed one."""

    def __init__(self, identity: str):
        self.identity = identity
        self.files: dict[str, bytes] = {}
        self.closed = False

    async def upload_bytes(self, data: bytes, path: str, content_type: str) -> str:
        self.files[path] = data
        return path

    async def download(self, path: str):
        yield await self.download_bytes(path)

    async def download_bytes(self, path: str) -> bytes:
        if path not in self.files:
            raise StorageException(message=f"File not found: {path}")
        return self.files[path]

    async def delete(self, path: str) -> bool:
        return self.files.pop(path, None) is not None

    async def exists(self, path: str) -> bool:
        return path in self.files

    async def get_size(self, path: str) -> int:
        return len(await self.download_bytes(path))

    def get_url(self, path: str) -> str:
        return f"memory://{self.identity}/{path}"

    async def aclose(self) -> None:
        self.closed = True


class CountingFactory:
    """Adapter factory that records how often it was invoked."""

    def __init__(
        self,
        identity: str,
        error: Exception | None = None,
        delay: float = 0.0,
        build: Callable[[Any], StorageAdapter] | None = None,
    ):
        self.identity = identity
        self.error = error
        self.delay = delay
        self.build = build
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, settings) -> StorageAdapter:
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.build is not None:
            return self.build(settings)
        return MemoryStorageAdapter(self.identity)


@pytest.fixture
def registry() -> AdapterRegistry:
    """Fresh adapter registry per test."""
    return AdapterRegistry()


@pytest.fixture
def factories() -> dict[str, CountingFactory]:
    """Counting in-memory factories for every adapter identity."""
    return {identity: CountingFactory(identity) for identity in ALL_ADAPTERS}


@pytest.fixture
def make_resolver(registry, factories):
    """Build a resolver over a dict settings source and a chosen capability table."""

    def _make(
        values: dict[str, Any] | None = None,
        mime_types: dict[str, Any] | None = None,
        capabilities: dict[str, bool] | None = None,
        **kwargs: Any,
    ) -> AdapterResolver:
        if capabilities is None:
            capabilities = {identity: True for identity in ALL_ADAPTERS}
        kwargs.setdefault("factories", factories)
        return AdapterResolver(
            settings=DictSettingsSource(values, mime_types),
            registry=registry,
            probe=CapabilityProbe(capabilities),
            **kwargs,
        )

    return _make


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Get test settings."""
    return Settings(
        UPLOAD_METHOD="local",
        MIME_TYPES={"image/png": "imgur", "image/jpeg": {"adapter": "imgur"}, "*": "local"},
        LOCAL_STORAGE_PATH=str(tmp_path / "storage"),
        LOCAL_PUBLIC_URL="/storage",
        IMGUR_CLIENT_ID="abc123",
        MAX_UPLOAD_SIZE=1024,
    )


@pytest.fixture
def api_factories() -> dict[str, CountingFactory]:
    """Real local storage, in-memory stand-ins for the remote adapters."""
    api_factories = {identity: CountingFactory(identity) for identity in ALL_ADAPTERS}
    api_factories[LOCAL] = CountingFactory(LOCAL, build=build_local)
    return api_factories


@pytest.fixture
def api_capabilities() -> dict[str, bool]:
    return {identity: True for identity in ALL_ADAPTERS}


@pytest.fixture
def api_resolver(test_settings, registry, api_factories, api_capabilities) -> AdapterResolver:
    return AdapterResolver(
        settings=AppSettingsSource(test_settings),
        registry=registry,
        probe=CapabilityProbe(api_capabilities),
        factories=api_factories,
    )


@pytest_asyncio.fixture(scope="function")
async def client(test_settings, api_resolver) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    app.dependency_overrides[get_resolver] = lambda: api_resolver
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await api_resolver.registry.aclose()
