"""
Process-wide registry of constructed storage adapters.

Holds at most one adapter per identity. Entries are never replaced or
evicted; they are released together when the registry is closed at
application shutdown.
"""

import logging
import threading
from typing import Callable

from upload_api.core.exceptions import RegistryClosedException
from upload_api.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Identity -> adapter cache with single-flight construction."""

    def __init__(self) -> None:
        self._adapters: dict[str, StorageAdapter] = {}
        self._lock = threading.RLock()
        self._closed = False

    def get(self, identity: str) -> StorageAdapter | None:
        return self._adapters.get(identity)

    def __contains__(self, identity: str) -> bool:
        return identity in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)

    def register(self, identity: str, adapter: StorageAdapter) -> StorageAdapter:
        """
        Bind an adapter to an identity unless one is already bound.

        Returns:
            The adapter bound to the identity after the call

        Raises:
            RegistryClosedException: If the registry was closed
        """
        with self._lock:
            if self._closed:
                raise RegistryClosedException(identity)
            existing = self._adapters.get(identity)
            if existing is not None:
                return existing
            self._adapters[identity] = adapter
            return adapter

    def get_or_create(self, identity: str, create: Callable[[], StorageAdapter]) -> StorageAdapter:
        """
        Return the adapter bound to ``identity``, calling ``create`` on a miss.

        ``create`` runs under the registry lock, so concurrent first requests
        construct once and every caller gets the same instance. ``create``
        may itself register further identities.
        """
        adapter = self._adapters.get(identity)
        if adapter is not None:
            return adapter

        with self._lock:
            adapter = self._adapters.get(identity)
            if adapter is not None:
                return adapter
            if self._closed:
                raise RegistryClosedException(identity)
            return self.register(identity, create())

    def bindings(self) -> dict[str, str]:
        """Requested identity -> identity of the adapter actually bound."""
        with self._lock:
            adapters = dict(self._adapters)
        return {identity: adapter.identity for identity, adapter in adapters.items()}

    async def aclose(self) -> None:
        """Close every distinct adapter once and drop all entries."""
        with self._lock:
            self._closed = True
            adapters = list({id(adapter): adapter for adapter in self._adapters.values()}.values())
            self._adapters.clear()

        for adapter in adapters:
            try:
                await adapter.aclose()
            except Exception as e:
                logger.warning(f"Failed to close storage adapter '{adapter.identity}': {e}")
