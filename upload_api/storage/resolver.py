"""
Storage adapter resolution.

Turns a requested adapter identity (or an upload's mime type) into a ready
adapter. A request walks a candidate chain: the requested identity, its
configured fallbacks, then local storage. The first candidate whose client
library is installed and whose factory succeeds wins; the result is cached
in the registry under both the requested and the resolved identity.

Cascade policy: a missing client library always moves on to the next
candidate. A candidate that is installed but missing required settings
moves on as well under the ``fallback`` policy, or raises
:class:`ConfigurationError` under the ``raise`` policy.
"""

import logging
from enum import Enum
from typing import Mapping, Sequence

from upload_api.core.exceptions import (
    CapabilityUnavailable,
    ConfigurationError,
    NoCapableBackend,
    StorageException,
)
from upload_api.storage.base import StorageAdapter
from upload_api.storage.capabilities import LOCAL, CapabilityProbe
from upload_api.storage.factory import ADAPTER_FACTORIES, AdapterFactory
from upload_api.storage.registry import AdapterRegistry
from upload_api.storage.settings_source import MimeTypeBinding, SettingsSource

logger = logging.getLogger(__name__)


class MisconfigurationPolicy(str, Enum):
    """How the resolver treats an installed adapter with incomplete settings."""

    FALLBACK = "fallback"
    RAISE = "raise"


class AdapterResolver:
    """
    Resolves adapter identities and mime types to storage adapters.

    Args:
        settings: Source of adapter settings and mime type bindings
        registry: Shared adapter cache
        probe: Capability table for optional adapters
        factories: Identity -> adapter builder
        fallbacks: Identity -> candidates tried before local storage.
            Defaults to the ``storageFallbacks`` setting.
        default_identity: Adapter for mime types with no binding.
            Defaults to the ``uploadMethod`` setting.
        on_misconfiguration: Defaults to the ``adapterMisconfiguration`` setting.
    """

    def __init__(
        self,
        settings: SettingsSource,
        registry: AdapterRegistry,
        probe: CapabilityProbe,
        factories: Mapping[str, AdapterFactory] = ADAPTER_FACTORIES,
        fallbacks: Mapping[str, Sequence[str]] | None = None,
        default_identity: str | None = None,
        on_misconfiguration: MisconfigurationPolicy | str | None = None,
    ):
        self.settings = settings
        self.registry = registry
        self.probe = probe
        self.factories = dict(factories)
        if fallbacks is None:
            fallbacks = settings.get("storageFallbacks", {})
        self.fallbacks = {identity: list(chain) for identity, chain in fallbacks.items()}
        self.default_identity = (default_identity or settings.get("uploadMethod") or LOCAL).strip()
        self.on_misconfiguration = MisconfigurationPolicy(
            on_misconfiguration or settings.get("adapterMisconfiguration", MisconfigurationPolicy.FALLBACK)
        )
        self._bindings: list[MimeTypeBinding] = settings.mime_type_bindings()

    @property
    def bindings(self) -> list[MimeTypeBinding]:
        return list(self._bindings)

    def candidate_chain(self, identity: str) -> list[str]:
        """Ordered, duplicate-free candidates for ``identity``, ending with local."""
        chain: list[str] = []
        for candidate in [identity, *self.fallbacks.get(identity, []), LOCAL]:
            if candidate not in chain:
                chain.append(candidate)
        return chain

    def resolve(self, identity: str) -> StorageAdapter:
        """
        Get the adapter for a requested identity, constructing it on first use.

        Repeated calls with the same identity return the same instance.

        Raises:
            ConfigurationError: Only under the ``raise`` misconfiguration policy
            NoCapableBackend: If no candidate, local storage included, could be built
        """
        identity = identity.strip()
        return self.registry.get_or_create(identity, lambda: self._resolve_chain(identity))

    def identity_for_mime_type(self, mime_type: str | None) -> str:
        """
        Adapter identity bound to a mime type.

        Exact bindings win over patterns; patterns are tried in configured
        order; anything unmatched goes to the default identity.
        """
        normalized = (mime_type or "").split(";", 1)[0].strip().lower()

        for binding in self._bindings:
            if not binding.is_pattern and binding.matches(normalized):
                return binding.adapter

        for binding in self._bindings:
            if binding.is_pattern and binding.matches(normalized):
                return binding.adapter

        return self.default_identity

    def resolve_for_mime_type(self, mime_type: str | None) -> StorageAdapter:
        """Get the adapter that stores uploads of the given mime type."""
        return self.resolve(self.identity_for_mime_type(mime_type))

    def bind_all(self) -> dict[str, str]:
        """
        Resolve the default identity and every identity used by a mime type binding.

        Returns:
            Requested identity -> identity of the adapter it resolved to
        """
        identities = [self.default_identity] + [binding.adapter for binding in self._bindings]
        resolved: dict[str, str] = {}
        for identity in identities:
            if identity in resolved:
                continue
            if identity in self.registry:
                logger.debug(f"Storage adapter '{identity}' already bound")
            resolved[identity] = self.resolve(identity).identity
        return resolved

    def _resolve_chain(self, requested: str) -> StorageAdapter:
        chain = self.candidate_chain(requested)

        for candidate in chain:
            adapter = self.registry.get(candidate)
            if adapter is None:
                adapter = self._build(candidate)
                if adapter is None:
                    continue
                adapter = self.registry.register(candidate, adapter)

            if candidate != requested:
                logger.info(f"Storage adapter '{requested}' unavailable, using '{candidate}'")
            return adapter

        raise NoCapableBackend(requested, chain)

    def _build(self, identity: str) -> StorageAdapter | None:
        """Construct one candidate, or None when it cannot be used."""
        try:
            factory = self.factories.get(identity)
            if factory is None or not self.probe.probe(identity):
                raise CapabilityUnavailable(identity)
            adapter = factory(self.settings)
        except (CapabilityUnavailable, ImportError) as e:
            logger.info(f"Skipping storage adapter '{identity}': {e}")
            return None
        except ConfigurationError as e:
            if self.on_misconfiguration is MisconfigurationPolicy.RAISE:
                raise
            logger.warning(f"Skipping storage adapter '{identity}': {e.message}")
            return None
        except StorageException as e:
            logger.error(f"Failed to construct storage adapter '{identity}': {e.message}")
            return None

        logger.info(f"Constructed storage adapter '{identity}'")
        return adapter
