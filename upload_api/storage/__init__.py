"""
Storage layer for the Upload API.
Resolves uploads to one of several storage adapters: local filesystem,
AWS S3, Aliyun OSS, OVH Object Storage or Imgur.
"""

from upload_api.storage.base import StorageAdapter
from upload_api.storage.capabilities import (
    ALIYUN,
    AWS_S3,
    IMGUR,
    LOCAL,
    OVH_SVFS,
    CapabilityProbe,
    detect_capabilities,
)
from upload_api.storage.factory import ADAPTER_FACTORIES, AdapterFactory
from upload_api.storage.registry import AdapterRegistry
from upload_api.storage.resolver import AdapterResolver, MisconfigurationPolicy
from upload_api.storage.settings_source import (
    AppSettingsSource,
    DictSettingsSource,
    MimeTypeBinding,
    SettingsSource,
)

__all__ = [
    "StorageAdapter",
    "LOCAL",
    "AWS_S3",
    "ALIYUN",
    "OVH_SVFS",
    "IMGUR",
    "CapabilityProbe",
    "detect_capabilities",
    "ADAPTER_FACTORIES",
    "AdapterFactory",
    "AdapterRegistry",
    "AdapterResolver",
    "MisconfigurationPolicy",
    "AppSettingsSource",
    "DictSettingsSource",
    "MimeTypeBinding",
    "SettingsSource",
]
