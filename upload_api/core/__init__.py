"""Core utilities and exceptions for the Upload API."""

from upload_api.core.exceptions import (
    UploadAPIException,
    ValidationException,
    PayloadTooLargeException,
    StorageException,
    CapabilityUnavailable,
    ConfigurationError,
    NoCapableBackend,
    RegistryClosedException,
)

__all__ = [
    "UploadAPIException",
    "ValidationException",
    "PayloadTooLargeException",
    "StorageException",
    "CapabilityUnavailable",
    "ConfigurationError",
    "NoCapableBackend",
    "RegistryClosedException",
]
