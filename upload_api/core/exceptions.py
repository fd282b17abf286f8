"""
Custom exceptions for the Upload API.
"""

from typing import Any


class UploadAPIException(Exception):
    """Base exception for all Upload API errors."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary."""
        response = {
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ValidationException(UploadAPIException):
    """400 - Malformed request (empty file, missing parameters)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="validation_failed",
            message=message,
            status_code=400,
            details=details,
        )


class PayloadTooLargeException(UploadAPIException):
    """413 - Upload size exceeds limit."""

    def __init__(self, max_size: int):
        max_size_mb = max_size / (1024 * 1024)
        super().__init__(
            error="payload_too_large",
            message=f"Maximum upload size exceeded ({max_size_mb:.0f}MB limit)",
            status_code=413,
        )


class StorageException(UploadAPIException):
    """500 - Storage backend error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="storage_error",
            message=message,
            status_code=500,
            details=details,
        )


class CapabilityUnavailable(UploadAPIException):
    """
    Backend client library is not installed.

    Only used inside the resolver to move on to the next candidate;
    never returned to a caller.
    """

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(
            error="capability_unavailable",
            message=f"Storage adapter '{identity}' is not available in this environment",
            status_code=503,
            details={"adapter": identity},
        )


class ConfigurationError(UploadAPIException):
    """500 - Required setting missing, empty or rejected by a storage adapter's client."""

    def __init__(
        self,
        identity: str,
        missing: list[str] | None = None,
        invalid: dict[str, str] | None = None,
    ):
        self.identity = identity
        self.missing = missing or []
        self.invalid = invalid or {}

        problems = []
        if self.missing:
            problems.append(f"missing required settings: {', '.join(self.missing)}")
        if self.invalid:
            problems.append(f"invalid settings: {', '.join(self.invalid)}")

        details: dict[str, Any] = {"adapter": identity}
        if self.missing:
            details["missing"] = self.missing
        if self.invalid:
            details["invalid"] = self.invalid

        super().__init__(
            error="configuration_error",
            message=f"Storage adapter '{identity}' has {'; '.join(problems)}",
            status_code=500,
            details=details,
        )


class RegistryClosedException(UploadAPIException):
    """503 - Adapter registry was closed at shutdown."""

    def __init__(self, identity: str):
        super().__init__(
            error="service_unavailable",
            message=f"Cannot bind storage adapter '{identity}': adapter registry is closed",
            status_code=503,
            details={"adapter": identity},
        )


class NoCapableBackend(UploadAPIException):
    """503 - Every candidate adapter failed, uploads cannot proceed."""

    def __init__(self, identity: str, attempted: list[str]):
        self.identity = identity
        self.attempted = attempted
        super().__init__(
            error="no_capable_backend",
            message=f"No storage adapter could be constructed for '{identity}'",
            status_code=503,
            details={"requested": identity, "attempted": attempted},
        )
