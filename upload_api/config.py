"""
Configuration management for the Upload API.
Uses pydantic-settings for environment-based configuration.
"""

from functools import lru_cache
from typing import Any, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Upload API"
    DEBUG: bool = False

    # Default adapter for uploads with no matching mime type binding
    UPLOAD_METHOD: str = "local"

    # Ordered mime type -> adapter bindings, e.g. {"image/*": "imgur", "*": "local"}.
    # Values may also be {"adapter": "<identity>"} mappings.
    MIME_TYPES: dict[str, Any] = {}

    # Extra candidates tried before local storage, e.g. {"aliyun": ["aws-s3"]}
    STORAGE_FALLBACKS: dict[str, list[str]] = {}

    # What to do when an installed backend is missing required settings
    ADAPTER_MISCONFIGURATION: Literal["fallback", "raise"] = "fallback"

    # Local Storage Settings
    LOCAL_STORAGE_PATH: str = "./storage/files"
    LOCAL_PUBLIC_URL: str = "/storage"

    # AWS S3 Settings
    AWS_S3_KEY: str | None = None
    AWS_S3_SECRET: str | None = None
    AWS_S3_BUCKET: str | None = None
    AWS_S3_REGION: str | None = None
    AWS_S3_ENDPOINT: str | None = None

    # Aliyun OSS Settings
    ALIYUN_KEY_ID: str | None = None
    ALIYUN_KEY_SECRET: str | None = None
    ALIYUN_ENDPOINT: str | None = None
    ALIYUN_BUCKET: str | None = None

    # OVH Object Storage (Swift) Settings
    OVH_USERNAME: str | None = None
    OVH_PASSWORD: str | None = None
    OVH_TENANT_ID: str | None = None
    OVH_CONTAINER: str | None = None
    OVH_REGION: str | None = None
    OVH_AUTH_URL: str | None = None

    # Imgur Settings
    IMGUR_CLIENT_ID: str | None = None

    # File Upload Limits
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50MB

    # Logging
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
