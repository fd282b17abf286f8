"""
Storage adapter factories.
One builder per adapter identity; each reads only its own settings.

Builders never touch the network: they instantiate the vendor client and
wrap it. Vendor modules are imported inside the builders so that a missing
optional SDK only matters when its adapter is actually requested.
"""

import re
from typing import Any, Callable

from upload_api.core.exceptions import ConfigurationError, StorageException
from upload_api.storage.base import StorageAdapter
from upload_api.storage.capabilities import ALIYUN, AWS_S3, IMGUR, LOCAL, OVH_SVFS
from upload_api.storage.settings_source import SettingsSource

AdapterFactory = Callable[[SettingsSource], StorageAdapter]

DEFAULT_LOCAL_PATH = "./storage/files"
DEFAULT_LOCAL_URL = "/storage"
DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_OVH_REGION = "BHS1"
DEFAULT_OVH_AUTH_URL = "https://auth.cloud.ovh.net/v2.0/"


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(settings: SettingsSource, identity: str, *keys: str) -> dict[str, Any]:
    """
    Read required settings for an adapter.

    Raises:
        ConfigurationError: Listing every key that is unset or blank
    """
    values = {key: settings.get(key) for key in keys}
    missing = [key for key, value in values.items() if _blank(value)]
    if missing:
        raise ConfigurationError(identity, missing)
    return {key: value.strip() if isinstance(value, str) else value for key, value in values.items()}


def _optional(settings: SettingsSource, key: str, default: Any = None) -> Any:
    value = settings.get(key)
    if _blank(value):
        return default
    return value.strip() if isinstance(value, str) else value


def build_local(settings: SettingsSource) -> StorageAdapter:
    from upload_api.storage.local import LocalStorageAdapter

    base_path = _optional(settings, "localStoragePath", DEFAULT_LOCAL_PATH)
    try:
        return LocalStorageAdapter(
            base_path=base_path,
            public_url=_optional(settings, "localPublicUrl", DEFAULT_LOCAL_URL),
        )
    except OSError as e:
        raise StorageException(
            message=f"Cannot prepare local storage directory: {str(e)}",
            details={"path": str(base_path)},
        )


def build_aws_s3(settings: SettingsSource) -> StorageAdapter:
    import boto3
    from botocore.config import Config
    from botocore.exceptions import BotoCoreError, InvalidRegionError

    from upload_api.storage.s3 import S3StorageAdapter

    values = _require(settings, AWS_S3, "awsS3Key", "awsS3Secret", "awsS3Bucket")
    region = _optional(settings, "awsS3Region", DEFAULT_AWS_REGION)
    endpoint_url = _optional(settings, "awsS3Endpoint")

    config = Config(
        signature_version="s3v4",
        retries={"max_attempts": 3, "mode": "standard"},
    )

    # botocore validates region and endpoint while building the client
    try:
        client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=values["awsS3Key"],
            aws_secret_access_key=values["awsS3Secret"],
            region_name=region,
            config=config,
        )
    except InvalidRegionError as e:
        raise ConfigurationError(AWS_S3, invalid={"awsS3Region": str(e)})
    except (BotoCoreError, ValueError) as e:
        raise ConfigurationError(AWS_S3, invalid={"awsS3Endpoint": str(e)})

    return S3StorageAdapter(
        client=client,
        bucket_name=values["awsS3Bucket"],
        region=region,
        endpoint_url=endpoint_url,
    )


def build_aliyun(settings: SettingsSource) -> StorageAdapter:
    import oss2

    from upload_api.storage.aliyun import AliyunOSSAdapter

    values = _require(settings, ALIYUN, "aliyunKeyId", "aliyunKeySecret", "aliyunEndpoint", "aliyunBucket")
    auth = oss2.Auth(values["aliyunKeyId"], values["aliyunKeySecret"])
    return AliyunOSSAdapter(oss2.Bucket(auth, values["aliyunEndpoint"], values["aliyunBucket"]))


def ovh_public_url(region: str, tenant_id: str, container: str) -> str:
    """Public container URL, e.g. storage.bhs.cloud.ovh.net for region BHS1."""
    location = re.sub(r"\d+$", "", region).lower()
    return f"https://storage.{location}.cloud.ovh.net/v1/AUTH_{tenant_id}/{container}"


def build_ovh(settings: SettingsSource) -> StorageAdapter:
    from swiftclient.client import Connection

    from upload_api.storage.ovh import OVHSwiftAdapter

    values = _require(settings, OVH_SVFS, "ovhUsername", "ovhPassword", "ovhTenantId", "ovhContainer")
    region = _optional(settings, "ovhRegion", DEFAULT_OVH_REGION)

    connection = Connection(
        authurl=_optional(settings, "ovhAuthUrl", DEFAULT_OVH_AUTH_URL),
        user=values["ovhUsername"],
        key=values["ovhPassword"],
        auth_version="2",
        os_options={
            "tenant_id": values["ovhTenantId"],
            "region_name": region,
        },
    )

    return OVHSwiftAdapter(
        connection=connection,
        container=values["ovhContainer"],
        public_url=ovh_public_url(region, values["ovhTenantId"], values["ovhContainer"]),
    )


def build_imgur(settings: SettingsSource) -> StorageAdapter:
    import httpx

    from upload_api.storage.imgur import IMGUR_API_URL, ImgurAdapter

    values = _require(settings, IMGUR, "imgurClientId")
    client = httpx.AsyncClient(
        base_url=IMGUR_API_URL,
        headers={"Authorization": f"Client-ID {values['imgurClientId']}"},
        timeout=30.0,
    )
    return ImgurAdapter(client)


ADAPTER_FACTORIES: dict[str, AdapterFactory] = {
    LOCAL: build_local,
    AWS_S3: build_aws_s3,
    ALIYUN: build_aliyun,
    OVH_SVFS: build_ovh,
    IMGUR: build_imgur,
}
