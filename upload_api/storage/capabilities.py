"""
Capability detection for optional storage adapters.

Each optional adapter depends on a vendor client library. Availability is
detected once at startup and recorded in a static table; the probe only
ever consults that table.
"""

import importlib
import logging
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

LOCAL = "local"
AWS_S3 = "aws-s3"
ALIYUN = "aliyun"
OVH_SVFS = "ovh-svfs"
IMGUR = "imgur"

# Client modules each adapter needs importable
ADAPTER_REQUIREMENTS: dict[str, tuple[str, ...]] = {
    LOCAL: ("aiofiles",),
    AWS_S3: ("boto3", "botocore"),
    ALIYUN: ("oss2",),
    OVH_SVFS: ("swiftclient",),
    IMGUR: ("httpx",),
}


def detect_capabilities(
    requirements: Mapping[str, Iterable[str]] = ADAPTER_REQUIREMENTS,
) -> dict[str, bool]:
    """
    Try importing every adapter's client modules.

    Returns:
        Dict mapping adapter identity to availability
    """
    table: dict[str, bool] = {}
    for identity, modules in requirements.items():
        try:
            for module in modules:
                importlib.import_module(module)
        except ImportError as e:
            logger.info(f"Storage adapter '{identity}' unavailable: {e}")
            table[identity] = False
        except Exception as e:
            logger.warning(f"Storage adapter '{identity}' failed to initialize: {e!r}")
            table[identity] = False
        else:
            logger.info(f"Storage adapter '{identity}' available")
            table[identity] = True
    return table


class CapabilityProbe:
    """
    Answers "can adapter X be constructed here" from a fixed table.

    Local storage has no optional dependency and is always capable;
    identities missing from the table are not.
    """

    def __init__(self, table: Mapping[str, bool]):
        self._table = dict(table)
        self._table[LOCAL] = True

    @classmethod
    def detect(cls) -> "CapabilityProbe":
        return cls(detect_capabilities())

    def probe(self, identity: str) -> bool:
        return self._table.get(identity, False)

    def as_dict(self) -> dict[str, bool]:
        return dict(self._table)
