"""
Base class for dynamic bridge platforms.

Holds the host, the platform configuration and the device registry, and
provides the default lifecycle hooks that concrete platforms extend.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Union

import structlog

from gardenbridge.core.domain.config import PlatformConfig
from gardenbridge.core.domain.entities import LocalRepresentation
from gardenbridge.core.registry import DeviceRegistry
from gardenbridge.infrastructure.host.interfaces import HostBridge, version_at_least

logger = structlog.get_logger(__name__)


class DynamicPlatform(ABC):
    """Abstract base class for platforms that register devices dynamically."""

    def __init__(self, host: HostBridge, config: Union[PlatformConfig, Mapping[str, Any], None]):
        """Initialize the platform with its host and configuration."""
        self.host = host
        self.config = PlatformConfig.from_mapping(config)
        self.registry = DeviceRegistry(host)

    def verify_host_version(self, minimum: str) -> bool:
        """Check the host runtime against ``minimum``."""
        verify = getattr(self.host, "verify_version", None)
        if callable(verify):
            return bool(verify(minimum))
        return version_at_least(getattr(self.host, "version", "0"), minimum)

    def get_devices(self) -> List[LocalRepresentation]:
        """Local representations currently registered by this platform."""
        return self.registry.values()

    @abstractmethod
    async def on_start(self, reason: Optional[str] = None) -> None:
        ...

    async def on_configure(self) -> None:
        logger.debug("Platform configure hook", platform=self.config.name)

    async def on_shutdown(self, reason: Optional[str] = None) -> None:
        logger.debug("Platform shutdown hook", platform=self.config.name, reason=reason or "none")
