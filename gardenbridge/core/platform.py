"""
Gardena platform lifecycle controller.

Coordinates startup, configuration changes, log level changes, shutdown and
device (re)discovery. Every public entry point absorbs and logs its errors;
only the constructor's host version check is allowed to raise.
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

import structlog

from gardenbridge.core.base import DynamicPlatform
from gardenbridge.core.domain.config import PlatformConfig
from gardenbridge.infrastructure.host.interfaces import HostBridge, MINIMUM_HOST_VERSION
from gardenbridge.infrastructure.logging.config import redact_secret, set_log_level
from gardenbridge.infrastructure.remote.client import RemoteDeviceClient
from gardenbridge.shared.exceptions import VersionMismatchError
from gardenbridge.shared.types import DeviceID

logger = structlog.get_logger(__name__)

ClientFactory = Callable[[PlatformConfig], RemoteDeviceClient]


class LifecycleState(str, Enum):
    """States of the platform lifecycle."""
    UNINITIALIZED = "uninitialized"
    STARTING = "starting"
    READY = "ready"
    REINITIALIZING = "reinitializing"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class GardenPlatform(DynamicPlatform):
    """Dynamic platform bridging Gardena devices into the host."""

    def __init__(
        self,
        host: HostBridge,
        config: Union[PlatformConfig, Mapping[str, Any], None],
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize the platform.

        Args:
            host: Host bridge the devices are registered with
            config: Platform configuration (mapping or PlatformConfig)
            client_factory: Builds the remote client from the config

        Raises:
            VersionMismatchError: If the host is older than MINIMUM_HOST_VERSION
        """
        super().__init__(host, config)

        if not self.verify_host_version(MINIMUM_HOST_VERSION):
            raise VersionMismatchError(MINIMUM_HOST_VERSION, str(getattr(host, "version", "unknown")))

        self.client: Optional[RemoteDeviceClient] = None
        self._client_factory: ClientFactory = client_factory or RemoteDeviceClient.from_config
        self._state = LifecycleState.UNINITIALIZED
        self._lock = asyncio.Lock()

        logger.info("Initializing Gardena Platform...")

    @property
    def state(self) -> LifecycleState:
        return self._state

    async def on_start(self, reason: Optional[str] = None) -> None:
        async with self._lock:
            logger.info("Gardena Platform onStart called", reason=reason or "none")
            if self._state not in (LifecycleState.UNINITIALIZED, LifecycleState.STOPPED):
                # Transitions are serialized by the lock, so only READY can be seen here
                logger.info("Platform already started, rediscovering devices", state=self._state.value)
            self._state = LifecycleState.STARTING
            try:
                await self._initialize_client()
                await asyncio.wait_for(self.host.ready, timeout=self.config.ready_timeout)
                await self.registry.clear()
                await self._discover_devices()
            except Exception as e:
                logger.error("Error during onStart", error=str(e) or type(e).__name__, error_type=type(e).__name__)
            finally:
                self._state = LifecycleState.READY

    async def on_configure(self) -> None:
        async with self._lock:
            try:
                await super().on_configure()
                logger.info("Gardena Platform onConfigure called")
                for device in self.get_devices():
                    logger.info("Configuring device", device_id=device.unique_id)
            except Exception as e:
                logger.error("Error during onConfigure", error=str(e))

    async def on_config_changed(self, config: Union[PlatformConfig, Mapping[str, Any]]) -> None:
        """
        Merge a configuration update from the host UI.

        The remote client is re-initialized and devices rediscovered only when
        the API key changes. Before the first start the merged config is
        simply kept for the next start.
        """
        async with self._lock:
            logger.info("Configuration changed from UI")
            previous = self.config
            try:
                self.config = previous.merged(config)
            except ValueError as e:
                logger.error("Invalid configuration update ignored", error=str(e))
                return

            if self.config.api_key == previous.api_key:
                return
            if self._state != LifecycleState.READY:
                logger.info("API key updated before start, applying on next start", state=self._state.value)
                return

            self._state = LifecycleState.REINITIALIZING
            try:
                logger.info("API key updated, reinitializing Gardena API...")
                await self._initialize_client()
                await self.registry.clear()
                await self._discover_devices()
            except Exception as e:
                logger.error("Error during onConfigChanged", error=str(e), error_type=type(e).__name__)
            finally:
                self._state = LifecycleState.READY

    async def on_change_log_level(self, level: Union[str, int]) -> None:
        logger.info("onChangeLoggerLevel called", level=str(level))
        try:
            set_log_level(level)
        except Exception as e:
            logger.error("Error changing log level", level=str(level), error=str(e))

    async def on_shutdown(self, reason: Optional[str] = None) -> None:
        async with self._lock:
            try:
                await super().on_shutdown(reason)
            except Exception as e:
                logger.error("Error in base shutdown hook", error=str(e))

            logger.info("Gardena Platform onShutdown called", reason=reason or "none")
            self._state = LifecycleState.SHUTTING_DOWN
            try:
                if self.config.unregister_on_shutdown:
                    await self.host.unregister_all_devices()
                    self.registry.forget_all()
                    logger.info("Unregistered all Gardena devices")
                if self.client is not None:
                    await self.client.close()
            except Exception as e:
                logger.error("Error during onShutdown", error=str(e), error_type=type(e).__name__)
            finally:
                self._state = LifecycleState.STOPPED

    def get_status(self) -> Dict[str, Any]:
        """Lifecycle and discovery summary."""
        return {
            "state": self._state.value,
            "api_configured": self.config.has_api_key,
            "client_initialized": self.client is not None,
            "push_channel_open": bool(self.client and self.client.channel_open),
            "device_count": len(self.registry),
            "host_version": str(getattr(self.host, "version", "unknown")),
        }

    async def _initialize_client(self) -> None:
        if self.client is not None:
            await self.client.close()
            self.client = None

        if not self.config.has_api_key:
            logger.warning("No Gardena API key configured")
            return

        try:
            redact_secret(self.config.api_key)
            self.client = self._client_factory(self.config)
            await self.client.subscribe_to_updates(self._on_device_update)
        except Exception as e:
            logger.error("Error initializing Gardena API", error=str(e), error_type=type(e).__name__)

    async def _discover_devices(self) -> int:
        logger.info("Discovering Gardena devices...")

        if self.client is None:
            logger.warning("Gardena API not initialized, skipping discovery")
            return 0

        devices = await self.client.fetch_devices()
        registered = 0
        for device in devices:
            if await self.registry.register(device, self.client):
                registered += 1

        logger.info("Registered Gardena devices", registered=registered, discovered=len(devices))
        return registered

    def _on_device_update(self, device_id: DeviceID, payload: Dict[str, Any]) -> None:
        logger.debug("Device updated", device_id=device_id, fields=sorted(payload))


def initialize_plugin(
    host: HostBridge,
    config: Union[PlatformConfig, Mapping[str, Any], None],
) -> GardenPlatform:
    """Plugin entry point called by the host."""
    return GardenPlatform(host, config)
