"""
Global pytest configuration and fixtures for GardenBridge tests.
"""
import pytest
from typing import Any, Dict

from gardenbridge.core.domain.config import PlatformConfig
from gardenbridge.core.domain.entities import RemoteDevice
from gardenbridge.core.platform import GardenPlatform
from gardenbridge.infrastructure.host import InMemoryHostBridge
from gardenbridge.infrastructure.remote import RemoteDeviceClient, SimulatedTransport
from gardenbridge.shared.types import DeviceCategory, DeviceID

DEFAULT_DEVICE_IDS = {"smart-irrigation-1", "soil-sensor-1", "water-valve-1", "smart-mower-1"}


@pytest.fixture
def platform_config() -> Dict[str, Any]:
    """Configuration as the host hands it to the plugin."""
    return {
        "name": "matterbridge-plugin-gardena",
        "type": "DynamicPlatform",
        "version": "1.0.0",
        "debug": False,
        "unregisterOnShutdown": False,
        "apiKey": "test-api-key-123456",
    }


@pytest.fixture
def host() -> InMemoryHostBridge:
    """Host bridge at the minimum supported version."""
    return InMemoryHostBridge(version="3.4.0")


@pytest.fixture
def transport() -> SimulatedTransport:
    """Simulated Gardena cloud serving the default catalog."""
    return SimulatedTransport()


@pytest.fixture
def client(transport: SimulatedTransport) -> RemoteDeviceClient:
    """Remote client without retry delays."""
    return RemoteDeviceClient(
        "test-api-key-123456",
        transport=transport,
        request_timeout=1.0,
        max_retries=2,
        retry_base_delay=0,
    )


@pytest.fixture
def client_factory(transport: SimulatedTransport):
    """Factory the platform uses to build fast clients on the shared transport."""
    def factory(config: PlatformConfig) -> RemoteDeviceClient:
        return RemoteDeviceClient(
            config.api_key,
            transport=transport,
            request_timeout=config.request_timeout,
            max_retries=1,
            retry_base_delay=0,
        )
    return factory


@pytest.fixture
def platform(host: InMemoryHostBridge, platform_config: Dict[str, Any], client_factory) -> GardenPlatform:
    """Platform that has not been started yet."""
    return GardenPlatform(host, platform_config, client_factory=client_factory)


@pytest.fixture
async def started_platform(platform: GardenPlatform) -> GardenPlatform:
    """Platform after a successful start."""
    await platform.on_start("pytest")
    return platform


@pytest.fixture
def sample_device() -> RemoteDevice:
    """A single irrigation controller."""
    return RemoteDevice(
        id=DeviceID("smart-irrigation-1"),
        name="Smart Irrigation Controller",
        type="IRRIGATION_CONTROLLER",
        category=DeviceCategory.IRRIGATION,
        value=0,
        connected=True,
    )
