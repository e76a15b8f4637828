"""
Repository interfaces for GardenBridge domain entities.

These abstract interfaces define the contract for access to the remote
device catalog, enabling easy testing with fake catalogs and different
remote API implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from gardenbridge.core.domain.entities import RemoteDevice
from gardenbridge.shared.types import DeviceID, DeviceValue

UpdateHandler = Callable[[DeviceID, Dict[str, Any]], Union[None, Awaitable[None]]]


class DeviceCatalogRepository(ABC):
    """Repository interface for the remote device catalog."""

    @abstractmethod
    async def fetch_devices(self) -> List[RemoteDevice]:
        """Replace the catalog from the remote API. Returns [] on failure."""
        pass

    @abstractmethod
    def get_device(self, device_id: DeviceID) -> Optional[RemoteDevice]:
        """Retrieve a cataloged device by its ID."""
        pass

    @abstractmethod
    def list_devices(self) -> List[RemoteDevice]:
        """Retrieve all cataloged devices."""
        pass

    @abstractmethod
    async def control_device(
        self,
        device_id: DeviceID,
        command: str,
        value: Optional[DeviceValue] = None
    ) -> bool:
        """Send a control command. Returns True if the command was sent."""
        pass

    @abstractmethod
    async def subscribe_to_updates(self, handler: UpdateHandler) -> bool:
        """Register a push-update handler. Returns False in poll-only mode."""
        pass
