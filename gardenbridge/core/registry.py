"""
Device registry for GardenBridge.

Maps remote device identifiers to the local representations registered with
the host bridge. The registry is rebuilt on every discovery pass, never
reconciled incrementally.
"""

from typing import Any, Dict, Iterator, List, Optional

import structlog

from gardenbridge.core.capabilities import map_category
from gardenbridge.core.domain.entities import BasicInformation, LocalRepresentation, RemoteDevice
from gardenbridge.core.domain.repositories import DeviceCatalogRepository
from gardenbridge.infrastructure.host.interfaces import HostBridge
from gardenbridge.shared.types import DeviceID

logger = structlog.get_logger(__name__)


async def execute_command(
    representation: LocalRepresentation,
    verb: str,
    data: Optional[Dict[str, Any]] = None
) -> bool:
    """
    Dispatch a host verb to the remote client through the representation's
    command table.

    Returns:
        True if the remote command was sent
    """
    command = representation.remote_command_for(verb)
    if command is None:
        logger.warning(
            "Unsupported command for device",
            device_id=representation.remote_id,
            verb=verb,
            archetype=representation.archetype.value
        )
        return False

    if representation.client is None:
        logger.warning("Gardena API not initialized, command dropped", device_id=representation.remote_id, verb=verb)
        return False

    logger.info(
        "Executing command",
        device=representation.basic_information.name,
        verb=verb,
        command=command
    )
    value = (data or {}).get("value")
    return await representation.client.control_device(representation.remote_id, command, value)


class DeviceRegistry:
    """Owned mapping from remote device id to local representation."""

    def __init__(self, host: HostBridge):
        self._host = host
        self._representations: Dict[DeviceID, LocalRepresentation] = {}

    def __len__(self) -> int:
        return len(self._representations)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._representations

    def __iter__(self) -> Iterator[LocalRepresentation]:
        return iter(list(self._representations.values()))

    def get(self, device_id: DeviceID) -> Optional[LocalRepresentation]:
        return self._representations.get(device_id)

    def ids(self) -> List[DeviceID]:
        return list(self._representations)

    def values(self) -> List[LocalRepresentation]:
        return list(self._representations.values())

    async def clear(self) -> None:
        """Unregister every representation from the host and forget it."""
        for representation in list(self._representations.values()):
            try:
                await self._host.unregister_device(representation)
            except Exception as e:
                logger.error(
                    "Error unregistering device",
                    device_id=representation.remote_id,
                    error=str(e)
                )
        self._representations.clear()

    def forget_all(self) -> None:
        """Drop local bookkeeping without touching the host."""
        self._representations.clear()

    def build_representation(self, device: RemoteDevice, client: Optional[DeviceCatalogRepository]) -> LocalRepresentation:
        profile = map_category(device.category)
        return LocalRepresentation(
            remote_id=device.id,
            archetype=profile.archetype,
            power_source=profile.power_source,
            basic_information=BasicInformation.for_device(device, self._host.aggregator_vendor_id),
            command_map=dict(profile.command_map),
            client=client,
            device_type=device.type,
        )

    async def register(self, device: RemoteDevice, client: Optional[DeviceCatalogRepository]) -> bool:
        """
        Build, activate and store the representation for ``device``.

        Returns:
            True if the host accepted the representation
        """
        try:
            representation = self.build_representation(device, client)
            await self._host.register_device(representation)
        except Exception as e:
            logger.error(
                "Error registering device",
                device=device.name,
                device_id=device.id,
                error=str(e),
                error_type=type(e).__name__
            )
            return False

        self._representations[device.id] = representation
        logger.info(
            "Registered Gardena device",
            device=device.name,
            device_type=device.type,
            archetype=representation.archetype.value
        )
        return True

    async def dispatch(self, device_id: DeviceID, verb: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """Execute ``verb`` on the representation registered for ``device_id``."""
        representation = self._representations.get(device_id)
        if representation is None:
            logger.warning("Command for unregistered device", device_id=device_id, verb=verb)
            return False
        return await execute_command(representation, verb, data)
