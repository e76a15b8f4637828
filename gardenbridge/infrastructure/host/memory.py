"""
In-memory host bridge.

Keeps registered representations in a dictionary and exposes call counters,
so the platform can run without a Matter stack (development server, tests).
"""

import asyncio
from typing import Dict, List, Optional, Set

import structlog

from gardenbridge.core.domain.entities import LocalRepresentation
from gardenbridge.infrastructure.host.interfaces import version_at_least
from gardenbridge.shared.exceptions import HostRejectionError

logger = structlog.get_logger(__name__)

DEFAULT_VENDOR_ID = 0xFFF1


class InMemoryHostBridge:
    """Host bridge that activates representations in process memory."""

    def __init__(
        self,
        version: str = "3.4.0",
        aggregator_vendor_id: int = DEFAULT_VENDOR_ID,
        ready: bool = True,
        plugin_name: str = "matterbridge-plugin-gardena",
    ):
        self.version = version
        self.aggregator_vendor_id = aggregator_vendor_id
        self.plugin_name = plugin_name
        self.devices: Dict[str, LocalRepresentation] = {}
        self.rejected_ids: Set[str] = set()
        self.register_calls = 0
        self.unregister_calls = 0
        self.unregister_all_calls = 0
        self._ready_event = asyncio.Event()
        if ready:
            self._ready_event.set()

    @property
    def ready(self):
        return self._ready_event.wait()

    def mark_ready(self) -> None:
        self._ready_event.set()

    def verify_version(self, minimum: str) -> bool:
        return version_at_least(self.version, minimum)

    def get_device(self, unique_id: str) -> Optional[LocalRepresentation]:
        return self.devices.get(unique_id)

    def list_devices(self) -> List[LocalRepresentation]:
        return list(self.devices.values())

    async def register_device(self, representation: LocalRepresentation) -> None:
        self.register_calls += 1
        unique_id = representation.unique_id
        if unique_id in self.rejected_ids:
            raise HostRejectionError(unique_id, reason="rejected by host")
        if unique_id in self.devices:
            raise HostRejectionError(unique_id, reason="already registered")
        self.devices[unique_id] = representation
        logger.debug("Bridged device added", plugin=self.plugin_name, device_id=unique_id)

    async def unregister_device(self, representation: LocalRepresentation) -> None:
        self.unregister_calls += 1
        self.devices.pop(representation.unique_id, None)
        logger.debug("Bridged device removed", plugin=self.plugin_name, device_id=representation.unique_id)

    async def unregister_all_devices(self) -> None:
        self.unregister_all_calls += 1
        count = len(self.devices)
        self.devices.clear()
        logger.debug("All bridged devices removed", plugin=self.plugin_name, count=count)
