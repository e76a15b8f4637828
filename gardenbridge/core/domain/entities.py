"""
Domain entities for GardenBridge.

These represent the remote devices reported by the Gardena cloud and the
local representations registered with the host bridge for them.
"""

from typing import Optional, Dict, Any, Mapping, TYPE_CHECKING
from dataclasses import dataclass, field

from gardenbridge.shared.contracts import non_empty_string, valid_battery_level
from gardenbridge.shared.types import (
    DeviceID, DeviceCategory, DeviceValue, BatteryPercent,
    Archetype, PowerSource
)

if TYPE_CHECKING:
    from gardenbridge.core.domain.repositories import DeviceCatalogRepository

VENDOR_NAME = "Gardena"
HARDWARE_VERSION = 10000
SOFTWARE_VERSION = "1.0.0"

ACTIVE_VALUE = 1
INACTIVE_VALUE = 0


@dataclass
class RemoteDevice:
    """A device as last reported by the Gardena cloud."""
    id: DeviceID
    name: str
    type: str
    category: DeviceCategory
    value: Optional[DeviceValue] = None
    battery_level: Optional[BatteryPercent] = None
    connected: bool = True

    def __post_init__(self):
        if not non_empty_string(self.id):
            raise ValueError("Device id cannot be empty")
        if not self.name.strip():
            raise ValueError("Device name cannot be empty")
        self.category = DeviceCategory.parse(self.category)
        if self.battery_level is not None and not valid_battery_level(self.battery_level):
            raise ValueError("Battery level must be between 0 and 100")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'RemoteDevice':
        """Build a device from a wire payload (camelCase keys)."""
        return cls(
            id=DeviceID(str(payload["id"])),
            name=str(payload.get("name") or payload["id"]),
            type=str(payload.get("type", "UNKNOWN")),
            category=DeviceCategory.parse(payload.get("category")),
            value=payload.get("value"),
            battery_level=payload.get("batteryLevel"),
            connected=bool(payload.get("connected", True)),
        )

    def apply_update(self, payload: Mapping[str, Any]) -> 'RemoteDevice':
        """Apply a push-update payload in place."""
        if "value" in payload:
            self.value = payload["value"]
        if payload.get("batteryLevel") is not None:
            level = payload["batteryLevel"]
            if not valid_battery_level(level):
                raise ValueError("Battery level must be between 0 and 100")
            self.battery_level = BatteryPercent(level)
        if "connected" in payload:
            self.connected = bool(payload["connected"])
        if payload.get("name"):
            self.name = str(payload["name"])
        return self

    @property
    def is_active(self) -> bool:
        return self.value == ACTIVE_VALUE


@dataclass(frozen=True)
class BasicInformation:
    """Bridged basic information sub-record."""
    name: str
    serial_number: str
    vendor_id: int
    vendor_name: str = VENDOR_NAME
    product_name: str = ""
    hardware_version: int = HARDWARE_VERSION
    software_version: str = SOFTWARE_VERSION

    @classmethod
    def for_device(cls, device: RemoteDevice, vendor_id: int) -> 'BasicInformation':
        return cls(
            name=device.name,
            serial_number=f"SN-{device.id}",
            vendor_id=vendor_id,
            product_name=device.name,
        )


@dataclass
class LocalRepresentation:
    """
    The object registered with the host bridge for one remote device.

    Commands are dispatched through ``command_map`` (local verb to remote
    command) against ``client``; the representation never owns the client.
    """
    remote_id: DeviceID
    archetype: Archetype
    power_source: PowerSource
    basic_information: BasicInformation
    command_map: Dict[str, str] = field(default_factory=dict)
    client: Optional['DeviceCatalogRepository'] = field(default=None, repr=False, compare=False)
    device_type: str = ""

    @property
    def unique_id(self) -> str:
        return self.remote_id

    @property
    def supported_verbs(self) -> frozenset:
        return frozenset(self.command_map)

    def remote_command_for(self, verb: str) -> Optional[str]:
        return self.command_map.get(verb)

    def has_command_handler(self, verb: str) -> bool:
        return verb in self.command_map

    async def execute_command_handler(self, verb: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """Invoke the handler the host calls when it receives ``verb``."""
        from gardenbridge.core.registry import execute_command
        return await execute_command(self, verb, data)
