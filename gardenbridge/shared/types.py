"""
Type definitions for GardenBridge.

This module contains the custom type definitions shared by the remote
client, the capability mapper and the device registry.
"""

from typing import NewType, Union
from enum import Enum

# Domain-specific type aliases
DeviceID = NewType('DeviceID', str)
BatteryPercent = NewType('BatteryPercent', int)

# A device's current reading or mode: numeric level, textual state or flag
DeviceValue = Union[int, float, str, bool]


class DeviceCategory(str, Enum):
    """Categories of Gardena devices."""
    IRRIGATION = "irrigation"
    SENSOR = "sensor"
    VALVE = "valve"
    MOWER = "mower"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Union[str, "DeviceCategory", None]) -> "DeviceCategory":
        """Parse a raw category tag, falling back to UNKNOWN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Archetype(str, Enum):
    """Capability templates exposed to the host bridge."""
    ON_OFF_OUTLET = "on_off_outlet"
    ON_OFF_LIGHT = "on_off_light"
    CONTACT_SENSOR = "contact_sensor"


class PowerSource(str, Enum):
    """Power source sub-record attached to a local representation."""
    WIRED = "wired"
    BATTERY = "battery"


class Verb(str, Enum):
    """Local command verbs accepted from the host bridge."""
    ON = "on"
    OFF = "off"
