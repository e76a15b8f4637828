"""
Capability mapping from Gardena device categories to host archetypes.

The table below is the single source of truth for which remote command is
sent for a given local verb.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

from gardenbridge.shared.types import Archetype, DeviceCategory, PowerSource, Verb


@dataclass(frozen=True)
class CapabilityProfile:
    """Archetype, power source and verb table for one device category."""
    archetype: Archetype
    power_source: PowerSource
    command_map: Mapping[str, str] = field(default_factory=dict)

    @property
    def supported_verbs(self) -> frozenset:
        return frozenset(self.command_map)

    @property
    def is_read_only(self) -> bool:
        return not self.command_map


def _commands(on: str, off: str) -> Mapping[str, str]:
    return MappingProxyType({Verb.ON.value: on, Verb.OFF.value: off})


IRRIGATION_PROFILE = CapabilityProfile(
    archetype=Archetype.ON_OFF_OUTLET,
    power_source=PowerSource.WIRED,
    command_map=_commands("on", "off"),
)

SENSOR_PROFILE = CapabilityProfile(
    archetype=Archetype.CONTACT_SENSOR,
    power_source=PowerSource.BATTERY,
    command_map=MappingProxyType({}),
)

VALVE_PROFILE = CapabilityProfile(
    archetype=Archetype.ON_OFF_LIGHT,
    power_source=PowerSource.WIRED,
    command_map=_commands("open", "close"),
)

# Mowers and anything unrecognized are battery-powered outlets
DEFAULT_PROFILE = CapabilityProfile(
    archetype=Archetype.ON_OFF_OUTLET,
    power_source=PowerSource.BATTERY,
    command_map=_commands("start", "stop"),
)

CAPABILITY_TABLE: Mapping[DeviceCategory, CapabilityProfile] = MappingProxyType({
    DeviceCategory.IRRIGATION: IRRIGATION_PROFILE,
    DeviceCategory.SENSOR: SENSOR_PROFILE,
    DeviceCategory.VALVE: VALVE_PROFILE,
    DeviceCategory.MOWER: DEFAULT_PROFILE,
})


def map_category(category: Union[DeviceCategory, str, None]) -> CapabilityProfile:
    """Map a device category (enum or raw tag) to its capability profile."""
    return CAPABILITY_TABLE.get(DeviceCategory.parse(category), DEFAULT_PROFILE)
