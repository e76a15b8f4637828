"""
Host bridge abstraction interfaces for GardenBridge.

This module defines the contract for interactions with the host bridging
runtime, enabling seamless switching between a real Matter bridge and the
in-memory bridge used for development and tests.
"""

from abc import abstractmethod
from typing import Awaitable, Protocol, Tuple

from gardenbridge.core.domain.entities import LocalRepresentation

MINIMUM_HOST_VERSION = "3.4.0"


class HostBridge(Protocol):
    """Protocol for host bridge implementations."""

    version: str
    aggregator_vendor_id: int

    @property
    @abstractmethod
    def ready(self) -> Awaitable[None]:
        """Awaitable that resolves once the host is ready for registrations."""
        ...

    @abstractmethod
    def verify_version(self, minimum: str) -> bool:
        """Check that the host runtime is at least ``minimum``."""
        ...

    @abstractmethod
    async def register_device(self, representation: LocalRepresentation) -> None:
        """Activate a representation in the bridge. Raises HostRejectionError."""
        ...

    @abstractmethod
    async def unregister_device(self, representation: LocalRepresentation) -> None:
        """Remove a single representation from the bridge."""
        ...

    @abstractmethod
    async def unregister_all_devices(self) -> None:
        """Remove every representation registered by this plugin."""
        ...


def parse_version(version: str) -> Tuple[int, ...]:
    """Parse a dotted version string, ignoring any pre-release suffix."""
    parts = []
    for chunk in str(version).strip().lstrip("v").split("."):
        digits = ""
        for char in chunk:
            if not char.isdigit():
                break
            digits += char
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


def version_at_least(current: str, minimum: str) -> bool:
    """Compare dotted versions component-wise."""
    current_parts = parse_version(current)
    minimum_parts = parse_version(minimum)
    width = max(len(current_parts), len(minimum_parts))
    current_parts += (0,) * (width - len(current_parts))
    minimum_parts += (0,) * (width - len(minimum_parts))
    return current_parts >= minimum_parts
