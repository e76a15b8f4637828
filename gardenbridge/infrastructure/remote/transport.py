"""
Transport interfaces for the Gardena cloud.

This module defines the contract for the wire side of the remote client,
enabling seamless switching between the real Gardena REST/WebSocket API and
the simulated transport used in development and tests.
"""

import asyncio
import copy
from abc import abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Set, Tuple

import structlog

from gardenbridge.infrastructure.remote.fixtures import DEFAULT_DEVICES
from gardenbridge.shared.exceptions import RemoteFault

logger = structlog.get_logger(__name__)

API_BASE_URL = "https://api.gardena.com/v1"
WEBSOCKET_URL = "wss://api.gardena.com/v1/websocket"

ChannelCallback = Callable[[str, Dict[str, Any]], Awaitable[None]]


class RemoteTransport(Protocol):
    """Protocol for Gardena wire implementations."""

    @abstractmethod
    async def list_devices(self, headers: Mapping[str, str]) -> List[Dict[str, Any]]:
        """Return the raw device listing."""
        ...

    @abstractmethod
    async def send_command(
        self,
        device_id: str,
        command: str,
        value: Any,
        headers: Mapping[str, str]
    ) -> Dict[str, Any]:
        """Post a control command for a device."""
        ...

    @abstractmethod
    async def open_channel(self, on_message: ChannelCallback, headers: Mapping[str, str]) -> None:
        """Open the push channel; ``on_message`` receives (device_id, payload)."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the push channel and release connections."""
        ...


class SimulatedTransport:
    """In-process stand-in for the Gardena cloud.

    Serves a copy of DEFAULT_DEVICES, records every command it receives and
    lets tests inject faults or latency.
    """

    def __init__(
        self,
        devices: Optional[List[Dict[str, Any]]] = None,
        latency_seconds: float = 0.0,
    ):
        self.devices: List[Dict[str, Any]] = copy.deepcopy(devices if devices is not None else DEFAULT_DEVICES)
        self.latency_seconds = latency_seconds
        self.listing_error: Optional[Exception] = None
        self.channel_error: Optional[Exception] = None
        self.failing_devices: Set[str] = set()
        self.sent_commands: List[Tuple[str, str, Any]] = []
        self.list_calls = 0
        self.last_headers: Dict[str, str] = {}
        self._on_message: Optional[ChannelCallback] = None

    @property
    def channel_open(self) -> bool:
        return self._on_message is not None

    async def _delay(self) -> None:
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)

    async def list_devices(self, headers: Mapping[str, str]) -> List[Dict[str, Any]]:
        self.list_calls += 1
        self.last_headers = dict(headers)
        await self._delay()
        if self.listing_error is not None:
            raise self.listing_error
        return copy.deepcopy(self.devices)

    async def send_command(
        self,
        device_id: str,
        command: str,
        value: Any,
        headers: Mapping[str, str]
    ) -> Dict[str, Any]:
        self.last_headers = dict(headers)
        await self._delay()
        if device_id in self.failing_devices:
            raise RemoteFault(
                f"Device unreachable: {device_id}",
                device_id=device_id,
                endpoint=f"{API_BASE_URL}/devices/{device_id}/control"
            )
        if not any(d["id"] == device_id for d in self.devices):
            raise RemoteFault(f"Unknown device: {device_id}", device_id=device_id)
        self.sent_commands.append((device_id, command, value))
        return {"id": device_id, "command": command, "status": "accepted"}

    async def open_channel(self, on_message: ChannelCallback, headers: Mapping[str, str]) -> None:
        await self._delay()
        if self.channel_error is not None:
            raise self.channel_error
        self._on_message = on_message
        logger.debug("Simulated push channel opened", url=WEBSOCKET_URL)

    async def push(self, device_id: str, payload: Dict[str, Any]) -> None:
        """Deliver a state change as if the cloud had pushed it."""
        if self._on_message is None:
            raise RemoteFault("Push channel is not open", endpoint=WEBSOCKET_URL)
        await self._on_message(device_id, payload)

    async def close(self) -> None:
        self._on_message = None
