"""
Gardena remote device client.

Owns the remote device catalog and performs fetch, control and push-update
handling against a RemoteTransport. Every remote-facing operation absorbs
its faults: a single unreachable device or a failing API must never abort
discovery of the others or crash the host process.
"""

import asyncio
import inspect
from typing import Any, Dict, List, Optional

import structlog

from gardenbridge.core.domain.config import (
    PlatformConfig, DEFAULT_REQUEST_TIMEOUT, DEFAULT_MAX_RETRIES
)
from gardenbridge.core.domain.entities import RemoteDevice, ACTIVE_VALUE, INACTIVE_VALUE
from gardenbridge.core.domain.repositories import DeviceCatalogRepository, UpdateHandler
from gardenbridge.infrastructure.remote.transport import RemoteTransport, SimulatedTransport
from gardenbridge.infrastructure.resilience import ResilientClient, RetryConfig
from gardenbridge.shared.contracts import non_empty_string
from gardenbridge.shared.exceptions import ConfigurationError
from gardenbridge.shared.types import DeviceID, DeviceValue

logger = structlog.get_logger(__name__)

ACTIVATING_COMMANDS = frozenset({"on", "start"})
DEACTIVATING_COMMANDS = frozenset({"off", "stop"})


class RemoteDeviceClient(DeviceCatalogRepository):
    """API client for the Gardena Smart System."""

    def __init__(
        self,
        api_key: Optional[str],
        transport: Optional[RemoteTransport] = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_base_delay: float = 0.5,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gardena API key, sent as a bearer token
            transport: Wire implementation (simulated when omitted)
            request_timeout: Bound for each remote call attempt in seconds
            max_retries: Attempts per remote call
            retry_base_delay: Base backoff delay between attempts in seconds

        Raises:
            ConfigurationError: If the API key is empty or missing
        """
        if not api_key or not str(api_key).strip():
            raise ConfigurationError("Gardena API key is required in configuration")

        self._api_key = str(api_key).strip()
        self._transport: RemoteTransport = transport if transport is not None else SimulatedTransport()
        self._request_timeout = request_timeout
        self._devices: Dict[DeviceID, RemoteDevice] = {}
        self._handlers: List[UpdateHandler] = []
        self._channel_open = False
        self._resilience = ResilientClient(
            "gardena",
            RetryConfig(
                max_attempts=max_retries,
                base_delay=retry_base_delay,
                timeout_seconds=request_timeout,
            )
        )

    @classmethod
    def from_config(cls, config: PlatformConfig, transport: Optional[RemoteTransport] = None) -> "RemoteDeviceClient":
        return cls(
            config.api_key,
            transport=transport,
            request_timeout=config.request_timeout,
            max_retries=config.max_retries,
        )

    def __repr__(self) -> str:
        return f"RemoteDeviceClient(devices={len(self._devices)}, channel_open={self._channel_open})"

    @property
    def transport(self) -> RemoteTransport:
        return self._transport

    @property
    def channel_open(self) -> bool:
        return self._channel_open

    @property
    def _auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    async def fetch_devices(self) -> List[RemoteDevice]:
        """
        Fetch all devices and replace the catalog with them.

        Returns:
            The freshly cataloged devices, or an empty list on failure (the
            previous catalog is kept in that case)
        """
        try:
            logger.info("Fetching devices from Gardena API...")
            payloads = await self._resilience.execute(self._transport.list_devices, self._auth_headers)
        except Exception as e:
            logger.error("Error fetching devices", error=str(e), error_type=type(e).__name__)
            return []

        devices = []
        for payload in payloads:
            try:
                devices.append(RemoteDevice.from_payload(payload))
            except (KeyError, TypeError, ValueError) as e:
                logger.error(
                    "Skipping malformed device record",
                    device_id=payload.get("id") if isinstance(payload, dict) else None,
                    error=str(e),
                    error_type=type(e).__name__
                )

        self._devices = {device.id: device for device in devices}
        logger.info("Found devices", count=len(self._devices))
        return list(self._devices.values())

    def get_device(self, device_id: DeviceID) -> Optional[RemoteDevice]:
        return self._devices.get(device_id)

    def list_devices(self) -> List[RemoteDevice]:
        return list(self._devices.values())

    async def control_device(
        self,
        device_id: DeviceID,
        command: str,
        value: Optional[DeviceValue] = None
    ) -> bool:
        """
        Send a control command and update the cataloged state optimistically.

        Args:
            device_id: Target device
            command: Remote command ("on", "off", "open", "start", ...)
            value: Optional command argument

        Returns:
            True if the command was accepted by the remote side
        """
        logger.info("Controlling device", device_id=device_id, command=command)

        device = self._devices.get(device_id)
        if device is None:
            logger.error("Device not found", device_id=device_id)
            return False

        if not non_empty_string(command):
            logger.error("Empty command ignored", device_id=device_id)
            return False

        try:
            await self._resilience.execute(
                self._transport.send_command, device_id, command, value, self._auth_headers
            )
        except Exception as e:
            logger.error(
                "Error controlling device",
                device_id=device_id,
                command=command,
                error=str(e),
                error_type=type(e).__name__
            )
            return False

        if command in ACTIVATING_COMMANDS:
            device.value = ACTIVE_VALUE
        elif command in DEACTIVATING_COMMANDS:
            device.value = INACTIVE_VALUE

        logger.info("Device controlled successfully", device_id=device_id, command=command)
        return True

    async def subscribe_to_updates(self, handler: UpdateHandler) -> bool:
        """
        Open the push channel on first use and register a handler on it.

        A handler is kept only while the channel is open; registering the
        same handler twice has no effect.

        Returns:
            True if the push channel is open, False when running poll-only
        """
        if self._channel_open:
            self._add_handler(handler)
            return True

        try:
            logger.info("Connecting to Gardena WebSocket...")
            await asyncio.wait_for(
                self._transport.open_channel(self.handle_push_update, self._auth_headers),
                timeout=self._request_timeout
            )
        except Exception as e:
            logger.error(
                "WebSocket connection error, continuing without push updates",
                error=str(e) or type(e).__name__
            )
            return False

        self._channel_open = True
        self._add_handler(handler)
        logger.info("WebSocket connection established")
        return True

    def _add_handler(self, handler: UpdateHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    async def handle_push_update(self, device_id: str, payload: Dict[str, Any]) -> None:
        """Apply a pushed state change to the catalog and notify handlers."""
        device = self._devices.get(DeviceID(device_id))
        if device is None:
            logger.warning("Push update for unknown device ignored", device_id=device_id)
            return

        try:
            device.apply_update(payload)
        except (ValueError, TypeError) as e:
            logger.error("Invalid push update", device_id=device_id, error=str(e))
            return

        for handler in list(self._handlers):
            try:
                result = handler(device.id, dict(payload))
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error("Update handler failed", device_id=device_id, error=str(e))

    async def close(self) -> None:
        """Close the push channel and drop all handlers."""
        self._handlers.clear()
        if not self._channel_open:
            return
        self._channel_open = False
        try:
            await self._transport.close()
        except Exception as e:
            logger.warning("Error closing Gardena transport", error=str(e))
