"""
Device API routes.

Lists the representations registered with the host and lets an operator
dispatch local verbs through the same command table the host uses.
"""

from typing import Optional

from fastapi import APIRouter, Depends
import structlog

from gardenbridge.application.api.dependencies import get_platform
from gardenbridge.application.models import (
    CommandRequest,
    CommandResponse,
    DeviceListResponse,
    DeviceResponse,
)
from gardenbridge.core.platform import GardenPlatform
from gardenbridge.shared.exceptions import DeviceNotFoundError, RemoteFault, UnsupportedCommandError
from gardenbridge.shared.types import DeviceID

logger = structlog.get_logger(__name__)
router = APIRouter()


def _remote_state(platform: GardenPlatform, device_id: DeviceID):
    return platform.client.get_device(device_id) if platform.client else None


@router.get("/", response_model=DeviceListResponse)
async def list_devices(platform: GardenPlatform = Depends(get_platform)) -> DeviceListResponse:
    """List every registered device with its last known remote state."""
    devices = [
        DeviceResponse.from_domain(representation, _remote_state(platform, representation.remote_id))
        for representation in platform.get_devices()
    ]
    return DeviceListResponse(devices=devices, total=len(devices))


@router.get("/{device_id}", response_model=DeviceResponse)
async def get_device(device_id: str, platform: GardenPlatform = Depends(get_platform)) -> DeviceResponse:
    """
    Get a registered device.

    Raises:
        404: Device is not registered
    """
    representation = platform.registry.get(DeviceID(device_id))
    if representation is None:
        raise DeviceNotFoundError(device_id)
    return DeviceResponse.from_domain(representation, _remote_state(platform, representation.remote_id))


@router.post("/{device_id}/commands/{verb}", response_model=CommandResponse)
async def send_command(
    device_id: str,
    verb: str,
    request: Optional[CommandRequest] = None,
    platform: GardenPlatform = Depends(get_platform)
) -> CommandResponse:
    """
    Dispatch a local verb ("on"/"off") to a device.

    Raises:
        404: Device is not registered
        400: Verb not supported by the device archetype
        502: Remote API did not accept the command
    """
    representation = platform.registry.get(DeviceID(device_id))
    if representation is None:
        raise DeviceNotFoundError(device_id)
    if not representation.has_command_handler(verb):
        raise UnsupportedCommandError(device_id, verb)

    data = request.model_dump() if request else None
    sent = await platform.registry.dispatch(DeviceID(device_id), verb, data)
    if not sent:
        raise RemoteFault(f"Command '{verb}' was not accepted for device {device_id}", device_id=device_id)

    logger.info("Command dispatched via API", device_id=device_id, verb=verb)
    return CommandResponse(device_id=device_id, verb=verb, sent=sent)
