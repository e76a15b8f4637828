"""
Pydantic models for the GardenBridge diagnostics API.

They serve as the boundary between the HTTP surface and the internal domain
models.
"""

import os
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from gardenbridge.core.domain.entities import LocalRepresentation, RemoteDevice


def _env_flag(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


class APIConfig(BaseModel):
    """Configuration for the diagnostics FastAPI application."""
    title: str = "GardenBridge API"
    version: str = "1.0.0"
    description: str = "Gardena smart garden bridge diagnostics"
    docs_url: str = "/docs"
    openapi_url: str = "/openapi.json"
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    json_logs: bool = Field(default_factory=lambda: _env_flag("LOG_JSON"))

    def platform_config(self) -> Dict[str, Any]:
        """Platform options read from the environment."""
        return {
            "apiKey": os.getenv("GARDENA_API_KEY", ""),
            "unregisterOnShutdown": _env_flag("GARDENBRIDGE_UNREGISTER_ON_SHUTDOWN"),
        }


class HealthStatus(str, Enum):
    """Health status enumeration."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Health check response model."""
    status: HealthStatus
    timestamp: datetime
    version: str
    platform: Dict[str, Any]


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    detail: Optional[str] = None
    code: Optional[str] = None


class DeviceResponse(BaseModel):
    """A registered device with its remote state."""
    model_config = ConfigDict(use_enum_values=True)

    id: str
    name: str
    type: str
    archetype: str
    power_source: str
    serial_number: str
    verbs: List[str]
    category: Optional[str] = None
    value: Optional[Union[bool, int, float, str]] = None
    battery_level: Optional[int] = None
    connected: Optional[bool] = None
    active: Optional[bool] = None

    @classmethod
    def from_domain(cls, representation: LocalRepresentation, device: Optional[RemoteDevice]) -> "DeviceResponse":
        return cls(
            id=representation.remote_id,
            name=representation.basic_information.name,
            type=representation.device_type,
            archetype=representation.archetype.value,
            power_source=representation.power_source.value,
            serial_number=representation.basic_information.serial_number,
            verbs=sorted(representation.supported_verbs),
            category=device.category.value if device else None,
            value=device.value if device else None,
            battery_level=device.battery_level if device else None,
            connected=device.connected if device else None,
            active=device.is_active if device else None,
        )


class DeviceListResponse(BaseModel):
    """List of registered devices."""
    devices: List[DeviceResponse]
    total: int


class CommandRequest(BaseModel):
    """Optional command argument."""
    value: Optional[Union[bool, int, float, str]] = None


class CommandResponse(BaseModel):
    """Outcome of a command dispatch."""
    device_id: str
    verb: str
    sent: bool
