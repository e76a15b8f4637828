"""
Platform configuration for GardenBridge.

The host hands the plugin a flat mapping of option names; this module turns
it into an explicit, validated record with a documented default per field.
Keys the bridge does not recognize are ignored.
"""

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_READY_TIMEOUT = 60.0


class PlatformConfig(BaseModel):
    """Configuration of the Gardena platform as provided by the host."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    # Host-provided metadata
    name: str = "matterbridge-plugin-gardena"
    type: str = "DynamicPlatform"
    version: str = "1.0.0"
    debug: bool = False

    # Gardena credentials; only api_key is used today
    api_key: str = Field(default="", alias="apiKey", repr=False)
    email: Optional[str] = Field(default=None, repr=False)
    password: Optional[str] = Field(default=None, repr=False)
    system_id: Optional[str] = Field(default=None, alias="systemId")

    unregister_on_shutdown: bool = Field(default=False, alias="unregisterOnShutdown")

    # Remote call bounds
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, alias="requestTimeout", gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, alias="maxRetries", ge=1)
    ready_timeout: float = Field(default=DEFAULT_READY_TIMEOUT, alias="readyTimeout", gt=0)

    @field_validator("api_key", mode="before")
    @classmethod
    def normalize_api_key(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_mapping(cls, data: Union["PlatformConfig", Mapping[str, Any], None]) -> "PlatformConfig":
        if isinstance(data, PlatformConfig):
            return data
        return cls.model_validate(dict(data or {}))

    def to_mapping(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def merged(self, changes: Union["PlatformConfig", Mapping[str, Any]]) -> "PlatformConfig":
        """Return a new config with ``changes`` laid over this one."""
        if isinstance(changes, PlatformConfig):
            changes = changes.model_dump(by_alias=True, exclude_unset=True)
        aliases = {name: f.alias for name, f in PlatformConfig.model_fields.items() if f.alias}
        normalized = {aliases.get(key, key): value for key, value in dict(changes).items()}
        return PlatformConfig.from_mapping({**self.to_mapping(), **normalized})
