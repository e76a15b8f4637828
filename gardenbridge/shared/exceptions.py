"""
Custom exceptions for GardenBridge.

This module defines all custom exceptions used throughout the bridge,
providing a clear error hierarchy for the remote client, the device
registry and the platform lifecycle controller.
"""

from typing import Optional, Dict, Any


class GardenBridgeError(Exception):
    """Base exception for all GardenBridge errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code


class ConfigurationError(GardenBridgeError):
    """Raised when there are configuration or setup issues (e.g. a missing API key)."""
    pass


class ContractViolationError(GardenBridgeError):
    """Base class for contract programming violations."""
    pass


class PreconditionError(ContractViolationError):
    """Raised when a function precondition is violated."""
    pass


class CommunicationError(GardenBridgeError):
    """Raised when communication with external services fails."""

    def __init__(self, message: str, service: Optional[str] = None, endpoint: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.service = service
        self.endpoint = endpoint


class RemoteFault(CommunicationError):
    """Raised when the Gardena cloud API fails a fetch or control request."""

    def __init__(self, message: str, device_id: Optional[str] = None, **kwargs):
        kwargs.setdefault("service", "gardena")
        super().__init__(message, **kwargs)
        self.device_id = device_id


class OperationTimeoutError(GardenBridgeError):
    """Raised when operations timeout."""

    def __init__(self, operation: str, timeout_seconds: float, **kwargs):
        super().__init__(f"Operation timed out: {operation} after {timeout_seconds}s", **kwargs)
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class HostError(GardenBridgeError):
    """Base class for host bridge errors."""
    pass


class HostRejectionError(HostError):
    """Raised when the host bridge refuses a local representation."""

    def __init__(self, device_id: str, reason: Optional[str] = None, **kwargs):
        message = f"Host rejected device: {device_id}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, **kwargs)
        self.device_id = device_id
        self.reason = reason


class VersionMismatchError(HostError):
    """Raised when the host runtime is older than the minimum supported version."""

    def __init__(self, required_version: str, current_version: str, **kwargs):
        super().__init__(
            f'This plugin requires Matterbridge version >= "{required_version}". '
            f"Please update Matterbridge from {current_version} to the latest version.",
            **kwargs
        )
        self.required_version = required_version
        self.current_version = current_version


class DeviceNotFoundError(GardenBridgeError):
    """Raised when a device is not found."""

    def __init__(self, device_id: str, **kwargs):
        super().__init__(f"Device not found: {device_id}", **kwargs)
        self.device_id = device_id


class UnsupportedCommandError(GardenBridgeError):
    """Raised when a verb is not supported by a device archetype."""

    def __init__(self, device_id: str, verb: str, **kwargs):
        super().__init__(f"Command '{verb}' not supported by device {device_id}", **kwargs)
        self.device_id = device_id
        self.verb = verb


# Exception mapping for HTTP status codes
EXCEPTION_STATUS_MAP = {
    ConfigurationError: 503,
    PreconditionError: 400,
    ContractViolationError: 500,
    CommunicationError: 502,
    RemoteFault: 502,
    OperationTimeoutError: 504,
    HostRejectionError: 502,
    VersionMismatchError: 500,
    DeviceNotFoundError: 404,
    UnsupportedCommandError: 400,
}


def get_http_status_code(exception: Exception) -> int:
    """Get appropriate HTTP status code for an exception."""
    exception_type = type(exception)
    return EXCEPTION_STATUS_MAP.get(exception_type, 500)


def is_retryable_error(exception: Exception) -> bool:
    """Determine if an error is retryable."""
    retryable_exceptions = (
        CommunicationError,
        OperationTimeoutError,
    )

    # Don't retry configuration, contract or lookup errors
    non_retryable_exceptions = (
        ConfigurationError,
        ContractViolationError,
        DeviceNotFoundError,
        UnsupportedCommandError,
        HostError,
    )

    if isinstance(exception, non_retryable_exceptions):
        return False

    return isinstance(exception, retryable_exceptions)


def should_log_error(exception: Exception) -> bool:
    """Determine if an error should be logged."""
    # Lookup and usage errors are reported to the caller, not logged
    low_priority_exceptions = (
        DeviceNotFoundError,
        UnsupportedCommandError,
        PreconditionError,
    )

    return not isinstance(exception, low_priority_exceptions)
