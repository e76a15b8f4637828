"""
Gardena cloud access.

This package provides the remote device client and the transports it talks
through.
"""

from .client import RemoteDeviceClient
from .transport import RemoteTransport, SimulatedTransport

__all__ = [
    "RemoteDeviceClient",
    "RemoteTransport",
    "SimulatedTransport",
]
