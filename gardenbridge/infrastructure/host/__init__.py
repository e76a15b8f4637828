"""
Host bridge seam.

The host runtime is an external collaborator; this package defines its
contract and an in-memory implementation.
"""

from .interfaces import HostBridge, MINIMUM_HOST_VERSION, version_at_least
from .memory import InMemoryHostBridge

__all__ = [
    "HostBridge",
    "MINIMUM_HOST_VERSION",
    "version_at_least",
    "InMemoryHostBridge",
]
