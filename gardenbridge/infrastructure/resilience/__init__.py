"""
Resilience patterns for calls to the Gardena cloud.

This module provides bounded timeouts and retry with backoff so that a
failing remote call degrades into a single typed error.
"""

from .retry import (
    RetryConfig,
    ResilientClient,
)

__all__ = [
    "RetryConfig",
    "ResilientClient",
]
