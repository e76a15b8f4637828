"""
Timeout and retry patterns for calls to the Gardena cloud.

This module provides bounded-timeout execution with retry and backoff so that
an unreachable device or a slow API surfaces as a single, typed failure the
caller can absorb.
"""

import asyncio
import inspect
import random
from typing import Any, Callable, Optional
from dataclasses import dataclass
import structlog

from gardenbridge.shared.contracts import require
from gardenbridge.shared.exceptions import (
    OperationTimeoutError, CommunicationError, is_retryable_error
)

logger = structlog.get_logger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = 3
    base_delay: float = 0.5  # seconds
    max_delay: float = 10.0  # seconds
    backoff_multiplier: float = 2.0
    jitter: bool = True
    retryable_exceptions: tuple = (CommunicationError, OperationTimeoutError)
    timeout_seconds: Optional[float] = None

    def calculate_delay(self, attempt: int) -> float:
        """Exponential backoff delay for the given attempt number."""
        delay = min(self.base_delay * (self.backoff_multiplier ** (attempt - 1)), self.max_delay)

        if self.jitter:
            jitter_range = delay * 0.1  # 10% jitter
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0, delay)


class ResilientClient:
    """Call wrapper with per-attempt timeout and retry."""

    def __init__(self, name: str, retry_config: Optional[RetryConfig] = None):
        """
        Initialize resilient client.

        Args:
            name: Client identifier used in log events
            retry_config: Retry configuration
        """
        self.name = name
        self.retry_config = retry_config or RetryConfig()

    @require(lambda self, func, *args, **kwargs: callable(func), "Remote call target must be callable")
    async def execute(self, func: Callable, *args, **kwargs) -> Any:
        """
        Execute function with timeout and retry protection.

        Args:
            func: Function to execute
            *args: Function arguments
            **kwargs: Function keyword arguments

        Returns:
            Function result

        Raises:
            OperationTimeoutError: If the last attempt timed out
            Exception: The last non-retryable or exhausted exception
        """
        last_exception = None
        operation = getattr(func, "__name__", repr(func))

        for attempt in range(1, self.retry_config.max_attempts + 1):
            try:
                if self.retry_config.timeout_seconds:
                    result = await asyncio.wait_for(
                        self._invoke(func, *args, **kwargs),
                        timeout=self.retry_config.timeout_seconds
                    )
                else:
                    result = await self._invoke(func, *args, **kwargs)

                logger.debug(
                    "Remote call succeeded",
                    client=self.name,
                    attempt=attempt,
                    function=operation
                )
                return result

            except asyncio.TimeoutError:
                last_exception = OperationTimeoutError(
                    operation=f"{self.name}.{operation}",
                    timeout_seconds=self.retry_config.timeout_seconds
                )
                logger.warning(
                    "Remote call timed out",
                    client=self.name,
                    attempt=attempt,
                    timeout=self.retry_config.timeout_seconds
                )

            except Exception as e:
                last_exception = e

                if not self._is_retryable(e):
                    logger.warning(
                        "Non-retryable exception occurred",
                        client=self.name,
                        attempt=attempt,
                        exception=type(e).__name__,
                        error=str(e)
                    )
                    raise

                logger.warning(
                    "Retryable exception occurred",
                    client=self.name,
                    attempt=attempt,
                    exception=type(e).__name__,
                    error=str(e)
                )

            if attempt < self.retry_config.max_attempts:
                delay = self.retry_config.calculate_delay(attempt)
                logger.debug(
                    "Waiting before retry",
                    client=self.name,
                    attempt=attempt,
                    delay_seconds=delay
                )
                await asyncio.sleep(delay)

        logger.error(
            "All retry attempts exhausted",
            client=self.name,
            max_attempts=self.retry_config.max_attempts,
            last_exception=str(last_exception)
        )

        if last_exception:
            raise last_exception
        raise CommunicationError(f"All retry attempts failed for {self.name}")

    @staticmethod
    async def _invoke(func: Callable, *args, **kwargs) -> Any:
        result = func(*args, **kwargs)
        if inspect.isawaitable(result):
            return await result
        return result

    def _is_retryable(self, exception: Exception) -> bool:
        """Check if exception is retryable."""
        if isinstance(exception, self.retry_config.retryable_exceptions):
            return True

        return is_retryable_error(exception)
