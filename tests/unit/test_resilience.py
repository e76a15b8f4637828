"""
Unit tests for timeout and retry handling.
"""
import asyncio

import pytest

from gardenbridge.infrastructure.resilience import ResilientClient, RetryConfig
from gardenbridge.shared.exceptions import (
    CommunicationError, ConfigurationError, OperationTimeoutError, PreconditionError, RemoteFault
)


def fast_client(attempts=3, timeout=None):
    return ResilientClient("test", RetryConfig(max_attempts=attempts, base_delay=0, timeout_seconds=timeout))


class TestRetryConfig:
    """Test cases for backoff calculation."""

    def test_exponential_backoff(self):
        config = RetryConfig(base_delay=1.0, jitter=False)

        assert [config.calculate_delay(n) for n in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_jitter_stays_within_ten_percent(self):
        config = RetryConfig(base_delay=1.0)

        assert all(0.9 <= config.calculate_delay(1) <= 1.1 for _ in range(20))

    def test_delay_is_capped(self):
        config = RetryConfig(base_delay=1.0, max_delay=5.0, jitter=False)

        assert config.calculate_delay(10) == 5.0


class TestResilientClient:
    """Test cases for ResilientClient.execute."""

    async def test_success_on_first_attempt(self):
        async def call(x):
            return x * 2

        assert await fast_client().execute(call, 21) == 42

    async def test_sync_callables_are_supported(self):
        assert await fast_client().execute(lambda: "ok") == "ok"

    async def test_retryable_fault_is_retried(self):
        attempts = []

        async def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise RemoteFault("unreachable")
            return "done"

        assert await fast_client(attempts=3).execute(flaky) == "done"
        assert len(attempts) == 3

    async def test_exhausted_retries_raise_last_fault(self):
        async def down():
            raise CommunicationError("down")

        with pytest.raises(CommunicationError, match="down"):
            await fast_client(attempts=2).execute(down)

    async def test_non_retryable_error_is_raised_immediately(self):
        attempts = []

        async def misconfigured():
            attempts.append(1)
            raise ConfigurationError("bad key")

        with pytest.raises(ConfigurationError):
            await fast_client(attempts=3).execute(misconfigured)
        assert len(attempts) == 1

    async def test_timeout_becomes_typed_error(self):
        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(OperationTimeoutError) as exc_info:
            await fast_client(attempts=2, timeout=0.01).execute(slow)

        assert exc_info.value.timeout_seconds == 0.01

    async def test_non_callable_target_is_a_contract_violation(self):
        with pytest.raises(PreconditionError):
            await fast_client().execute("not callable")
