"""
Contract Programming implementation with preconditions.

This module provides decorators and utilities for implementing Design by Contract
principles. Contract violations signal programmer errors and are never absorbed
by the bridge's best-effort error handling.
"""

import functools
import inspect
from typing import Any, Callable, TypeVar, Union
import structlog

from gardenbridge.shared.exceptions import PreconditionError

logger = structlog.get_logger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def _evaluate(condition: Union[bool, Callable[..., bool]], func: Callable, args, kwargs) -> bool:
    if not callable(condition):
        return bool(condition)
    try:
        return bool(condition(*args, **kwargs))
    except Exception as e:
        logger.error(
            "Precondition evaluation failed",
            function=func.__name__,
            error=str(e)
        )
        raise PreconditionError(
            f"Precondition evaluation error in {func.__name__}: {str(e)}"
        )


def _violation(func: Callable, message: str) -> PreconditionError:
    error_msg = message or f"Precondition failed in {func.__name__}"
    logger.warning(
        "Precondition violation",
        function=func.__name__,
        message=error_msg
    )
    return PreconditionError(error_msg)


def require(condition: Union[bool, Callable[..., bool]], message: str = "") -> Callable[[F], F]:
    """
    Precondition decorator - validates input parameters.

    Works for plain functions and coroutine functions; the condition receives
    the same positional and keyword arguments as the decorated callable.

    Args:
        condition: Boolean expression or callable that takes function arguments
        message: Custom error message for contract violation

    Returns:
        Decorated function with precondition checking

    Raises:
        PreconditionError: If precondition is not met
    """
    def decorator(func: F) -> F:

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                if not _evaluate(condition, func, args, kwargs):
                    raise _violation(func, message)
                return await func(*args, **kwargs)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _evaluate(condition, func, args, kwargs):
                raise _violation(func, message)
            return func(*args, **kwargs)

        return wrapper
    return decorator


# Common contract conditions for the bridge domain

def in_range(value: Union[int, float], min_val: Union[int, float], max_val: Union[int, float]) -> bool:
    """Check if value is within specified range."""
    return min_val <= value <= max_val


def valid_battery_level(level: Union[int, float]) -> bool:
    """Check if battery level is valid (0-100%)."""
    return in_range(level, 0, 100)


def non_empty_string(value: str) -> bool:
    """Check if string is non-empty after stripping whitespace."""
    return isinstance(value, str) and len(value.strip()) > 0
