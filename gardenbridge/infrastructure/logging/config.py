"""
Structured logging configuration for GardenBridge.

structlog renders through the standard library so that the host (or the
diagnostics server) can change the level of the ``gardenbridge`` logger at
runtime.
"""

import logging
import sys
from typing import Optional, Union

import structlog

from gardenbridge.infrastructure.logging.sanitization import StructlogSanitizer

ROOT_LOGGER_NAME = "gardenbridge"

_sanitizer = StructlogSanitizer()


def _coerce_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        # Host-specific names ("notice", "fatal") map onto the nearest stdlib level
        resolved = {"NOTICE": logging.INFO, "FATAL": logging.CRITICAL}.get(str(level).strip().upper(), logging.INFO)
    return resolved


def configure_logging(
    level: Union[str, int] = "INFO",
    json_logs: bool = False,
    api_key: Optional[str] = None,
) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        level: Initial level of the ``gardenbridge`` logger
        json_logs: Render JSON lines instead of console output
        api_key: Configured Gardena API key, redacted from every event
    """
    _sanitizer.add_secret(api_key)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _sanitizer,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    set_log_level(level)


def set_log_level(level: Union[str, int]) -> int:
    """Change the ``gardenbridge`` logger level; returns the numeric level applied."""
    numeric = _coerce_level(level)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(numeric)
    return numeric


def redact_secret(secret: Optional[str]) -> None:
    """Register an additional literal value to redact from log events."""
    _sanitizer.add_secret(secret)
