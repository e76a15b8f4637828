"""
Logging sanitization for credential protection.

This module ensures that the Gardena API key, account credentials and bearer
tokens are never exposed in log output.
"""

import re
from typing import Any, Dict, List, Optional
from copy import deepcopy


class LogSanitizer:
    """Sanitizes sensitive data from log output."""

    # Sensitive field patterns (case-insensitive substring match on the key)
    SENSITIVE_FIELD_PATTERNS = {
        'password', 'passwd', 'secret', 'token', 'api_key', 'apikey',
        'authorization', 'bearer', 'email', 'private_key',
    }

    # Sensitive value patterns (regex)
    SENSITIVE_VALUE_PATTERNS = [
        # Bearer tokens in headers or messages
        r'\bBearer\s+[A-Za-z0-9._~+/=-]+',
        # Email addresses
        r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b',
        # JWT tokens (basic pattern)
        r'\beyJ[A-Za-z0-9-_]+\.[A-Za-z0-9-_]+\.[A-Za-z0-9-_]*\b',
    ]

    REPLACEMENT_TEXT = "***REDACTED***"

    @classmethod
    def sanitize_dict(cls, data: Dict[str, Any], max_depth: int = 10) -> Dict[str, Any]:
        """
        Recursively sanitize a dictionary, removing sensitive data.

        Args:
            data: Dictionary to sanitize
            max_depth: Maximum recursion depth to prevent infinite loops

        Returns:
            Sanitized dictionary with sensitive fields redacted
        """
        if max_depth <= 0:
            return {"error": "max_depth_reached"}

        if not isinstance(data, dict):
            return cls._sanitize_value(data)

        sanitized = {}

        for key, value in data.items():
            sanitized_key = str(key).lower()

            if any(pattern in sanitized_key for pattern in cls.SENSITIVE_FIELD_PATTERNS):
                sanitized[key] = cls.REPLACEMENT_TEXT
            elif isinstance(value, dict):
                sanitized[key] = cls.sanitize_dict(value, max_depth - 1)
            elif isinstance(value, list):
                sanitized[key] = cls._sanitize_list(value, max_depth - 1)
            else:
                sanitized[key] = cls._sanitize_value(value)

        return sanitized

    @classmethod
    def _sanitize_list(cls, data: List[Any], max_depth: int) -> List[Any]:
        if max_depth <= 0:
            return ["max_depth_reached"]

        sanitized = []
        for item in data:
            if isinstance(item, dict):
                sanitized.append(cls.sanitize_dict(item, max_depth - 1))
            elif isinstance(item, list):
                sanitized.append(cls._sanitize_list(item, max_depth - 1))
            else:
                sanitized.append(cls._sanitize_value(item))

        return sanitized

    @classmethod
    def _sanitize_value(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return cls.sanitize_string(value)

    @classmethod
    def sanitize_string(cls, text: str) -> str:
        """Replace sensitive patterns inside a string."""
        if not isinstance(text, str):
            return str(text)

        sanitized = text
        for pattern in cls.SENSITIVE_VALUE_PATTERNS:
            sanitized = re.sub(pattern, cls.REPLACEMENT_TEXT, sanitized, flags=re.IGNORECASE)

        return sanitized


class StructlogSanitizer:
    """Structlog processor for sanitizing log events."""

    def __init__(self, sanitizer: Optional[LogSanitizer] = None, secrets: Optional[List[str]] = None):
        """
        Args:
            sanitizer: Custom sanitizer
            secrets: Literal values (e.g. the configured API key) to redact wherever they appear
        """
        self.sanitizer = sanitizer or LogSanitizer()
        self.secrets = [s for s in (secrets or []) if s]

    def add_secret(self, secret: Optional[str]) -> None:
        if secret and secret not in self.secrets:
            self.secrets.append(secret)

    def _redact_secrets(self, value: Any) -> Any:
        if isinstance(value, str):
            for secret in self.secrets:
                value = value.replace(secret, LogSanitizer.REPLACEMENT_TEXT)
        return value

    def __call__(self, logger, method_name, event_dict):
        try:
            sanitized_event = self.sanitizer.sanitize_dict(deepcopy(event_dict))
            if self.secrets:
                sanitized_event = {key: self._redact_secrets(value) for key, value in sanitized_event.items()}
            return sanitized_event

        except Exception as e:
            # Never fall back to the original, unsanitized event
            return {
                "event": "log_sanitization_error",
                "error": str(e),
                "original_event_type": type(event_dict).__name__
            }
