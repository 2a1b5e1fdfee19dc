"""
Credential redaction for structured logs.

SDK wrappers log configuration and vendor errors. Those can carry API keys
and app tokens, either under an obviously sensitive key or embedded in an
error message. Events are redacted by key name, by the shape of store API
keys, and by the exact secret values the service was configured with.
"""

import re
from typing import Any, Dict, Iterable, Optional

REPLACEMENT_TEXT = "***REDACTED***"

# Substrings of event keys whose values are never logged (case-insensitive)
SENSITIVE_KEY_PARTS = (
    "api_key", "apikey", "app_token", "secret", "password",
    "private_key", "credential", "bearer",
)

# Device identifier keys, matched whole; only string values are identifiers
IDENTIFIER_KEYS = frozenset({"adid", "adjust_id", "idfa", "gaid"})

CREDENTIAL_PATTERNS = (
    # Purchases SDK public keys, one prefix per store
    re.compile(r"\b(?:appl|goog|amzn|strp)_[A-Za-z0-9]{16,}\b"),
    # JWTs
    re.compile(r"\beyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*\b"),
)


class LogSanitizer:
    """Redacts credentials from log event values."""

    def __init__(self, known_secrets: Iterable[Optional[str]] = (), max_depth: int = 10):
        """
        Initialize sanitizer.

        Args:
            known_secrets: Configured credential values redacted wherever they appear
            max_depth: Nesting depth below which values are dropped
        """
        # Longest first so a secret containing another is replaced whole
        self._known_secrets = sorted({s for s in known_secrets if s}, key=len, reverse=True)
        self.max_depth = max_depth

    @staticmethod
    def is_sensitive_key(key: Any) -> bool:
        lowered = str(key).lower()
        return any(part in lowered for part in SENSITIVE_KEY_PARTS)

    @staticmethod
    def is_identifier(key: Any, value: Any) -> bool:
        return isinstance(value, str) and str(key).lower() in IDENTIFIER_KEYS

    def redact_text(self, text: str) -> str:
        for secret in self._known_secrets:
            text = text.replace(secret, REPLACEMENT_TEXT)
        for pattern in CREDENTIAL_PATTERNS:
            text = pattern.sub(REPLACEMENT_TEXT, text)
        return text

    def sanitize(self, value: Any, depth: int = 0) -> Any:
        """Return a redacted copy of ``value``; containers are rebuilt, never mutated."""
        if depth >= self.max_depth:
            return "<max depth>"
        if isinstance(value, str):
            return self.redact_text(value)
        if isinstance(value, dict):
            return {
                key: REPLACEMENT_TEXT
                if self.is_sensitive_key(key) or self.is_identifier(key, item)
                else self.sanitize(item, depth + 1)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return type(value)(self.sanitize(item, depth + 1) for item in value)
        return value

    def sanitize_event(self, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        return self.sanitize(event_dict)


class StructlogSanitizer:
    """Structlog processor applying a LogSanitizer to every event."""

    def __init__(self, sanitizer: Optional[LogSanitizer] = None):
        self.sanitizer = sanitizer or LogSanitizer()

    def __call__(self, logger, method_name, event_dict):
        try:
            return self.sanitizer.sanitize_event(event_dict)
        except Exception as e:
            # The unredacted event is never passed on
            return {
                "event": "log_sanitization_error",
                "error": type(e).__name__,
                "original_event": str(event_dict.get("event"))
            }
