"""
Input sanitizer component - Normalizes request fields before validation.

Per string leaf:
1. null bytes are removed
2. CRLF and lone CR become LF
3. text is normalized to Unicode NFC
4. outer whitespace is trimmed, unless the value sits under a secret field

Invariants:
- I1: Only str leaves change; structure and other types pass through
- I2: Secret fields keep their whitespace
- I3: sanitize(sanitize(x)) == sanitize(x)
- I4: The input payload is never mutated
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SECRET_FIELDS: frozenset[str] = frozenset({"password", "password_confirmation"})


def sanitize_string(value: str, *, trim: bool = True) -> str:
    """Remove null bytes, normalize line endings and Unicode form, optionally trim."""
    cleaned = value.replace("\0", "")
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = unicodedata.normalize("NFC", cleaned)
    if trim:
        cleaned = cleaned.strip()
    return cleaned


def _sanitize_value(value: Any, secret: bool, secret_fields: frozenset[str]) -> Any:
    if isinstance(value, str):
        return sanitize_string(value, trim=not secret)

    if isinstance(value, Mapping):
        return {
            key: _sanitize_value(
                item,
                secret=key in secret_fields if isinstance(key, str) else secret,
                secret_fields=secret_fields,
            )
            for key, item in value.items()
        }

    if isinstance(value, list):
        return [_sanitize_value(item, secret, secret_fields) for item in value]

    if isinstance(value, tuple):
        return tuple(_sanitize_value(item, secret, secret_fields) for item in value)

    return value


def sanitize(
    fields: Mapping[str, Any],
    secret_fields: Iterable[str] = DEFAULT_SECRET_FIELDS,
) -> dict[str, Any]:
    """
    Sanitize a request payload.

    Args:
        fields: Field name to value mapping (nested mappings and lists allowed).
        secret_fields: Field names whose string values are not trimmed.
            Applies to the nearest enclosing key at any depth.

    Returns:
        A new payload; the input is left untouched.
    """
    secrets = frozenset(secret_fields)
    return {
        key: _sanitize_value(value, secret=key in secrets, secret_fields=secrets)
        for key, value in fields.items()
    }


class FieldSanitizer:
    """Sanitizer bound to a fixed set of secret field names."""

    def __init__(self, secret_fields: Iterable[str] = DEFAULT_SECRET_FIELDS) -> None:
        self._secret_fields = frozenset(secret_fields)

    @property
    def secret_fields(self) -> frozenset[str]:
        return self._secret_fields

    def with_secret_fields(self, extra: Iterable[str]) -> FieldSanitizer:
        """Copy with additional secret field names."""
        return FieldSanitizer(self._secret_fields | frozenset(extra))

    def sanitize(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        result = sanitize(fields, self._secret_fields)
        logger.debug("Sanitized %d field(s)", len(result))
        return result
