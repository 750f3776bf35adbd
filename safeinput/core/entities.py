"""
Core validation entities for safeinput.

Every rule in the library reports through a ValidationVerdict:
- valid / invalid flag
- a failure code naming the category of the failure
- a human-readable reason template (":attribute" placeholder)

Invalid input is an expected outcome and never raises; exceptions are
reserved for configuration mistakes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class FailureCode(str, Enum):
    """Failure categories reported by validation rules."""

    # Markup safety
    SCRIPT_CONTENT = "script_content_detected"
    BASE64_DATA_URI = "base64_data_uri_rejected"
    MALFORMED_HTML = "malformed_html"
    DISALLOWED_TAG = "disallowed_tag"
    DISALLOWED_ATTRIBUTE = "disallowed_attribute"
    UNSAFE_URL = "unsafe_url"
    UNSAFE_TEXT = "unsafe_text"

    # Uploads
    INVALID_FILE = "invalid_file"
    FILE_TOO_LARGE = "file_too_large"
    FILE_TYPE_NOT_ALLOWED = "file_type_not_allowed"
    DANGEROUS_EXTENSION = "dangerous_extension"
    SIGNATURE_MISMATCH = "signature_mismatch"
    MALICIOUS_CONTENT = "malicious_content"

    # Generic form rules
    REQUIRED = "required"
    NOT_STRING = "not_string"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    INVALID_SLUG = "invalid_slug"
    SLUG_TAKEN = "slug_taken"
    INVALID_EMAIL = "invalid_email"
    INVALID_URL = "invalid_url"
    FILE_EXTENSION_NOT_ALLOWED = "file_extension_not_allowed"


ATTRIBUTE_PLACEHOLDER = ":attribute"


@dataclass(frozen=True)
class ValidationVerdict:
    """
    Result of a single validation check.

    Built once per rule invocation and never mutated; use for_attribute()
    to get a copy bound to a field name.
    """

    valid: bool
    reason: str | None = None
    code: FailureCode | None = None
    attribute: str | None = None

    @classmethod
    def ok(cls) -> ValidationVerdict:
        return cls(valid=True)

    @classmethod
    def fail(cls, code: FailureCode, reason: str) -> ValidationVerdict:
        return cls(valid=False, reason=reason, code=code)

    def for_attribute(self, attribute: str) -> ValidationVerdict:
        """Return a copy of this verdict bound to a field name."""
        return replace(self, attribute=attribute)

    @property
    def message(self) -> str | None:
        """Reason with the :attribute placeholder filled in."""
        if self.reason is None:
            return None
        return self.reason.replace(ATTRIBUTE_PLACEHOLDER, self.attribute or "value")

    def __bool__(self) -> bool:
        return self.valid
