"""
Forms component models.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from safeinput.core.entities import FailureCode
from safeinput.core.ports import Validator

# Message templates per failure code. ":attribute" becomes the field label,
# other ":name" placeholders come from the failing rule's params.
DEFAULT_MESSAGES: dict[FailureCode, str] = {
    FailureCode.REQUIRED: "The :attribute field is required.",
    FailureCode.NOT_STRING: "The :attribute must be a string.",
    FailureCode.MIN_LENGTH: "The :attribute must be at least :min characters.",
    FailureCode.MAX_LENGTH: "The :attribute may not be greater than :max characters.",
    FailureCode.INVALID_EMAIL: "The :attribute must be a valid email address.",
    FailureCode.INVALID_URL: "The :attribute must be a valid URL.",
    FailureCode.FILE_EXTENSION_NOT_ALLOWED: "The :attribute must be a file of type: :values.",
    FailureCode.FILE_TOO_LARGE: "The :attribute may not be greater than :max kilobytes.",
    FailureCode.INVALID_SLUG: "The :attribute format is invalid.",
    FailureCode.UNSAFE_TEXT: "The :attribute format is invalid.",
    FailureCode.SLUG_TAKEN: "The :attribute has already been taken.",
    FailureCode.SCRIPT_CONTENT: "The :attribute contains potentially dangerous content.",
    FailureCode.MALFORMED_HTML: "The :attribute contains invalid HTML content.",
}


@dataclass(frozen=True)
class Field:
    """
    Declared form field.

    Args:
        rules: Validators run in order; the first failure is reported.
        required: Empty values fail when True and skip the rules otherwise.
        is_secret: Whitespace is preserved during sanitization.
        label: Name used in messages (defaults to the field name).
    """

    rules: Sequence[Validator]
    required: bool = True
    is_secret: bool = False
    label: str | None = None

    def __post_init__(self) -> None:
        for rule in self.rules:
            if not isinstance(rule, Validator):
                raise TypeError(f"Unsupported form rule: {rule!r}")
        object.__setattr__(self, "rules", tuple(self.rules))

    def label_for(self, name: str) -> str:
        return self.label or name.replace("_", " ")


@dataclass(frozen=True)
class FormResult:
    """Outcome of a form validation."""

    valid: bool
    data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)

    def first_error(self, name: str) -> str | None:
        messages = self.errors.get(name)
        return messages[0] if messages else None
