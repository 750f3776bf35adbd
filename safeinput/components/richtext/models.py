"""
Richtext component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from safeinput.core.entities import ValidationVerdict

# --- Input Models ---


@dataclass(frozen=True)
class ValidateRichTextInput:
    """Input for validating a rich text field."""

    attribute: str
    value: Any


@dataclass(frozen=True)
class ValidateSafeTextInput:
    """Input for validating a plain (markup-free) text field."""

    attribute: str
    value: Any


# --- Output Models ---


@dataclass(frozen=True)
class ValidateOutput:
    """Output for a field validation."""

    verdict: ValidationVerdict

    @property
    def is_valid(self) -> bool:
        return self.verdict.valid

    @property
    def message(self) -> str | None:
        return self.verdict.message
