"""
Validator port.

Every check (script detector, allow-list enforcer, URL checker, upload
checker, form rules) conforms to this single capability. Composite rules
such as the rich-text rule sequence other validators.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from safeinput.core.entities import ValidationVerdict


@runtime_checkable
class Validator(Protocol):
    """Validate a value and report a verdict."""

    def validate(self, value: Any) -> ValidationVerdict:
        """Return a verdict for value. Must not raise for invalid input."""
        ...
