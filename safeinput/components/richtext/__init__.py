"""
Richtext component - Rich text and plain text field safety rules.
"""

from .component import (
    SAFE_TEXT_PATTERN,
    UNSAFE_TEXT_REASON,
    UNSAFE_URL_REASON,
    RichTextRule,
    SafeTextRule,
    run,
    run_validate,
    run_validate_safe_text,
    validate_rich_text,
)
from .models import ValidateOutput, ValidateRichTextInput, ValidateSafeTextInput
from .ports import RulesPort

__all__ = [
    # Entry points
    "run",
    "run_validate",
    "run_validate_safe_text",
    "validate_rich_text",
    # Rules
    "RichTextRule",
    "SafeTextRule",
    # Models
    "ValidateOutput",
    "ValidateRichTextInput",
    "ValidateSafeTextInput",
    # Ports
    "RulesPort",
    # Constants
    "SAFE_TEXT_PATTERN",
    "UNSAFE_TEXT_REASON",
    "UNSAFE_URL_REASON",
]
