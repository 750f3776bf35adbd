"""
Script guard component - Pattern-based rejection of inline script vectors.

Rejects obviously dangerous content before any parsing happens:
- <script>...</script> blocks
- javascript: and vbscript: URIs
- inline event handler attributes (onclick=, onerror=, ...)
- base64 data: URIs

Invariants:
- I1: Non-string values always pass (only strings are inspected)
- I2: First matching check determines the reported reason
- I3: Pure function of the input; patterns are free of nested quantifiers
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from safeinput.core.entities import FailureCode, ValidationVerdict

logger = logging.getLogger(__name__)

# [^<]* and <[^<]* never overlap, so the script pattern stays linear.
SCRIPT_TAG_PATTERN = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
    re.IGNORECASE | re.MULTILINE,
)
JAVASCRIPT_PROTOCOL_PATTERN = re.compile(r"javascript\s*:", re.IGNORECASE)
EVENT_HANDLER_PATTERN = re.compile(r"\bon\w+\s*=", re.IGNORECASE)
BASE64_DATA_URI_PATTERN = re.compile(r"data\s*:\s*[^;]*;base64", re.IGNORECASE)
VBSCRIPT_PROTOCOL_PATTERN = re.compile(r"vbscript\s*:", re.IGNORECASE)


@dataclass(frozen=True)
class ScriptCheck:
    """A single detector check."""

    name: str
    pattern: re.Pattern[str]
    code: FailureCode
    reason: str


SCRIPT_CHECKS: tuple[ScriptCheck, ...] = (
    ScriptCheck(
        name="script_tag",
        pattern=SCRIPT_TAG_PATTERN,
        code=FailureCode.SCRIPT_CONTENT,
        reason="The :attribute contains script tags which are not allowed.",
    ),
    ScriptCheck(
        name="javascript_protocol",
        pattern=JAVASCRIPT_PROTOCOL_PATTERN,
        code=FailureCode.SCRIPT_CONTENT,
        reason="The :attribute contains javascript protocol which is not allowed.",
    ),
    ScriptCheck(
        name="event_handler",
        pattern=EVENT_HANDLER_PATTERN,
        code=FailureCode.SCRIPT_CONTENT,
        reason="The :attribute contains event handlers which are not allowed.",
    ),
    ScriptCheck(
        name="base64_data_uri",
        pattern=BASE64_DATA_URI_PATTERN,
        code=FailureCode.BASE64_DATA_URI,
        reason="The :attribute contains base64 data URLs which are not allowed.",
    ),
    ScriptCheck(
        name="vbscript_protocol",
        pattern=VBSCRIPT_PROTOCOL_PATTERN,
        code=FailureCode.SCRIPT_CONTENT,
        reason="The :attribute contains vbscript protocol which is not allowed.",
    ),
)


def detect(value: Any) -> ValidationVerdict:
    """
    Scan a value for inline script vectors.

    Args:
        value: Raw field value. Anything but a string passes.

    Returns:
        Verdict carrying the reason of the first matching check.
    """
    if not isinstance(value, str):
        return ValidationVerdict.ok()

    for check in SCRIPT_CHECKS:
        if check.pattern.search(value):
            logger.debug("Script guard rejected value: %s", check.name)
            return ValidationVerdict.fail(check.code, check.reason)

    return ValidationVerdict.ok()


class ScriptDetector:
    """Validator wrapper around detect()."""

    def validate(self, value: Any) -> ValidationVerdict:
        return detect(value)
