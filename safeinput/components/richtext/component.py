"""
Richtext component - Safety rule for rich text (limited HTML) fields.

Composes the individual checks into a single pass/fail entry point:
1. script guard over the raw value
2. structural parse of the fragment
3. tag/attribute allow-list on the parsed fragment
4. scheme check of every href/src value

Invariants:
- I1: Non-string values pass
- I2: Steps run in order and stop at the first failure
- I3: Exactly one reason is reported per invocation
- I4: Internal failures reject the value (fail closed)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import Any

from lxml.html import HtmlElement

from safeinput.components.allowlist import (
    DEFAULT_ALLOWLIST,
    MALFORMED_HTML_REASON,
    AllowlistConfig,
    enforce_allowlist,
)
from safeinput.components.html_structure import iter_fragment_elements, parse_fragment
from safeinput.components.script_guard import ScriptDetector
from safeinput.components.urls import find_unsafe_urls, is_safe_url
from safeinput.core.entities import FailureCode, ValidationVerdict

from .models import ValidateOutput, ValidateRichTextInput, ValidateSafeTextInput
from .ports import RulesPort

logger = logging.getLogger(__name__)

UNSAFE_URL_REASON = "The :attribute contains potentially unsafe URLs."
UNSAFE_TEXT_REASON = "The :attribute format is invalid."

SAFE_TEXT_PATTERN = re.compile(r"^[^<>]*$")

URL_ATTRIBUTES = ("href", "src")


class RichTextRule:
    """
    Composite validator for rich text fields.

    Holds only the immutable allow-list; safe to share between requests.
    """

    def __init__(self, config: AllowlistConfig | None = None) -> None:
        self._config = config or DEFAULT_ALLOWLIST
        self._script_detector = ScriptDetector()

    @property
    def config(self) -> AllowlistConfig:
        return self._config

    def validate(self, value: Any) -> ValidationVerdict:
        if not isinstance(value, str):
            return ValidationVerdict.ok()

        try:
            return self._check(value)
        except Exception:
            logger.exception("Rich text validation failed internally; rejecting value")
            return ValidationVerdict.fail(FailureCode.MALFORMED_HTML, MALFORMED_HTML_REASON)

    def _check(self, value: str) -> ValidationVerdict:
        verdict = self._script_detector.validate(value)
        if not verdict.valid:
            return verdict

        document = parse_fragment(value)
        if document is None:
            return ValidationVerdict.fail(FailureCode.MALFORMED_HTML, MALFORMED_HTML_REASON)

        verdict = enforce_allowlist(value, self._config, document=document)
        if not verdict.valid:
            return verdict

        unsafe = find_unsafe_urls(value)
        unsafe.extend(url for url in _document_urls(document) if not is_safe_url(url))
        if unsafe:
            logger.debug("Rich text contains %d unsafe URL(s)", len(unsafe))
            return ValidationVerdict.fail(FailureCode.UNSAFE_URL, UNSAFE_URL_REASON)

        return ValidationVerdict.ok()


class SafeTextRule:
    """Plain text fields: any angle bracket is rejected."""

    def validate(self, value: Any) -> ValidationVerdict:
        if not isinstance(value, str):
            return ValidationVerdict.ok()
        if SAFE_TEXT_PATTERN.match(value):
            return ValidationVerdict.ok()
        return ValidationVerdict.fail(FailureCode.UNSAFE_TEXT, UNSAFE_TEXT_REASON)


def _document_urls(document: HtmlElement) -> Iterator[str]:
    """href/src values as the parser decoded them."""
    for element in iter_fragment_elements(document):
        for name in URL_ATTRIBUTES:
            url = element.get(name)
            if url is not None:
                yield url


def validate_rich_text(
    attribute: str,
    value: Any,
    config: AllowlistConfig | None = None,
) -> ValidationVerdict:
    """Validate a rich text field value; the verdict is bound to `attribute`."""
    return RichTextRule(config).validate(value).for_attribute(attribute)


def _build_config(rules: RulesPort | None) -> AllowlistConfig:
    """Build allow-list config from rules port."""
    if rules is None:
        return DEFAULT_ALLOWLIST

    return AllowlistConfig(
        tags=rules.get_allowed_tags(),
        attributes=rules.get_allowed_attrs(),
    )


# --- Component Entry Points ---


def run_validate(
    inp: ValidateRichTextInput,
    *,
    rules: RulesPort | None = None,
) -> ValidateOutput:
    """
    Validate a rich text field.

    Args:
        inp: Field name and raw value.
        rules: Optional rules port for allow-list configuration.

    Returns:
        ValidateOutput with the verdict bound to the field name.
    """
    config = _build_config(rules)
    return ValidateOutput(verdict=validate_rich_text(inp.attribute, inp.value, config))


def run_validate_safe_text(inp: ValidateSafeTextInput) -> ValidateOutput:
    """Validate a plain text field."""
    verdict = SafeTextRule().validate(inp.value).for_attribute(inp.attribute)
    return ValidateOutput(verdict=verdict)


def run(
    inp: ValidateRichTextInput | ValidateSafeTextInput,
    *,
    rules: RulesPort | None = None,
) -> ValidateOutput:
    """
    Main entry point for the richtext component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ValidateRichTextInput):
        return run_validate(inp, rules=rules)
    elif isinstance(inp, ValidateSafeTextInput):
        return run_validate_safe_text(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
