"""
Allow-list component - Tag and attribute allow-list enforcement.

Invariants:
- I1: Any tag outside the allowed set fails validation
- I2: Attributes are checked per tag; unlisted tags allow no attributes
- I3: Only names are checked; attribute values are left to other rules
- I4: The synthetic html/body wrapper is never checked
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from lxml.html import HtmlElement

from safeinput.components.html_structure import iter_fragment_elements, parse_fragment
from safeinput.core.entities import FailureCode, ValidationVerdict

from .models import AllowlistConfig

logger = logging.getLogger(__name__)

# Opening, closing and self-closing tags.
TAG_NAME_EXTRACT_PATTERN = re.compile(r"</?([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>")

DISALLOWED_TAG_REASON = "The :attribute contains HTML tags that are not allowed."
DISALLOWED_ATTRIBUTE_REASON = "The :attribute contains HTML attributes that are not allowed."
MALFORMED_HTML_REASON = "The :attribute contains invalid HTML structure."

_HEADING_ATTRS = frozenset(["class", "id"])

DEFAULT_ALLOWLIST = AllowlistConfig(
    tags=frozenset(
        [
            "p",
            "br",
            "strong",
            "b",
            "em",
            "i",
            "u",
            "strike",
            "del",
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            "ul",
            "ol",
            "li",
            "blockquote",
            "pre",
            "code",
            "a",
            "img",
            "table",
            "thead",
            "tbody",
            "tr",
            "th",
            "td",
            "div",
            "span",
        ]
    ),
    attributes={
        "a": frozenset(["href", "title", "target", "rel"]),
        "img": frozenset(["src", "alt", "title", "width", "height", "class"]),
        "div": frozenset(["class", "id"]),
        "span": frozenset(["class", "id"]),
        "p": frozenset(["class"]),
        "h1": _HEADING_ATTRS,
        "h2": _HEADING_ATTRS,
        "h3": _HEADING_ATTRS,
        "h4": _HEADING_ATTRS,
        "h5": _HEADING_ATTRS,
        "h6": _HEADING_ATTRS,
        "table": frozenset(["class"]),
        "th": frozenset(["class", "scope"]),
        "td": frozenset(["class", "colspan", "rowspan"]),
    },
)


def extract_tag_names(fragment: str) -> frozenset[str]:
    """Distinct lowercase tag names used anywhere in a fragment."""
    return frozenset(match.lower() for match in TAG_NAME_EXTRACT_PATTERN.findall(fragment))


def find_disallowed_tags(
    fragment: str,
    config: AllowlistConfig = DEFAULT_ALLOWLIST,
) -> list[str]:
    """Tag names in the fragment that are not on the allow-list (sorted)."""
    return sorted(tag for tag in extract_tag_names(fragment) if tag not in config.tags)


def iter_attribute_violations(
    document: HtmlElement,
    config: AllowlistConfig = DEFAULT_ALLOWLIST,
) -> Iterator[tuple[str, str]]:
    """Walk a parsed fragment depth-first and yield (tag, attribute) violations."""
    for element in iter_fragment_elements(document):
        tag = element.tag.lower()
        allowed = config.allowed_attributes(tag)
        for name in element.attrib:
            if name.lower() not in allowed:
                yield tag, name.lower()


def find_disallowed_attributes(
    document: HtmlElement,
    config: AllowlistConfig = DEFAULT_ALLOWLIST,
) -> list[tuple[str, str]]:
    """All (tag, attribute) violations in document order."""
    return list(iter_attribute_violations(document, config))


def enforce_allowlist(
    fragment: str,
    config: AllowlistConfig = DEFAULT_ALLOWLIST,
    document: HtmlElement | None = None,
) -> ValidationVerdict:
    """
    Enforce the tag and attribute allow-lists on a fragment.

    Args:
        fragment: Raw markup; tag names are extracted from it directly.
        config: Allow-list tables.
        document: Already parsed fragment. Parsed here when omitted.

    Returns:
        Verdict; tag violations are reported before attribute violations.
    """
    disallowed_tags = find_disallowed_tags(fragment, config)
    if disallowed_tags:
        logger.debug("Disallowed tags: %s", ", ".join(disallowed_tags))
        return ValidationVerdict.fail(FailureCode.DISALLOWED_TAG, DISALLOWED_TAG_REASON)

    if document is None:
        document = parse_fragment(fragment)
        if document is None:
            return ValidationVerdict.fail(FailureCode.MALFORMED_HTML, MALFORMED_HTML_REASON)

    violation = next(iter_attribute_violations(document, config), None)
    if violation is not None:
        logger.debug("Disallowed attribute %s on <%s>", violation[1], violation[0])
        return ValidationVerdict.fail(FailureCode.DISALLOWED_ATTRIBUTE, DISALLOWED_ATTRIBUTE_REASON)

    return ValidationVerdict.ok()


class AllowlistEnforcer:
    """Validator wrapper around enforce_allowlist()."""

    def __init__(self, config: AllowlistConfig | None = None) -> None:
        self._config = config or DEFAULT_ALLOWLIST

    @property
    def config(self) -> AllowlistConfig:
        return self._config

    def validate(self, value: object) -> ValidationVerdict:
        if not isinstance(value, str):
            return ValidationVerdict.ok()
        return enforce_allowlist(value, self._config)
