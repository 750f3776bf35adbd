"""
HTML structure component - Parse untrusted fragments in an isolated shell.

The fragment is wrapped in a minimal document and handed to libxml2's HTML
parser (through lxml). Recoverable markup errors are collected by the
parser's own error log and never printed; a parse that yields no document
is a hard failure.

Invariants:
- I1: Parser diagnostics never reach logs or output
- I2: No document -> invalid (never silently accepted)
- I3: Library-internal failures are treated as invalid (fail closed)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from lxml import etree
from lxml.html import HtmlElement, HTMLParser

logger = logging.getLogger(__name__)

DOCUMENT_PREFIX = "<!doctype html><html><body>"
DOCUMENT_SUFFIX = "</body></html>"

# Elements introduced by the shell rather than by the fragment.
SHELL_TAGS: frozenset[str] = frozenset({"html", "body"})


def wrap_fragment(fragment: str) -> str:
    """Place a fragment inside the minimal document shell."""
    return f"{DOCUMENT_PREFIX}{fragment}{DOCUMENT_SUFFIX}"


def _new_parser() -> HTMLParser:
    # One parser per call: lxml parsers must not be shared across threads.
    return HTMLParser(recover=True, no_network=True, remove_comments=False)


def parse_fragment(fragment: str) -> HtmlElement | None:
    """
    Parse a fragment as an HTML document.

    Returns:
        Root <html> element, or None when parsing failed outright.
    """
    try:
        root = etree.fromstring(wrap_fragment(fragment), _new_parser())
    except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
        logger.debug("Fragment rejected by HTML parser: %s", type(e).__name__)
        return None
    except etree.LxmlError:
        logger.warning("HTML parser failed unexpectedly; rejecting fragment", exc_info=True)
        return None

    return root


def is_well_formed(fragment: str) -> bool:
    """Check that a fragment parses into a document."""
    return parse_fragment(fragment) is not None


def iter_fragment_elements(document: HtmlElement) -> Iterator[HtmlElement]:
    """
    Yield every element of a parsed fragment in document order.

    Comments, processing instructions and the shell's html/body
    elements are skipped.
    """
    for element in document.iter():
        if not isinstance(element.tag, str):
            continue
        if element.tag.lower() in SHELL_TAGS:
            continue
        yield element
