"""
URLs component - Scheme allow-listing for link and image targets.

Classifies a URL string and decides whether it is safe to embed in an
href or src attribute.

Invariants:
- I1: Relative references (/path, #fragment, plain paths) are safe
- I2: mailto: is safe only with a well-formed address
- I3: http(s) is safe only when structurally valid
- I4: Every other scheme is unsafe (javascript:, data:, file:, custom)
- I5: is_safe_url never raises
"""

from __future__ import annotations

import html
import ipaddress
import logging
import re
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

from .models import UrlClassification

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)
HTTP_PREFIX_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
MAILTO_PREFIX = "mailto:"

# Browsers drop these anywhere in a URL before resolving its scheme.
_URL_IGNORED_CHARS = re.compile(r"[\t\r\n]")
# C0 controls and space, stripped from both ends.
_C0_AND_SPACE = "".join(chr(c) for c in range(0x21))

_HOST_LABEL = re.compile(r"^(?!-)[a-z0-9_\-]{1,63}(?<!-)$", re.IGNORECASE)

# href/src values in raw markup: double-quoted, single-quoted or bare.
URL_ATTRIBUTE_PATTERN = re.compile(
    r"""(?:href|src)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
    re.IGNORECASE,
)


def _normalize(url: str) -> str:
    return _URL_IGNORED_CHARS.sub("", url).strip(_C0_AND_SPACE)


def classify_url(url: str) -> UrlClassification:
    """Classify a URL by its scheme (or lack of one)."""
    candidate = _normalize(url)

    if candidate.startswith("#"):
        return UrlClassification.FRAGMENT
    if candidate.startswith("/"):
        return UrlClassification.RELATIVE
    if candidate.lower().startswith(MAILTO_PREFIX):
        return UrlClassification.MAILTO
    if HTTP_PREFIX_PATTERN.match(candidate):
        return UrlClassification.HTTP
    if SCHEME_PATTERN.match(candidate):
        return UrlClassification.OTHER_SCHEME
    return UrlClassification.RELATIVE


def is_valid_email(address: str) -> bool:
    """Check an email address for syntax only (no DNS)."""
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _is_valid_host(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass

    labels = host.rstrip(".").split(".")
    return all(_HOST_LABEL.match(label) for label in labels)


def is_valid_absolute_url(url: str) -> bool:
    """
    Structural check for an absolute http(s) URL.

    Requires a host, a numeric port in range when present and no
    whitespace, control or non-ASCII characters.
    """
    if not url.isascii() or any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        return False

    try:
        parts = urlsplit(url)
        # urlsplit only checks the port lazily
        _ = parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ("http", "https"):
        return False

    host = parts.hostname
    if not host:
        return False

    return _is_valid_host(host)


def is_safe_url(url: str) -> bool:
    """
    Decide whether a URL is safe to embed in markup.

    Returns True for relative references, well-formed mailto: and http(s)
    URLs; False for every other scheme.
    """
    if not isinstance(url, str):
        return False

    try:
        classification = classify_url(url)
        candidate = _normalize(url)

        if classification in (UrlClassification.RELATIVE, UrlClassification.FRAGMENT):
            return True

        if classification == UrlClassification.MAILTO:
            address = candidate[len(MAILTO_PREFIX) :].split("?", 1)[0]
            return is_valid_email(address)

        if classification == UrlClassification.HTTP:
            return is_valid_absolute_url(candidate)

        return False
    except Exception:
        logger.exception("URL classification failed; treating URL as unsafe")
        return False


def extract_urls(markup: str) -> list[str]:
    """
    Pull every href/src attribute value out of raw markup.

    Character references are decoded the way a browser decodes attribute
    values, so `javascript&colon;` comes back as `javascript:`.
    """
    urls: list[str] = []
    for match in URL_ATTRIBUTE_PATTERN.finditer(markup):
        double, single, bare = match.groups()
        if double is not None:
            raw = double
        elif single is not None:
            raw = single
        else:
            raw = bare
        urls.append(html.unescape(raw))
    return urls


def find_unsafe_urls(markup: str) -> list[str]:
    """Return the href/src values in markup that fail is_safe_url."""
    return [url for url in extract_urls(markup) if not is_safe_url(url)]
