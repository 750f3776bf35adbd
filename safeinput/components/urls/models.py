"""
URLs component models.
"""

from __future__ import annotations

from enum import Enum


class UrlClassification(str, Enum):
    """Derived classification of a URL string; never stored."""

    RELATIVE = "relative"
    FRAGMENT = "fragment"
    MAILTO = "mailto"
    HTTP = "http"
    OTHER_SCHEME = "other_scheme"
