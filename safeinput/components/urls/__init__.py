"""
URLs component - URL scheme classification and safety checks.
"""

from .component import (
    classify_url,
    extract_urls,
    find_unsafe_urls,
    is_safe_url,
    is_valid_absolute_url,
    is_valid_email,
)
from .models import UrlClassification

__all__ = [
    "UrlClassification",
    "classify_url",
    "extract_urls",
    "find_unsafe_urls",
    "is_safe_url",
    "is_valid_absolute_url",
    "is_valid_email",
]
