"""
Allow-list component - Tag/attribute allow-list tables and enforcement.
"""

from .component import (
    DEFAULT_ALLOWLIST,
    DISALLOWED_ATTRIBUTE_REASON,
    DISALLOWED_TAG_REASON,
    MALFORMED_HTML_REASON,
    AllowlistEnforcer,
    enforce_allowlist,
    extract_tag_names,
    find_disallowed_attributes,
    find_disallowed_tags,
    iter_attribute_violations,
)
from .models import AllowlistConfig, AllowlistConfigError

__all__ = [
    # Configuration
    "AllowlistConfig",
    "AllowlistConfigError",
    "DEFAULT_ALLOWLIST",
    # Entry points
    "AllowlistEnforcer",
    "enforce_allowlist",
    "extract_tag_names",
    "find_disallowed_attributes",
    "find_disallowed_tags",
    "iter_attribute_violations",
    # Reasons
    "DISALLOWED_ATTRIBUTE_REASON",
    "DISALLOWED_TAG_REASON",
    "MALFORMED_HTML_REASON",
]
