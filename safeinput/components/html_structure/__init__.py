"""
HTML structure component - Fragment parsing and well-formedness checks.
"""

from .component import (
    DOCUMENT_PREFIX,
    DOCUMENT_SUFFIX,
    SHELL_TAGS,
    is_well_formed,
    iter_fragment_elements,
    parse_fragment,
    wrap_fragment,
)

__all__ = [
    "DOCUMENT_PREFIX",
    "DOCUMENT_SUFFIX",
    "SHELL_TAGS",
    "is_well_formed",
    "iter_fragment_elements",
    "parse_fragment",
    "wrap_fragment",
]
