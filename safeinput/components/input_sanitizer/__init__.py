"""
Input sanitizer component - Request payload normalization.
"""

from .component import DEFAULT_SECRET_FIELDS, FieldSanitizer, sanitize, sanitize_string

__all__ = [
    "DEFAULT_SECRET_FIELDS",
    "FieldSanitizer",
    "sanitize",
    "sanitize_string",
]
