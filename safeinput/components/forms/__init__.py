"""
Forms component - Declarative forms with sanitization and safety rules.
"""

from .component import SecureForm, is_empty
from .models import DEFAULT_MESSAGES, Field, FormResult
from .rules import (
    EmailRule,
    FileExtensionRule,
    MaxFileSizeRule,
    MaxLengthRule,
    MinLengthRule,
    SlugRule,
    StringRule,
    UniqueSlugRule,
    UrlRule,
    email_rules,
    file_rules,
    image_rules,
    rich_text_rules,
    safe_text_rules,
    slug_rules,
    text_rules,
    url_rules,
)

__all__ = [
    # Forms
    "SecureForm",
    "Field",
    "FormResult",
    "DEFAULT_MESSAGES",
    "is_empty",
    # Builders
    "email_rules",
    "file_rules",
    "image_rules",
    "rich_text_rules",
    "safe_text_rules",
    "slug_rules",
    "text_rules",
    "url_rules",
    # Rules
    "EmailRule",
    "FileExtensionRule",
    "MaxFileSizeRule",
    "MaxLengthRule",
    "MinLengthRule",
    "SlugRule",
    "StringRule",
    "UniqueSlugRule",
    "UrlRule",
]
