"""
Form field rules and rule-set builders.

Every rule is a Validator. Rules that render limits in their message expose
them through `params`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any

from safeinput.components.allowlist import AllowlistConfig
from safeinput.components.richtext import RichTextRule, SafeTextRule
from safeinput.components.uploads import (
    FileCategory,
    SecureFileUploadRule,
    UploadedFile,
    UploadPolicy,
    category_for_mimes,
)
from safeinput.components.urls import is_valid_absolute_url, is_valid_email
from safeinput.core.entities import FailureCode, ValidationVerdict

from .models import DEFAULT_MESSAGES, Field

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
IMAGE_EXTENSIONS = ("jpeg", "jpg", "png", "gif", "webp", "svg")

SlugExists = Callable[[str], bool]


def _fail(code: FailureCode) -> ValidationVerdict:
    return ValidationVerdict.fail(code, DEFAULT_MESSAGES[code])


class StringRule:
    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, str):
            return ValidationVerdict.ok()
        return _fail(FailureCode.NOT_STRING)


class MinLengthRule:
    def __init__(self, min_length: int) -> None:
        self.min_length = min_length
        self.params = {"min": min_length}

    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, str) and len(value) < self.min_length:
            return _fail(FailureCode.MIN_LENGTH)
        return ValidationVerdict.ok()


class MaxLengthRule:
    def __init__(self, max_length: int) -> None:
        self.max_length = max_length
        self.params = {"max": max_length}

    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, str) and len(value) > self.max_length:
            return _fail(FailureCode.MAX_LENGTH)
        return ValidationVerdict.ok()


class SlugRule:
    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, str) and SLUG_PATTERN.match(value):
            return ValidationVerdict.ok()
        return _fail(FailureCode.INVALID_SLUG)


class UniqueSlugRule:
    """Fails when the lookup reports the slug as already used."""

    def __init__(self, exists: SlugExists) -> None:
        self.exists = exists

    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, str) and self.exists(value):
            return _fail(FailureCode.SLUG_TAKEN)
        return ValidationVerdict.ok()


class EmailRule:
    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, str) and is_valid_email(value):
            return ValidationVerdict.ok()
        return _fail(FailureCode.INVALID_EMAIL)


class UrlRule:
    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, str) and is_valid_absolute_url(value):
            return ValidationVerdict.ok()
        return _fail(FailureCode.INVALID_URL)


class FileExtensionRule:
    def __init__(self, extensions: Iterable[str]) -> None:
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.params = {"values": ", ".join(self.extensions)}

    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, UploadedFile) and value.extension.lower() in self.extensions:
            return ValidationVerdict.ok()
        return _fail(FailureCode.FILE_EXTENSION_NOT_ALLOWED)


class MaxFileSizeRule:
    def __init__(self, max_kb: int) -> None:
        self.max_kb = max_kb
        self.params = {"max": max_kb}

    def validate(self, value: Any) -> ValidationVerdict:
        if isinstance(value, UploadedFile) and value.size > self.max_kb * 1024:
            return _fail(FailureCode.FILE_TOO_LARGE)
        return ValidationVerdict.ok()


# --- Rule-set Builders ---


def text_rules(
    max_length: int = 255,
    required: bool = True,
    min_length: int | None = None,
    **options: Any,
) -> Field:
    rules: list[Any] = [StringRule()]
    if min_length is not None:
        rules.append(MinLengthRule(min_length))
    rules.append(MaxLengthRule(max_length))
    return Field(rules, required=required, **options)


def safe_text_rules(
    max_length: int = 255,
    required: bool = True,
    min_length: int | None = None,
    **options: Any,
) -> Field:
    """Text without any HTML markup."""
    base = text_rules(max_length, required, min_length)
    return Field([*base.rules, SafeTextRule()], required=required, **options)


def rich_text_rules(
    max_length: int = 65535,
    required: bool = True,
    config: AllowlistConfig | None = None,
    **options: Any,
) -> Field:
    """Text with a limited, allow-listed subset of HTML."""
    base = text_rules(max_length, required)
    return Field([*base.rules, RichTextRule(config)], required=required, **options)


def slug_rules(
    exists: SlugExists | None = None,
    required: bool = True,
    **options: Any,
) -> Field:
    """
    URL slug: lowercase alphanumerics separated by single hyphens.

    Args:
        exists: Optional lookup; a slug it reports as used fails as taken.
    """
    rules: list[Any] = [StringRule(), MaxLengthRule(255), SlugRule()]
    if exists is not None:
        rules.append(UniqueSlugRule(exists))
    return Field(rules, required=required, **options)


def email_rules(required: bool = True, **options: Any) -> Field:
    return Field([EmailRule(), MaxLengthRule(255)], required=required, **options)


def url_rules(required: bool = False, **options: Any) -> Field:
    return Field([UrlRule(), MaxLengthRule(2048)], required=required, **options)


def image_rules(
    max_kb: int = 2048,
    required: bool = False,
    policy: UploadPolicy | None = None,
    **options: Any,
) -> Field:
    rules = [
        SecureFileUploadRule(FileCategory.IMAGE, policy),
        FileExtensionRule(IMAGE_EXTENSIONS),
        MaxFileSizeRule(max_kb),
    ]
    return Field(rules, required=required, **options)


def file_rules(
    mimes: Iterable[str],
    max_kb: int = 10240,
    required: bool = False,
    policy: UploadPolicy | None = None,
    **options: Any,
) -> Field:
    """
    Upload of one of the given extensions.

    The upload category follows from the extension list (see category_for_mimes).
    """
    mimes = list(mimes)
    rules = [
        SecureFileUploadRule(category_for_mimes(mimes), policy),
        FileExtensionRule(mimes),
        MaxFileSizeRule(max_kb),
    ]
    return Field(rules, required=required, **options)
