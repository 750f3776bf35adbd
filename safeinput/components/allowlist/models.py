"""
Allow-list component models.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

TAG_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9]*$")
ATTRIBUTE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_:\-]*$")


class AllowlistConfigError(ValueError):
    """Raised when an allow-list table is misconfigured."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Invalid allow-list configuration: {'; '.join(errors)}")


@dataclass(frozen=True)
class AllowlistConfig:
    """
    Tag and attribute allow-lists for rich text.

    Fixed at startup and shared read-only by every rule instance. A tag
    with no entry in `attributes` is allowed zero attributes.
    """

    tags: frozenset[str]
    attributes: Mapping[str, frozenset[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        tags = frozenset(self.tags)
        attributes = {tag: frozenset(names) for tag, names in self.attributes.items()}

        errors: list[str] = []
        for tag in sorted(tags):
            if not TAG_NAME_PATTERN.match(tag):
                errors.append(f"Tag name must be lowercase alphanumeric: {tag!r}")
        for tag, names in sorted(attributes.items()):
            if tag not in tags:
                errors.append(f"Attributes configured for tag that is not allowed: {tag!r}")
            for name in sorted(names):
                if not ATTRIBUTE_NAME_PATTERN.match(name):
                    errors.append(f"Attribute name must be lowercase: {tag}.{name!r}")
        if errors:
            raise AllowlistConfigError(errors)

        object.__setattr__(self, "tags", tags)
        object.__setattr__(self, "attributes", MappingProxyType(attributes))

    @classmethod
    def from_tables(
        cls,
        tags: Iterable[str],
        attributes: Mapping[str, Iterable[str]] | None = None,
    ) -> AllowlistConfig:
        """Build a config from plain lists (e.g. loaded from rules.yaml)."""
        return cls(
            tags=frozenset(tags),
            attributes={tag: frozenset(names) for tag, names in (attributes or {}).items()},
        )

    def is_tag_allowed(self, tag: str) -> bool:
        return tag.lower() in self.tags

    def allowed_attributes(self, tag: str) -> frozenset[str]:
        return self.attributes.get(tag.lower(), frozenset())

    def is_attribute_allowed(self, tag: str, attribute: str) -> bool:
        return attribute.lower() in self.allowed_attributes(tag)
