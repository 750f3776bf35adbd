"""
Richtext component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class RulesPort(Protocol):
    """Port for accessing rich text allow-list configuration."""

    def get_allowed_tags(self) -> frozenset[str]:
        """Get allowed HTML tags."""
        ...

    def get_allowed_attrs(self) -> dict[str, frozenset[str]]:
        """Get allowed attributes per tag."""
        ...
