"""
Uploads component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from safeinput.core.ports import StoragePort


class ClockPort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


__all__ = ["ClockPort", "StoragePort"]
