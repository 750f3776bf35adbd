"""
Upload storage port.

Implementations: local filesystem (adapters/filestore.py).
"""

from __future__ import annotations

from typing import Protocol


class StoragePort(Protocol):
    """Blob storage used by the upload service."""

    def save(self, name: str, data: bytes) -> str:
        """
        Store bytes under name.

        Returns:
            Path of the stored object relative to the storage root.
        """
        ...

    def get(self, path: str) -> bytes:
        """Retrieve bytes by path. Raises FileNotFoundError."""
        ...

    def exists(self, path: str) -> bool:
        """Check if an object exists."""
        ...

    def size(self, path: str) -> int:
        """Size in bytes of a stored object."""
        ...

    def delete(self, path: str) -> None:
        """Delete an object if it exists."""
        ...
