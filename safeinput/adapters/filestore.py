"""
Local filesystem implementation of the upload StoragePort.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

STORED_FILE_MODE = 0o644


class FileSystemStore:
    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path).resolve()
        if not self.base_path.exists():
            os.makedirs(self.base_path, exist_ok=True)

    def _safe_path(self, path: str) -> Path:
        # Prevent traversal
        target = (self.base_path / path).resolve()
        if target != self.base_path and self.base_path not in target.parents:
            raise ValueError(f"Path traversal attempt detected: {path}")
        return target

    def save(self, name: str, data: bytes) -> str:
        """Save bytes and return the path relative to the storage root."""
        target = self._safe_path(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        os.chmod(target, STORED_FILE_MODE)
        return target.relative_to(self.base_path).as_posix()

    def get(self, path: str) -> bytes:
        """Retrieve bytes by path. Raises FileNotFoundError."""
        target = self._safe_path(path)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        with open(target, "rb") as f:
            return f.read()

    def exists(self, path: str) -> bool:
        try:
            return self._safe_path(path).is_file()
        except ValueError:
            logger.warning("Rejected storage lookup outside root: %s", path)
            return False

    def size(self, path: str) -> int:
        target = self._safe_path(path)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return target.stat().st_size

    def delete(self, path: str) -> None:
        target = self._safe_path(path)
        if target.is_file():
            os.remove(target)
