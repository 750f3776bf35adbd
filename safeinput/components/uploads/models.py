"""
Uploads component input/output models.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from types import MappingProxyType

MEGABYTE = 1_048_576


class FileCategory(str, Enum):
    """Upload category; `ALL` means detect from the file itself."""

    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    ALL = "all"


@dataclass(frozen=True)
class UploadedFile:
    """
    A file received from a client.

    `filename` and `content_type` are client-supplied and untrusted.
    `error` is set when the transport failed to deliver the file.
    """

    filename: str
    content_type: str
    data: bytes
    error: str | None = None

    @property
    def basename(self) -> str:
        return PurePosixPath(self.filename.replace("\\", "/")).name

    @property
    def stem(self) -> str:
        stem, dot, _ = self.basename.rpartition(".")
        return stem if dot else self.basename

    @property
    def extension(self) -> str:
        """Text after the last dot, as supplied (".htaccess" -> "htaccess")."""
        _, dot, ext = self.basename.rpartition(".")
        return ext if dot else ""

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_valid(self) -> bool:
        return self.error is None


def _freeze(table: Mapping[str, Iterable[str]]) -> Mapping[str, frozenset[str]]:
    return MappingProxyType({key: frozenset(values) for key, values in table.items()})


@dataclass(frozen=True)
class UploadPolicy:
    """
    Upload limits and allow-lists per category.

    Categories missing from a table get no allowed types and
    `default_max_bytes` as size limit.
    """

    allowed_mime_types: Mapping[str, frozenset[str]]
    allowed_extensions: Mapping[str, frozenset[str]]
    max_file_sizes: Mapping[str, int]
    dangerous_extensions: frozenset[str]
    default_max_bytes: int = 200 * MEGABYTE
    full_scan_threshold: int = MEGABYTE

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_mime_types", _freeze(self.allowed_mime_types))
        object.__setattr__(self, "allowed_extensions", _freeze(self.allowed_extensions))
        object.__setattr__(self, "max_file_sizes", MappingProxyType(dict(self.max_file_sizes)))
        object.__setattr__(
            self,
            "dangerous_extensions",
            frozenset(ext.lower() for ext in self.dangerous_extensions),
        )

    def max_bytes(self, category: str) -> int:
        return self.max_file_sizes.get(category, self.default_max_bytes)

    def mime_allowed(self, category: str, mime_type: str) -> bool:
        return mime_type in self.allowed_mime_types.get(category, frozenset())

    def extension_allowed(self, category: str, extension: str) -> bool:
        return extension.lower() in self.allowed_extensions.get(category, frozenset())

    def is_dangerous(self, extension: str) -> bool:
        return extension.lower() in self.dangerous_extensions


@dataclass(frozen=True)
class UploadResult:
    """Output of a successful upload."""

    path: str
    filename: str
    original_name: str
    size: int
    mime_type: str


@dataclass(frozen=True)
class StoredFileInfo:
    """Metadata of a stored upload."""

    path: str
    size: int
    mime_type: str | None
    exists: bool = field(default=True)


class UploadRejectedError(ValueError):
    """Raised by the upload service when a file fails validation."""

    def __init__(self, reason: str, code: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.code = code
