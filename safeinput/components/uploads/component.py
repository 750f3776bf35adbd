"""
Uploads component - File upload safety checks and storage.

Checks run in order and stop at the first failure:
1. transport error
2. size limit for the category
3. MIME allow-list, falling back to the extension allow-list
4. dangerous extension
5. magic-byte signature (images and documents)
6. embedded executable scan (images)

Invariants:
- I1: Client-supplied names never reach storage unsanitized
- I2: A rejected file is never stored
- I3: Exactly one reason is reported per rejected file
"""

from __future__ import annotations

import logging
import mimetypes
import re
import secrets
import string
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from safeinput.core.entities import FailureCode, ValidationVerdict

from .models import (
    MEGABYTE,
    FileCategory,
    StoredFileInfo,
    UploadedFile,
    UploadPolicy,
    UploadRejectedError,
    UploadResult,
)
from .ports import ClockPort, StoragePort

logger = logging.getLogger(__name__)

# --- Default Configuration ---

DEFAULT_UPLOAD_POLICY = UploadPolicy(
    allowed_mime_types={
        "image": [
            "image/jpeg",
            "image/jpg",
            "image/png",
            "image/gif",
            "image/webp",
            "image/svg+xml",
            "image/avif",
            "image/heic",
            "image/heif",
            "image/bmp",
            "image/x-icon",
        ],
        "document": [
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/vnd.ms-excel",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "application/vnd.ms-powerpoint",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
            "text/plain",
            "text/csv",
        ],
        "video": [
            "video/mp4",
            "video/mpeg",
            "video/quicktime",
            "video/x-msvideo",
            "video/x-ms-wmv",
            "video/x-flv",
            "video/webm",
            "video/ogg",
            "video/3gpp",
            "video/3gpp2",
            "video/x-matroska",
            "video/x-m4v",
            "video/MP2T",
            "application/octet-stream",
        ],
        "audio": [
            "audio/mpeg",
            "audio/wav",
            "audio/ogg",
            "audio/mp4",
            "audio/x-m4a",
            "audio/aac",
            "audio/flac",
            "audio/webm",
        ],
    },
    allowed_extensions={
        "video": ["mp4", "mov", "webm", "avi", "mkv", "wmv", "flv", "m4v", "3gp", "mpeg", "mpg", "ogv"],
        "image": ["jpg", "jpeg", "png", "gif", "webp", "svg", "bmp", "ico", "avif", "heic", "heif"],
        "audio": ["mp3", "wav", "ogg", "m4a", "aac", "flac", "webm"],
        "document": ["pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt", "csv"],
    },
    max_file_sizes={
        "image": 50 * MEGABYTE,
        "document": 50 * MEGABYTE,
        "video": 200 * MEGABYTE,
        "audio": 50 * MEGABYTE,
    },
    dangerous_extensions=frozenset(
        {
            "php", "phtml", "php3", "php4", "php5", "phar", "exe", "bat", "cmd", "com",
            "scr", "vbs", "js", "jar", "asp", "aspx", "jsp", "pl", "py", "rb", "sh",
            "htaccess", "htpasswd", "ini", "conf", "config", "sql",
        }
    ),
)

INVALID_FILE_REASON = "The :attribute must be a valid file."
INVALID_UPLOAD_REASON = "Invalid file upload"
TYPE_NOT_ALLOWED_REASON = "File type not allowed"
DANGEROUS_EXTENSION_REASON = "File extension not allowed for security reasons"
SIGNATURE_MISMATCH_REASON = "File signature does not match declared type"
MALICIOUS_CONTENT_REASON = "File contains potentially malicious content"

# Form "mimes" lists map onto a category in this order.
MIMES_CATEGORY_ORDER: tuple[tuple[FileCategory, frozenset[str]], ...] = (
    (FileCategory.IMAGE, frozenset({"jpeg", "jpg", "png", "gif", "webp", "svg"})),
    (FileCategory.DOCUMENT, frozenset({"pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx"})),
    (FileCategory.VIDEO, frozenset({"mp4", "mov", "avi", "wmv", "flv", "webm"})),
    (FileCategory.AUDIO, frozenset({"mp3", "wav", "ogg"})),
)

# Auto-detection: MIME prefix or extension, in this order.
DETECTION_ORDER: tuple[tuple[FileCategory, str, frozenset[str]], ...] = (
    (
        FileCategory.IMAGE,
        "image/",
        frozenset({"jpg", "jpeg", "png", "gif", "webp", "svg", "avif", "heic", "heif", "bmp"}),
    ),
    (
        FileCategory.VIDEO,
        "video/",
        frozenset(
            {"mp4", "mov", "webm", "avi", "mkv", "wmv", "flv", "m4v", "3gp", "mpeg", "mpg", "ogv", "m4a"}
        ),
    ),
    (FileCategory.AUDIO, "audio/", frozenset({"mp3", "wav", "ogg", "aac", "flac"})),
)

SIGNATURE_HEADER_BYTES = 16
EXECUTABLE_HEADER_BYTES = 1024

FILE_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    "image": (
        b"\xff\xd8\xff",  # jpeg
        b"\x89PNG\r\n\x1a\n",  # png
        b"GIF87a",
        b"GIF89a",
        b"RIFF",  # webp
        b"WEBP",
        b"<?xml",  # svg
        b"<svg",
    ),
    "document": (
        b"%PDF-",
        b"PK\x03\x04",  # office open xml
        b"PK\x05\x06",
        b"PK\x07\x08",
        b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",  # legacy office
    ),
}

PLAIN_TEXT_MIME_TYPES = frozenset({"text/plain", "text/csv"})
PLAIN_TEXT_EXTENSIONS = frozenset({"txt", "csv"})

EXECUTABLE_START_SIGNATURES: tuple[bytes, ...] = (
    b"MZ",  # DOS/Windows
    b"\x7fELF",
    b"\xca\xfe\xba\xbe",  # Java class
    b"#!",
)

SCRIPT_SIGNATURES: tuple[bytes, ...] = (
    b"<?php",
    b"<script",
    b"base64_decode",
    b"eval(",
)

SVG_MIME_TYPE = "image/svg+xml"

SECURE_NAME_PATTERN = re.compile(r"[^a-zA-Z0-9\-_]")
SECURE_NAME_MAX_LENGTH = 50
RANDOM_SUFFIX_LENGTH = 16
RANDOM_ALPHABET = string.ascii_letters + string.digits


# --- Categories ---


def category_for_mimes(mimes: Iterable[str]) -> FileCategory:
    """Category for a form's list of allowed extensions; document by default."""
    requested = {mime.lower() for mime in mimes}
    for category, known in MIMES_CATEGORY_ORDER:
        if requested & known:
            return category
    return FileCategory.DOCUMENT


def category_for_file(file: UploadedFile) -> FileCategory:
    """Detect a file's category from its MIME type or extension."""
    mime_type = file.content_type or ""
    extension = file.extension.lower()
    for category, prefix, extensions in DETECTION_ORDER:
        if mime_type.startswith(prefix) or extension in extensions:
            return category
    return FileCategory.DOCUMENT


def _category_key(category: FileCategory | str) -> str:
    if isinstance(category, FileCategory):
        return category.value
    return category


# --- Content Checks ---


def _is_plain_text_document(file: UploadedFile) -> bool:
    return (
        file.content_type in PLAIN_TEXT_MIME_TYPES
        or file.extension.lower() in PLAIN_TEXT_EXTENSIONS
    )


def _is_plain_text(data: bytes) -> bool:
    if b"\0" in data:
        return False
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def signature_matches(file: UploadedFile, category: str) -> bool:
    """
    Check the file's leading bytes against the category's known signatures.

    Categories without signatures always match. Plain text documents have
    no magic bytes and must instead be NUL-free UTF-8.
    """
    signatures = FILE_SIGNATURES.get(category)
    if signatures is None:
        return True

    header = file.data[:SIGNATURE_HEADER_BYTES]
    if header.startswith(signatures):
        return True

    if category == FileCategory.DOCUMENT.value and _is_plain_text_document(file):
        return _is_plain_text(file.data)

    return False


def contains_embedded_executable(file: UploadedFile, policy: UploadPolicy) -> bool:
    """
    Look for executable headers or script payloads inside an image.

    The full content is only scanned for SVGs and files below the policy's
    full-scan threshold.
    """
    header = file.data[:EXECUTABLE_HEADER_BYTES]
    if header.startswith(EXECUTABLE_START_SIGNATURES):
        return True

    if file.content_type == SVG_MIME_TYPE or file.size < policy.full_scan_threshold:
        return any(signature in file.data for signature in SCRIPT_SIGNATURES)

    return False


def _format_megabytes(size: int) -> str:
    return f"{size / MEGABYTE:g}"


# --- Validation ---


def validate_file(
    file: UploadedFile,
    category: FileCategory | str = FileCategory.IMAGE,
    policy: UploadPolicy | None = None,
) -> ValidationVerdict:
    """
    Validate an uploaded file for a category.

    Args:
        file: The uploaded file.
        category: Target category; `all` detects it from the file.
        policy: Upload policy (defaults to DEFAULT_UPLOAD_POLICY).

    Returns:
        ValidationVerdict with the first failing check's reason.
    """
    policy = policy or DEFAULT_UPLOAD_POLICY

    if category == FileCategory.ALL:
        category = category_for_file(file)
    key = _category_key(category)

    if not file.is_valid:
        logger.debug("Upload rejected: transport error")
        return ValidationVerdict.fail(FailureCode.INVALID_FILE, INVALID_UPLOAD_REASON)

    max_bytes = policy.max_bytes(key)
    if file.size > max_bytes:
        logger.debug("Upload rejected: %d bytes over %s limit", file.size, key)
        return ValidationVerdict.fail(
            FailureCode.FILE_TOO_LARGE,
            f"File size exceeds {_format_megabytes(max_bytes)}MB limit",
        )

    extension = file.extension.lower()
    if not policy.mime_allowed(key, file.content_type):
        if not policy.extension_allowed(key, extension):
            logger.debug("Upload rejected: type not allowed for %s", key)
            return ValidationVerdict.fail(FailureCode.FILE_TYPE_NOT_ALLOWED, TYPE_NOT_ALLOWED_REASON)
        logger.info(
            "File validated by extension fallback: file=%s mime=%s extension=%s category=%s",
            file.basename,
            file.content_type,
            extension,
            key,
        )

    if policy.is_dangerous(extension):
        logger.debug("Upload rejected: dangerous extension")
        return ValidationVerdict.fail(FailureCode.DANGEROUS_EXTENSION, DANGEROUS_EXTENSION_REASON)

    if not signature_matches(file, key):
        logger.debug("Upload rejected: signature mismatch for %s", key)
        return ValidationVerdict.fail(FailureCode.SIGNATURE_MISMATCH, SIGNATURE_MISMATCH_REASON)

    if key == FileCategory.IMAGE.value and contains_embedded_executable(file, policy):
        logger.debug("Upload rejected: embedded executable content")
        return ValidationVerdict.fail(FailureCode.MALICIOUS_CONTENT, MALICIOUS_CONTENT_REASON)

    return ValidationVerdict.ok()


class SecureFileUploadRule:
    """Validator for upload fields."""

    def __init__(
        self,
        category: FileCategory | str = FileCategory.IMAGE,
        policy: UploadPolicy | None = None,
    ) -> None:
        self.category = category
        self.policy = policy or DEFAULT_UPLOAD_POLICY

    def validate(self, value: Any) -> ValidationVerdict:
        if not isinstance(value, UploadedFile):
            return ValidationVerdict.fail(FailureCode.INVALID_FILE, INVALID_FILE_REASON)
        return validate_file(value, self.category, self.policy)


# --- Storage ---


def generate_secure_filename(file: UploadedFile) -> str:
    """
    Build a storage name: sanitized stem, random suffix, original extension.

    Example: "my photo!.JPG" -> "myphoto_k3F9aQ2xLm0ZpR7t.JPG"
    """
    safe_name = SECURE_NAME_PATTERN.sub("", file.stem)[:SECURE_NAME_MAX_LENGTH]
    unique_id = "".join(secrets.choice(RANDOM_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f"{safe_name}_{unique_id}.{file.extension}"


class FileUploadService:
    """
    Validates and stores uploads.

    Stored layout: {folder}/{YYYY}/{MM}/{secure filename}
    """

    def __init__(
        self,
        storage: StoragePort,
        policy: UploadPolicy | None = None,
        clock: ClockPort | None = None,
    ) -> None:
        self.storage = storage
        self.policy = policy or DEFAULT_UPLOAD_POLICY
        self.clock = clock

    def _now(self) -> datetime:
        if self.clock is not None:
            return self.clock.now_utc()
        return datetime.now(UTC)

    def upload(
        self,
        file: UploadedFile,
        category: FileCategory | str = FileCategory.IMAGE,
        folder: str = "uploads",
    ) -> UploadResult:
        """
        Validate and store a file.

        Raises:
            UploadRejectedError: If the file fails validation.
        """
        verdict = validate_file(file, category, self.policy)
        if not verdict.valid:
            code = verdict.code.value if verdict.code else None
            raise UploadRejectedError(verdict.message or INVALID_UPLOAD_REASON, code=code)

        filename = generate_secure_filename(file)
        now = self._now()
        path = f"{folder.strip('/')}/{now:%Y}/{now:%m}/{filename}"

        stored_path = self.storage.save(path, file.data)

        logger.info(
            "File uploaded successfully: original_name=%s stored_path=%s size=%d mime_type=%s",
            file.basename,
            stored_path,
            file.size,
            file.content_type,
        )

        return UploadResult(
            path=stored_path,
            filename=filename,
            original_name=file.basename,
            size=file.size,
            mime_type=file.content_type,
        )

    def delete(self, path: str) -> bool:
        """Delete a stored upload. Returns False if it did not exist."""
        if not self.storage.exists(path):
            return False
        self.storage.delete(path)
        logger.info("File deleted: path=%s", path)
        return True

    def file_info(self, path: str) -> StoredFileInfo | None:
        """Metadata for a stored upload, or None if missing."""
        if not self.storage.exists(path):
            return None
        mime_type, _ = mimetypes.guess_type(path)
        return StoredFileInfo(path=path, size=self.storage.size(path), mime_type=mime_type)
