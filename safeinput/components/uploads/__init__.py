"""
Uploads component - File upload validation and secure storage.
"""

from .component import (
    DANGEROUS_EXTENSION_REASON,
    DEFAULT_UPLOAD_POLICY,
    INVALID_FILE_REASON,
    INVALID_UPLOAD_REASON,
    MALICIOUS_CONTENT_REASON,
    SIGNATURE_MISMATCH_REASON,
    TYPE_NOT_ALLOWED_REASON,
    FileUploadService,
    SecureFileUploadRule,
    category_for_file,
    category_for_mimes,
    contains_embedded_executable,
    generate_secure_filename,
    signature_matches,
    validate_file,
)
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

__all__ = [
    # Entry points
    "validate_file",
    "SecureFileUploadRule",
    "FileUploadService",
    "generate_secure_filename",
    # Checks
    "category_for_file",
    "category_for_mimes",
    "contains_embedded_executable",
    "signature_matches",
    # Models
    "FileCategory",
    "StoredFileInfo",
    "UploadedFile",
    "UploadPolicy",
    "UploadRejectedError",
    "UploadResult",
    "DEFAULT_UPLOAD_POLICY",
    "MEGABYTE",
    # Ports
    "ClockPort",
    "StoragePort",
    # Reasons
    "DANGEROUS_EXTENSION_REASON",
    "INVALID_FILE_REASON",
    "INVALID_UPLOAD_REASON",
    "MALICIOUS_CONTENT_REASON",
    "SIGNATURE_MISMATCH_REASON",
    "TYPE_NOT_ALLOWED_REASON",
]
