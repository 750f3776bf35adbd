"""
Validation API routes.

Exposes the field safety rules, the sanitizer and the upload checks.
Invalid input is a normal 200 response with `valid: false`.
"""

from dataclasses import replace

from fastapi import APIRouter, Depends, File, Form, UploadFile

from safeinput.api.deps import (
    get_field_sanitizer,
    get_rules,
    get_upload_policy,
    get_upload_service,
)
from safeinput.api.schemas import (
    FieldRequest,
    SanitizeRequest,
    SanitizeResponse,
    UploadResponse,
    UrlRequest,
    UrlResponse,
    VerdictResponse,
)
from safeinput.components.input_sanitizer import FieldSanitizer
from safeinput.components.richtext import (
    ValidateRichTextInput,
    ValidateSafeTextInput,
    run_validate,
    run_validate_safe_text,
)
from safeinput.components.uploads import (
    FileCategory,
    FileUploadService,
    UploadedFile,
    UploadPolicy,
    UploadRejectedError,
    category_for_file,
    validate_file,
)
from safeinput.components.urls import classify_url, is_safe_url
from safeinput.rules.models import Rules

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 1024


def read_limited(file: UploadFile, limit: int) -> bytes:
    """Read at most `limit` + 1 bytes, enough to tell that an upload is oversized."""
    buffer = bytearray()
    while len(buffer) <= limit:
        chunk = file.file.read(min(READ_CHUNK_BYTES, limit + 1 - len(buffer)))
        if not chunk:
            break
        buffer.extend(chunk)
    return bytes(buffer)


@router.post("/rich-text", response_model=VerdictResponse)
def validate_rich_text_field(
    body: FieldRequest,
    rules: Rules = Depends(get_rules),
) -> VerdictResponse:
    """Validate a rich text (limited HTML) value."""
    result = run_validate(ValidateRichTextInput(attribute=body.attribute, value=body.value), rules=rules)
    return VerdictResponse.from_verdict(result.verdict)


@router.post("/text", response_model=VerdictResponse)
def validate_text_field(body: FieldRequest) -> VerdictResponse:
    """Validate a plain text value (no markup)."""
    result = run_validate_safe_text(ValidateSafeTextInput(attribute=body.attribute, value=body.value))
    return VerdictResponse.from_verdict(result.verdict)


@router.post("/url", response_model=UrlResponse)
def check_url(body: UrlRequest) -> UrlResponse:
    """Classify a link target and report whether it may be embedded."""
    return UrlResponse(
        url=body.url,
        classification=classify_url(body.url).value,
        safe=is_safe_url(body.url),
    )


@router.post("/sanitize", response_model=SanitizeResponse)
def sanitize_fields(
    body: SanitizeRequest,
    sanitizer: FieldSanitizer = Depends(get_field_sanitizer),
) -> SanitizeResponse:
    """Normalize a payload the way forms do before validation."""
    if body.secret_fields:
        sanitizer = sanitizer.with_secret_fields(body.secret_fields)
    return SanitizeResponse(fields=sanitizer.sanitize(body.fields))


@router.post("/upload", response_model=UploadResponse)
def validate_upload(
    file: UploadFile = File(...),
    category: FileCategory = Form(FileCategory.ALL),
    store: bool = Form(False),
    policy: UploadPolicy = Depends(get_upload_policy),
    service: FileUploadService = Depends(get_upload_service),
) -> UploadResponse:
    """Check an uploaded file; with `store` set, a valid file is also saved."""
    uploaded = UploadedFile(
        filename=file.filename or "unnamed",
        content_type=file.content_type or "application/octet-stream",
        data=b"",
    )
    resolved = category_for_file(uploaded) if category == FileCategory.ALL else category
    # Content past the category limit is never buffered; the size check rejects it.
    uploaded = replace(uploaded, data=read_limited(file, policy.max_bytes(resolved.value)))

    if not store:
        verdict = validate_file(uploaded, resolved, policy)
        return UploadResponse(**VerdictResponse.from_verdict(verdict).model_dump(), category=resolved.value)

    try:
        result = service.upload(uploaded, resolved)
    except UploadRejectedError as e:
        return UploadResponse(valid=False, code=e.code, message=e.reason, category=resolved.value)

    return UploadResponse(valid=True, category=resolved.value, path=result.path, filename=result.filename)
