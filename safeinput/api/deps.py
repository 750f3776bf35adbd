import os
from collections.abc import Awaitable, Callable
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Request

from safeinput.adapters.filestore import FileSystemStore
from safeinput.components.allowlist import AllowlistConfig
from safeinput.components.forms import FormResult, SecureForm
from safeinput.components.input_sanitizer import FieldSanitizer
from safeinput.components.uploads import FileUploadService, UploadPolicy
from safeinput.rules.loader import load_rules
from safeinput.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(os.environ.get("SAFEINPUT_RULES_PATH", self.base_dir / "rules.yaml"))
        self.upload_dir = Path(os.environ.get("SAFEINPUT_UPLOAD_DIR", "./data/uploads"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


def get_allowlist(rules: Rules = Depends(get_rules)) -> AllowlistConfig:
    return rules.allowlist_config()


def get_upload_policy(rules: Rules = Depends(get_rules)) -> UploadPolicy:
    return rules.upload_policy()


def get_field_sanitizer(rules: Rules = Depends(get_rules)) -> FieldSanitizer:
    return FieldSanitizer(rules.sanitizer.secret_fields)


# --- Storage ---
def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(str(settings.upload_dir))


def get_upload_service(
    storage: FileSystemStore = Depends(get_file_store),
    policy: UploadPolicy = Depends(get_upload_policy),
) -> FileUploadService:
    return FileUploadService(storage, policy)


# --- Forms ---
class FormValidationError(Exception):
    """Raised by form dependencies; rendered as 422 {"errors": {...}}."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("Form validation failed")
        self.errors = errors


class InvalidPayloadError(Exception):
    """Raised when a form body is not a JSON object."""


def form_dependency(form_cls: type[SecureForm]) -> Callable[..., Awaitable[FormResult]]:
    """
    Build a dependency that validates the JSON body with `form_cls`.

    The form gets the sanitizer, allow-list and upload policy from rules.yaml.

    The endpoint only runs when the form is valid and receives the FormResult.
    """

    async def dependency(
        request: Request,
        sanitizer: FieldSanitizer = Depends(get_field_sanitizer),
        allowlist: AllowlistConfig = Depends(get_allowlist),
        policy: UploadPolicy = Depends(get_upload_policy),
    ) -> FormResult:
        try:
            payload = await request.json()
        except ValueError as e:
            raise InvalidPayloadError("Request body must be valid JSON") from e
        if not isinstance(payload, dict):
            raise InvalidPayloadError("Request body must be a JSON object")

        result = form_cls(sanitizer, allowlist=allowlist, policy=policy).validate(payload)
        if not result.valid:
            raise FormValidationError(result.errors)
        return result

    return dependency
