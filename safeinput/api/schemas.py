from typing import Any

from pydantic import BaseModel, Field

from safeinput.core.entities import ValidationVerdict


class FieldRequest(BaseModel):
    attribute: str = "content"
    value: Any = None


class UrlRequest(BaseModel):
    url: str


class SanitizeRequest(BaseModel):
    fields: dict[str, Any]
    secret_fields: list[str] = Field(default_factory=list)


class VerdictResponse(BaseModel):
    valid: bool
    code: str | None = None
    message: str | None = None

    @classmethod
    def from_verdict(cls, verdict: ValidationVerdict) -> "VerdictResponse":
        return cls(
            valid=verdict.valid,
            code=verdict.code.value if verdict.code else None,
            message=verdict.message,
        )


class UrlResponse(BaseModel):
    url: str
    classification: str
    safe: bool


class SanitizeResponse(BaseModel):
    fields: dict[str, Any]


class UploadResponse(VerdictResponse):
    category: str
    path: str | None = None
    filename: str | None = None
