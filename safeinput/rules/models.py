from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from safeinput.components.allowlist import AllowlistConfig
from safeinput.components.uploads import MEGABYTE, UploadPolicy


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RichTextRules(BaseModel):
    allowed_tags: list[str]
    allowed_attributes: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("allowed_tags")
    @classmethod
    def lowercase_tags(cls, tags: list[str]) -> list[str]:
        for tag in tags:
            if tag != tag.lower():
                raise ValueError(f"Tag names must be lowercase: {tag}")
        return tags

    @model_validator(mode="after")
    def attributes_belong_to_allowed_tags(self) -> "RichTextRules":
        unknown = sorted(set(self.allowed_attributes) - set(self.allowed_tags))
        if unknown:
            raise ValueError(f"Attributes declared for tags that are not allowed: {unknown}")
        return self


class SanitizerRules(BaseModel):
    secret_fields: list[str] = Field(default_factory=lambda: ["password", "password_confirmation"])


class UploadCategoryRules(BaseModel):
    max_bytes: int = Field(gt=0)
    mime_types: list[str]
    extensions: list[str]


class UploadsRules(BaseModel):
    categories: dict[str, UploadCategoryRules]
    dangerous_extensions: list[str]
    default_max_bytes: int = Field(default=200 * MEGABYTE, gt=0)
    full_scan_threshold_bytes: int = Field(default=MEGABYTE, gt=0)

    @field_validator("categories")
    @classmethod
    def known_categories(cls, categories: dict[str, UploadCategoryRules]) -> dict[str, UploadCategoryRules]:
        unknown = sorted(set(categories) - {"image", "document", "video", "audio"})
        if unknown:
            raise ValueError(f"Unknown upload categories: {unknown}")
        return categories


class Rules(BaseModel):
    project: ProjectRules
    rich_text: RichTextRules
    sanitizer: SanitizerRules = Field(default_factory=SanitizerRules)
    uploads: UploadsRules

    model_config = ConfigDict(frozen=True)

    # RulesPort for the richtext component

    def get_allowed_tags(self) -> frozenset[str]:
        return frozenset(self.rich_text.allowed_tags)

    def get_allowed_attrs(self) -> dict[str, frozenset[str]]:
        return {tag: frozenset(attrs) for tag, attrs in self.rich_text.allowed_attributes.items()}

    def allowlist_config(self) -> AllowlistConfig:
        return AllowlistConfig.from_tables(self.rich_text.allowed_tags, self.rich_text.allowed_attributes)

    def upload_policy(self) -> UploadPolicy:
        categories = self.uploads.categories
        return UploadPolicy(
            allowed_mime_types={name: cat.mime_types for name, cat in categories.items()},
            allowed_extensions={name: cat.extensions for name, cat in categories.items()},
            max_file_sizes={name: cat.max_bytes for name, cat in categories.items()},
            dangerous_extensions=frozenset(self.uploads.dangerous_extensions),
            default_max_bytes=self.uploads.default_max_bytes,
            full_scan_threshold=self.uploads.full_scan_threshold_bytes,
        )
