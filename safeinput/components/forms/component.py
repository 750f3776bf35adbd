"""
Forms component - Declarative secure forms.

A form sanitizes the whole payload, then validates each declared field.
Field names may be dotted paths into nested data, with `*` matching every
item of a list or mapping (`content.sections.*.body`, `tags.*`).

Invariants:
- I1: Validation always sees sanitized values
- I2: At most one message per field (first failing rule wins)
- I3: Optional fields with empty values skip their rules
- I4: Only declared fields appear in the validated data
- I5: Rules built with the default allow-list or upload policy use the
  ones the form was created with
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from safeinput.components.allowlist import DEFAULT_ALLOWLIST, AllowlistConfig
from safeinput.components.input_sanitizer import FieldSanitizer
from safeinput.components.richtext import RichTextRule
from safeinput.components.uploads import DEFAULT_UPLOAD_POLICY, SecureFileUploadRule, UploadPolicy
from safeinput.core.entities import ATTRIBUTE_PLACEHOLDER, FailureCode, ValidationVerdict
from safeinput.core.ports import Validator

from .models import DEFAULT_MESSAGES, Field, FormResult

logger = logging.getLogger(__name__)

WILDCARD = "*"

Path = tuple[str | int, ...]


def is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def expand_field(data: Any, name: str) -> list[tuple[Path, Any, bool]]:
    """
    Resolve a declared field name against a payload.

    Returns:
        (path, value, present) per concrete field. A wildcard over a
        missing or empty container resolves to nothing; any other
        missing segment resolves to one absent entry.
    """
    resolved: list[tuple[Path, Any, bool]] = [((), data, True)]

    for segment in name.split("."):
        expanded: list[tuple[Path, Any, bool]] = []
        for path, node, present in resolved:
            if segment == WILDCARD:
                if isinstance(node, Mapping):
                    expanded.extend((path + (key,), item, True) for key, item in node.items())
                elif isinstance(node, list):
                    expanded.extend((path + (index,), item, True) for index, item in enumerate(node))
            elif present and isinstance(node, Mapping) and segment in node:
                expanded.append((path + (segment,), node[segment], True))
            elif present and isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
                index = int(segment)
                expanded.append((path + (index,), node[index], True))
            else:
                expanded.append((path + (segment,), None, False))
        resolved = expanded

    return resolved


def format_path(path: Path) -> str:
    return ".".join(str(segment) for segment in path)


def _pick(source: Any, paths: Sequence[Path]) -> Any:
    # Rebuild the parts of `source` covered by `paths`; list items stay in order.
    if any(not path for path in paths):
        return source

    groups: dict[str | int, list[Path]] = {}
    for path in paths:
        groups.setdefault(path[0], []).append(path[1:])

    if isinstance(source, list):
        return [_pick(source[index], groups[index]) for index in sorted(groups, key=int)]
    return {key: _pick(source[key], rest) for key, rest in groups.items()}


def _secret_key(name: str) -> str | None:
    # Secrecy follows the nearest enclosing key, so only the last named segment counts.
    for segment in reversed(name.split(".")):
        if segment != WILDCARD:
            return segment
    return None


class SecureForm:
    """
    Base class for forms.

    Subclasses declare `fields` and may override message templates through
    `messages`, keyed by failure code value:

        class ContactForm(SecureForm):
            fields = {
                "name": safe_text_rules(100),
                "email": email_rules(),
                "message": text_rules(5000),
                "tags.*": text_rules(30, required=False),
            }
            messages = {"required": "Please fill in :attribute."}

    Args:
        sanitizer: Payload sanitizer (secret field names are added to it).
        allowlist: Allow-list for rich text rules built without one.
        policy: Upload policy for upload rules built without one.
    """

    fields: ClassVar[dict[str, Field]] = {}
    messages: ClassVar[dict[str, str]] = {}

    def __init__(
        self,
        sanitizer: FieldSanitizer | None = None,
        allowlist: AllowlistConfig | None = None,
        policy: UploadPolicy | None = None,
    ) -> None:
        sanitizer = sanitizer or FieldSanitizer()
        secret = [
            key
            for name, declared in self.fields.items()
            if declared.is_secret and (key := _secret_key(name)) is not None
        ]
        self.sanitizer = sanitizer.with_secret_fields(secret)
        self.allowlist = allowlist or DEFAULT_ALLOWLIST
        self.policy = policy or DEFAULT_UPLOAD_POLICY
        self.bound_fields = {name: self._bind(declared) for name, declared in self.fields.items()}

    def _bind(self, declared: Field) -> Field:
        rules = [self._bind_rule(rule) for rule in declared.rules]
        return Field(rules, required=declared.required, is_secret=declared.is_secret, label=declared.label)

    def _bind_rule(self, rule: Validator) -> Validator:
        if isinstance(rule, RichTextRule) and rule.config is DEFAULT_ALLOWLIST:
            return RichTextRule(self.allowlist)
        if isinstance(rule, SecureFileUploadRule) and rule.policy is DEFAULT_UPLOAD_POLICY:
            return SecureFileUploadRule(rule.category, self.policy)
        return rule

    def validate(self, data: Mapping[str, Any]) -> FormResult:
        clean = self.sanitizer.sanitize(data)
        present: list[Path] = []
        errors: dict[str, list[str]] = {}

        for name, declared in self.bound_fields.items():
            for path, value, found in expand_field(clean, name):
                key = format_path(path)
                message = self._check_field(key, declared, value)
                if message is not None:
                    errors[key] = [message]
                elif found:
                    present.append(path)

        if errors:
            logger.debug("Form %s rejected fields: %s", type(self).__name__, sorted(errors))
            return FormResult(valid=False, errors=errors)

        return FormResult(valid=True, data=_pick(clean, present) if present else {})

    def _check_field(self, name: str, declared: Field, value: Any) -> str | None:
        label = declared.label_for(name)

        if is_empty(value):
            if declared.required:
                return self._render(DEFAULT_MESSAGES[FailureCode.REQUIRED], FailureCode.REQUIRED, label)
            return None

        for rule in declared.rules:
            verdict = rule.validate(value)
            if not verdict.valid:
                return self._message(verdict, rule, label)

        return None

    def _message(self, verdict: ValidationVerdict, rule: Validator, label: str) -> str:
        template = verdict.reason or DEFAULT_MESSAGES.get(verdict.code, "")
        message = self._render(template, verdict.code, label)
        for key, param in getattr(rule, "params", {}).items():
            message = message.replace(f":{key}", str(param))
        return message

    def _render(self, template: str, code: FailureCode | None, label: str) -> str:
        if code is not None:
            template = self.messages.get(code.value, template)
        return template.replace(ATTRIBUTE_PLACEHOLDER, label)
