from pathlib import Path

import pytest

from safeinput.components.allowlist import DEFAULT_ALLOWLIST
from safeinput.components.uploads import DEFAULT_UPLOAD_POLICY
from safeinput.rules.loader import load_rules
from safeinput.rules.models import Rules

MINIMAL_RULES = """
project:
  slug: test
  rules_version: "1"
rich_text:
  allowed_tags: [p, a]
  allowed_attributes:
    a: [href]
uploads:
  dangerous_extensions: [php]
  categories:
    image:
      max_bytes: 1024
      mime_types: [image/png]
      extensions: [png]
"""


def write(tmp_path: Path, content: str, name: str = "rules.yaml") -> Path:
    path = tmp_path / name
    path.write_text(content)
    return path


def test_load_project_rules(rules: Rules) -> None:
    assert rules.project.slug == "safeinput"


def test_project_rules_match_defaults(rules: Rules) -> None:
    assert rules.allowlist_config() == DEFAULT_ALLOWLIST
    assert rules.upload_policy() == DEFAULT_UPLOAD_POLICY
    assert set(rules.sanitizer.secret_fields) == {"password", "password_confirmation"}


def test_rules_port(tmp_path: Path) -> None:
    rules = load_rules(write(tmp_path, MINIMAL_RULES))
    assert rules.get_allowed_tags() == frozenset({"p", "a"})
    assert rules.get_allowed_attrs() == {"a": frozenset({"href"})}


def test_defaults_for_optional_sections(tmp_path: Path) -> None:
    rules = load_rules(write(tmp_path, MINIMAL_RULES))
    policy = rules.upload_policy()
    assert policy.max_bytes("image") == 1024
    assert policy.max_bytes("video") == 200 * 1_048_576
    assert policy.full_scan_threshold == 1_048_576
    assert rules.sanitizer.secret_fields == ["password", "password_confirmation"]


def test_markdown_fences_are_stripped(tmp_path: Path) -> None:
    content = f"# Rules\n\nSome prose.\n\n```yaml\n{MINIMAL_RULES}\n```\n\nMore prose.\n"
    rules = load_rules(write(tmp_path, content, "rules.md"))
    assert rules.project.slug == "test"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(write(tmp_path, "project: [unclosed"))


def test_schema_errors(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Rules validation failed"):
        load_rules(write(tmp_path, "project:\n  slug: x\n"))


def test_uppercase_tag_rejected(tmp_path: Path) -> None:
    content = MINIMAL_RULES.replace("allowed_tags: [p, a]", "allowed_tags: [P, a]")
    with pytest.raises(ValueError, match="lowercase"):
        load_rules(write(tmp_path, content))


def test_attributes_for_unlisted_tag_rejected(tmp_path: Path) -> None:
    content = MINIMAL_RULES.replace("allowed_tags: [p, a]", "allowed_tags: [p]")
    with pytest.raises(ValueError, match="not allowed"):
        load_rules(write(tmp_path, content))


def test_bad_attribute_name_rejected(tmp_path: Path) -> None:
    content = MINIMAL_RULES.replace("a: [href]", "a: [HREF]")
    with pytest.raises(ValueError, match="Attribute name"):
        load_rules(write(tmp_path, content))


def test_unknown_upload_category(tmp_path: Path) -> None:
    content = MINIMAL_RULES.replace("    image:", "    archive:")
    with pytest.raises(ValueError, match="Unknown upload categories"):
        load_rules(write(tmp_path, content))
