"""
Tests for the rich text and safe text rules.
"""

from __future__ import annotations

import pytest

from safeinput.components.allowlist import AllowlistConfig
from safeinput.components.richtext import (
    RichTextRule,
    SafeTextRule,
    ValidateRichTextInput,
    ValidateSafeTextInput,
    run,
    run_validate,
    validate_rich_text,
)
from safeinput.components.richtext import component as richtext_component
from safeinput.core.entities import FailureCode
from safeinput.core.ports import Validator

# --- Fixtures ---


@pytest.fixture
def rule() -> RichTextRule:
    return RichTextRule()


# --- RichTextRule ---


class TestRichTextRule:
    """Composite rule over the individual checks."""

    def test_is_a_validator(self, rule: RichTextRule) -> None:
        assert isinstance(rule, Validator)

    @pytest.mark.parametrize(
        "value",
        [
            "<p>Hello <strong>world</strong></p>",
            '<p>See <a href="https://example.org/docs" rel="noopener" target="_blank">docs</a></p>',
            '<a href="mailto:hello@company.org">Mail us</a>',
            '<img src="/uploads/a.png" alt="A" width="10" height="10">',
            "<ul><li>one</li><li>two</li></ul>",
            '<table class="t"><thead><tr><th scope="col">H</th></tr></thead>'
            '<tbody><tr><td colspan="2">x</td></tr></tbody></table>',
            "Just text",
        ],
    )
    def test_valid_content(self, rule: RichTextRule, value: str) -> None:
        assert rule.validate(value).valid

    @pytest.mark.parametrize("value", [None, 1, ["<script>x</script>"]])
    def test_non_strings_pass(self, rule: RichTextRule, value: object) -> None:
        assert rule.validate(value).valid

    def test_script_block(self, rule: RichTextRule) -> None:
        assert rule.validate("<script>alert(1)</script>").code == FailureCode.SCRIPT_CONTENT

    def test_event_handler(self, rule: RichTextRule) -> None:
        assert rule.validate("<img src=x onerror=alert(1)>").code == FailureCode.SCRIPT_CONTENT

    def test_base64_image(self, rule: RichTextRule) -> None:
        verdict = rule.validate('<img src="data:image/png;base64,AAAA">')
        assert verdict.code == FailureCode.BASE64_DATA_URI

    def test_disallowed_tag(self, rule: RichTextRule) -> None:
        assert rule.validate("<iframe src='/x'></iframe>").code == FailureCode.DISALLOWED_TAG

    def test_disallowed_attribute(self, rule: RichTextRule) -> None:
        assert rule.validate('<p style="color:red">x</p>').code == FailureCode.DISALLOWED_ATTRIBUTE

    def test_unsafe_url(self, rule: RichTextRule) -> None:
        verdict = rule.validate('<a href="ftp://example.org/file">x</a>')
        assert verdict.code == FailureCode.UNSAFE_URL
        assert verdict.reason == "The :attribute contains potentially unsafe URLs."

    @pytest.mark.parametrize(
        "value",
        [
            '<a href="javascript&colon;alert(1)">x</a>',
            '<a href="&#x6A;avascript&#x3A;alert(1)">x</a>',
            '<a href="&#106;avascript&#58;alert(1)">x</a>',
            '<a href="java&Tab;script&colon;alert(1)">x</a>',
            '<img src="&NewLine;javascript&colon;alert(1)" alt="x">',
        ],
    )
    def test_encoded_javascript_url(self, rule: RichTextRule, value: str) -> None:
        assert rule.validate(value).code == FailureCode.UNSAFE_URL

    def test_encoded_ampersand_in_safe_url(self, rule: RichTextRule) -> None:
        assert rule.validate('<a href="/search?q=1&amp;page=2">x</a>').valid

    def test_parsed_attribute_values_are_checked(
        self, rule: RichTextRule, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(richtext_component, "find_unsafe_urls", lambda markup: [])
        verdict = rule.validate('<a href="&#x6A;avascript&#x3A;alert(1)">x</a>')
        assert verdict.code == FailureCode.UNSAFE_URL

    def test_non_base64_data_uri_is_unsafe_url(self, rule: RichTextRule) -> None:
        assert rule.validate('<a href="data:text/plain,hi">x</a>').code == FailureCode.UNSAFE_URL

    def test_malformed_document(self, rule: RichTextRule, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(richtext_component, "parse_fragment", lambda fragment: None)
        verdict = rule.validate("<p>x</p>")
        assert verdict.code == FailureCode.MALFORMED_HTML
        assert verdict.reason == "The :attribute contains invalid HTML structure."

    def test_internal_failure_rejects(self, rule: RichTextRule, monkeypatch: pytest.MonkeyPatch) -> None:
        def explode(markup: str) -> list[str]:
            raise RuntimeError("boom")

        monkeypatch.setattr(richtext_component, "find_unsafe_urls", explode)
        assert rule.validate("<p>x</p>").code == FailureCode.MALFORMED_HTML

    def test_stops_at_first_failure(self, rule: RichTextRule) -> None:
        # Script content, a disallowed tag and an unsafe URL: only the first is reported.
        verdict = rule.validate('<script>x</script><iframe></iframe><a href="ftp://x.org">y</a>')
        assert verdict.code == FailureCode.SCRIPT_CONTENT

    def test_custom_config(self) -> None:
        rule = RichTextRule(AllowlistConfig.from_tables(["b"]))
        assert rule.validate("<b>x</b>").valid
        assert rule.validate("<p>x</p>").code == FailureCode.DISALLOWED_TAG


def test_validate_rich_text_binds_attribute() -> None:
    verdict = validate_rich_text("bio", "<iframe></iframe>")
    assert verdict.attribute == "bio"
    assert verdict.message == "The bio contains HTML tags that are not allowed."


# --- SafeTextRule ---


class TestSafeTextRule:
    def test_plain_text(self) -> None:
        assert SafeTextRule().validate("Fish & chips").valid

    def test_comparison_operators_count_as_markup(self) -> None:
        assert not SafeTextRule().validate("3 > 2").valid

    def test_angle_brackets(self) -> None:
        verdict = SafeTextRule().validate("<b>")
        assert verdict.code == FailureCode.UNSAFE_TEXT
        assert verdict.reason == "The :attribute format is invalid."

    def test_multiline(self) -> None:
        assert SafeTextRule().validate("line one\nline two").valid
        assert not SafeTextRule().validate("line one\n<b>two</b>").valid


# --- Entry Points ---


class FakeRules:
    def get_allowed_tags(self) -> frozenset[str]:
        return frozenset({"em"})

    def get_allowed_attrs(self) -> dict[str, frozenset[str]]:
        return {}


def test_run_validate_with_rules_port() -> None:
    result = run_validate(ValidateRichTextInput(attribute="summary", value="<em>x</em>"), rules=FakeRules())
    assert result.is_valid

    result = run_validate(ValidateRichTextInput(attribute="summary", value="<p>x</p>"), rules=FakeRules())
    assert not result.is_valid
    assert result.message == "The summary contains HTML tags that are not allowed."


def test_run_dispatch() -> None:
    assert run(ValidateRichTextInput(attribute="body", value="<p>x</p>")).is_valid
    assert not run(ValidateSafeTextInput(attribute="title", value="<p>x</p>")).is_valid


def test_run_unknown_input() -> None:
    with pytest.raises(ValueError):
        run("not an input")  # type: ignore[arg-type]
