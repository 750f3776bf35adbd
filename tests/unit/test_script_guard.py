"""
Tests for the script guard (inline script vector detection).
"""

from __future__ import annotations

import pytest

from safeinput.components.script_guard import SCRIPT_CHECKS, ScriptDetector, detect
from safeinput.core.entities import FailureCode
from safeinput.core.ports import Validator


class TestDetect:
    """detect() over single values."""

    @pytest.mark.parametrize(
        "value",
        [
            "Hello world",
            "<p>Plain <strong>markup</strong></p>",
            "Read the onboarding guide",
            "Use the data: section below",
            "",
        ],
    )
    def test_clean_values_pass(self, value: str) -> None:
        assert detect(value).valid

    @pytest.mark.parametrize("value", [None, 42, 3.5, ["<script>x</script>"], {"a": "javascript:x"}])
    def test_non_strings_pass(self, value: object) -> None:
        assert detect(value).valid

    def test_script_block(self) -> None:
        verdict = detect("<p>Hi</p><script>alert(1)</script>")
        assert not verdict.valid
        assert verdict.code == FailureCode.SCRIPT_CONTENT
        assert verdict.reason == "The :attribute contains script tags which are not allowed."

    def test_script_block_is_case_insensitive_and_multiline(self) -> None:
        verdict = detect("<SCRIPT type='text/javascript'>\nvar a = 1;\n</SCRIPT>")
        assert verdict.code == FailureCode.SCRIPT_CONTENT

    def test_unclosed_script_tag_is_not_a_script_block(self) -> None:
        # Left to the allow-list, which rejects the tag name.
        assert detect("<script src=/x.js>").valid

    def test_javascript_protocol(self) -> None:
        verdict = detect('<a href="JavaScript :alert(1)">x</a>')
        assert verdict.code == FailureCode.SCRIPT_CONTENT
        assert "javascript protocol" in verdict.reason

    def test_event_handler(self) -> None:
        verdict = detect('<img src="a.png" onerror = "alert(1)">')
        assert verdict.code == FailureCode.SCRIPT_CONTENT
        assert "event handlers" in verdict.reason

    def test_base64_data_uri(self) -> None:
        verdict = detect('<img src="data:image/png;base64,iVBORw0KGgo=">')
        assert not verdict.valid
        assert verdict.code == FailureCode.BASE64_DATA_URI
        assert "base64 data URLs" in verdict.reason

    def test_vbscript_protocol(self) -> None:
        verdict = detect('<a href="vbscript:msgbox(1)">x</a>')
        assert verdict.code == FailureCode.SCRIPT_CONTENT
        assert "vbscript protocol" in verdict.reason

    def test_first_matching_check_wins(self) -> None:
        verdict = detect("<script>x</script> javascript:void(0)")
        assert "script tags" in verdict.reason

    def test_message_substitutes_attribute(self) -> None:
        verdict = detect("javascript:alert(1)").for_attribute("bio")
        assert verdict.message == "The bio contains javascript protocol which is not allowed."

    def test_adversarial_input_completes(self) -> None:
        detect("<script" + "<" * 20_000)
        detect("on" * 20_000)


class TestScriptDetector:
    def test_is_a_validator(self) -> None:
        assert isinstance(ScriptDetector(), Validator)

    def test_delegates_to_detect(self) -> None:
        assert ScriptDetector().validate("onclick=go()").code == FailureCode.SCRIPT_CONTENT
        assert ScriptDetector().validate("fine").valid

    def test_check_order(self) -> None:
        assert [check.name for check in SCRIPT_CHECKS] == [
            "script_tag",
            "javascript_protocol",
            "event_handler",
            "base64_data_uri",
            "vbscript_protocol",
        ]
