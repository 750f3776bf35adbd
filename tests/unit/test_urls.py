"""
Tests for URL classification and safety checks.
"""

from __future__ import annotations

import pytest

from safeinput.components.urls import (
    UrlClassification,
    classify_url,
    extract_urls,
    find_unsafe_urls,
    is_safe_url,
    is_valid_absolute_url,
    is_valid_email,
)


class TestClassifyUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("/about", UrlClassification.RELATIVE),
            ("//cdn.example.org/a.js", UrlClassification.RELATIVE),
            ("#top", UrlClassification.FRAGMENT),
            ("mailto:a@b.com", UrlClassification.MAILTO),
            ("MAILTO:a@b.com", UrlClassification.MAILTO),
            ("https://example.org", UrlClassification.HTTP),
            ("HTTP://example.org", UrlClassification.HTTP),
            ("ftp://example.org/file", UrlClassification.OTHER_SCHEME),
            ("javascript:alert(1)", UrlClassification.OTHER_SCHEME),
            ("data:text/html,hi", UrlClassification.OTHER_SCHEME),
            ("images/photo.png", UrlClassification.RELATIVE),
            ("", UrlClassification.RELATIVE),
        ],
    )
    def test_classification(self, url: str, expected: UrlClassification) -> None:
        assert classify_url(url) == expected

    def test_ignored_characters_are_removed_before_classifying(self) -> None:
        assert classify_url("java\tscript:alert(1)") == UrlClassification.OTHER_SCHEME
        assert classify_url("  \x01javascript:alert(1)") == UrlClassification.OTHER_SCHEME


class TestIsSafeUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "/path/to/page",
            "#section-2",
            "relative/page.html",
            "mailto:hello@company.org",
            "mailto:hello@company.org?subject=Hi",
            "https://example.org/a?b=c#d",
            "http://example.org:8080/",
            "http://127.0.0.1/status",
        ],
    )
    def test_safe(self, url: str) -> None:
        assert is_safe_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "javascript:alert(1)",
            " javascript:alert(1)",
            "jav\nascript:alert(1)",
            "vbscript:msgbox(1)",
            "data:text/html,<b>x</b>",
            "file:///etc/passwd",
            "ftp://example.org/",
            "mailto:not-an-address",
            "mailto:",
            "https://",
            "http://exa mple.org/",
            "http://example.org:99999/",
            "https://-bad-.example.org/",
        ],
    )
    def test_unsafe(self, url: str) -> None:
        assert not is_safe_url(url)

    @pytest.mark.parametrize("value", [None, 12, b"/bytes"])
    def test_non_strings_are_unsafe(self, value: object) -> None:
        assert is_safe_url(value) is False  # type: ignore[arg-type]


class TestHelpers:
    def test_is_valid_email(self) -> None:
        assert is_valid_email("a@b.com")
        assert not is_valid_email("a@")
        assert not is_valid_email("no at sign")

    def test_is_valid_absolute_url(self) -> None:
        assert is_valid_absolute_url("https://sub.example.org/path")
        assert not is_valid_absolute_url("https://example.org/é")
        assert not is_valid_absolute_url("example.org")
        assert not is_valid_absolute_url("ftp://example.org")


class TestExtractUrls:
    def test_quoted_and_bare_values(self) -> None:
        markup = (
            '<a href="/one">1</a>'
            "<a HREF='https://example.org/two'>2</a>"
            "<img src=three.png alt=x>"
        )
        assert extract_urls(markup) == ["/one", "https://example.org/two", "three.png"]

    def test_no_urls(self) -> None:
        assert extract_urls("<p>plain</p>") == []

    def test_find_unsafe_urls(self) -> None:
        markup = '<a href="/ok">a</a><a href="ftp://example.org/x">b</a><img src="file:///x">'
        assert find_unsafe_urls(markup) == ["ftp://example.org/x", "file:///x"]

    def test_character_references_are_decoded(self) -> None:
        markup = (
            '<a href="javascript&colon;alert(1)">a</a>'
            '<a href="&#x6A;avascript&#x3A;alert(1)">b</a>'
            "<a href='&#106;avascript&#58;alert(1)'>c</a>"
            '<a href="/search?q=1&amp;page=2">d</a>'
        )
        assert extract_urls(markup) == [
            "javascript:alert(1)",
            "javascript:alert(1)",
            "javascript:alert(1)",
            "/search?q=1&page=2",
        ]

    @pytest.mark.parametrize(
        "markup",
        [
            '<a href="javascript&colon;alert(1)">x</a>',
            '<a href="&#x6A;avascript&#x3A;alert(1)">x</a>',
            '<a href="&#106&#97&#118&#97&#115&#99&#114&#105&#112&#116&#58alert(1)">x</a>',
            '<a href="java&Tab;script&colon;alert(1)">x</a>',
            '<a href="java&#x0A;script:alert(1)">x</a>',
            '<img src="&NewLine;javascript&colon;alert(1)">',
        ],
    )
    def test_encoded_schemes_are_unsafe(self, markup: str) -> None:
        assert len(find_unsafe_urls(markup)) == 1
