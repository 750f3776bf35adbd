"""
Tests for fragment parsing.
"""

from __future__ import annotations

import pytest

from safeinput.components import html_structure
from safeinput.components.html_structure import (
    is_well_formed,
    iter_fragment_elements,
    parse_fragment,
    wrap_fragment,
)


def test_wrap_fragment() -> None:
    assert wrap_fragment("<p>x</p>") == "<!doctype html><html><body><p>x</p></body></html>"


def test_parse_returns_document_root() -> None:
    root = parse_fragment("<p>Hello <b>world</b></p>")
    assert root is not None
    assert root.tag == "html"


def test_parser_recovers_from_sloppy_markup() -> None:
    assert is_well_formed("<p>unclosed <b>bold")
    assert is_well_formed("plain text, no tags")
    assert is_well_formed("")


def test_iter_fragment_elements_skips_shell() -> None:
    root = parse_fragment("<p><b>x</b></p><br>")
    assert root is not None
    assert [el.tag for el in iter_fragment_elements(root)] == ["p", "b", "br"]


def test_iter_fragment_elements_skips_comments() -> None:
    root = parse_fragment("<p>a</p><!-- note --><span>b</span>")
    assert root is not None
    assert [el.tag for el in iter_fragment_elements(root)] == ["p", "span"]


def test_unparseable_document_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    # An empty document yields no root element.
    monkeypatch.setattr(html_structure.component, "wrap_fragment", lambda fragment: "")
    assert parse_fragment("<p>x</p>") is None
    assert not is_well_formed("<p>x</p>")
