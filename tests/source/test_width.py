# topmark:header:start
#
#   project      : SpanMark
#   file         : test_width.py
#   file_relpath : tests/source/test_width.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for the display-width policy."""

from __future__ import annotations

from spanmark.source.width import CharWidth, expand_text, make_char_width, text_width
from tests.conftest import parametrize


@parametrize(
    "ch, expected",
    [
        ("a", 1),
        ("\t", 4),
        ("中", 2),  # East Asian wide
        ("\uff21", 2),  # full-width
        ("\u0301", 0),  # combining acute accent
    ],
)
def test_default_char_width(ch: str, expected: int) -> None:
    assert make_char_width()(ch) == expected


def test_tab_width_is_configurable() -> None:
    width: CharWidth = make_char_width(tab_width=8)
    assert width("\t") == 8
    assert text_width("\tx", width) == 9


def test_expand_text_replaces_tabs_only() -> None:
    width: CharWidth = make_char_width(tab_width=2)
    assert expand_text("\tfoo\tbar", width) == "  foo  bar"
    assert expand_text("中文", width) == "中文"


def test_text_width_counts_wide_characters() -> None:
    assert text_width("a中b", make_char_width()) == 4
