# topmark:header:start
#
#   project      : SpanMark
#   file         : test_styled.py
#   file_relpath : tests/rendering/test_styled.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for styled rows and the line-number gutter."""

from __future__ import annotations

from spanmark.diagnostic.model import Level
from spanmark.rendering.styled import Gutter, Style, StyledLine, render_lines


def test_put_overwrites_and_pads() -> None:
    row = StyledLine("abc")
    row.put(5, "xy")
    row.put(1, "B")
    assert row.text == "aBc  xy"
    assert row.char_at(3) == " "
    assert row.char_at(99) == " "


def test_put_if_blank_keeps_existing_characters() -> None:
    row = StyledLine()
    row.put(2, "|")
    for col in range(1, 4):
        row.put_if_blank(col, "_")
    assert row.text == " _|_"


def test_render_strips_trailing_blanks() -> None:
    row = StyledLine("  |  ")
    row.put(8, " ")
    assert row.render() == "  |"
    assert render_lines([row, StyledLine()]) == "  |\n\n"


def test_plain_runs_are_never_colored() -> None:
    row = StyledLine("plain text", Style.PLAIN)
    assert row.render(color=True) == "plain text"


def test_gutter_rows() -> None:
    gutter = Gutter(3)
    assert gutter.code_col == 6
    assert gutter.row(7).text == "  7 |"
    assert gutter.blank().text == "    |"
    assert gutter.row(12, separator="+").text == " 12 +"
    assert gutter.location("-->", "src/lib.rs", 120, 4).text == "   --> src/lib.rs:120:4"
    assert gutter.elision().text == "..."


def test_anonymized_gutter_prints_placeholder() -> None:
    gutter = Gutter(2, anonymize=True)
    assert gutter.row(9).text == "LL |"
    # Location lines keep the real position.
    assert gutter.location(":::", "a.rs", 9, 1).text == "  ::: a.rs:9:1"


def test_note_continuation_lines_align_after_the_prefix() -> None:
    rows = Gutter(1).note(Level.NOTE, "first\nsecond")
    assert [r.text for r in rows] == ["  = note: first", "          second"]
