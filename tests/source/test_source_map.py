# topmark:header:start
#
#   project      : SpanMark
#   file         : test_source_map.py
#   file_relpath : tests/source/test_source_map.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for byte-offset indexing in `spanmark.source.source_map`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from spanmark.core.errors import OutOfRangeSpanError, UnknownSourceFileError
from spanmark.source.source_map import SourceFile, SourceMap
from tests.conftest import parametrize

if TYPE_CHECKING:
    from pathlib import Path

# "é" and "ö" are two bytes each in UTF-8.
TEXT: str = "héllo\nwörld\n"


@pytest.fixture
def source_map() -> SourceMap:
    sm = SourceMap()
    sm.add_file("src/lib.rs", TEXT)
    return sm


def test_line_table_counts_trailing_empty_line() -> None:
    source: SourceFile = SourceFile.from_text(0, "a.rs", TEXT)
    assert source.line_start_offsets == (0, 7, 14)
    assert source.line_count == 3
    assert source.byte_length == 14


def test_empty_text_has_one_line() -> None:
    source: SourceFile = SourceFile.from_text(0, "empty.rs", "")
    assert source.line_count == 1
    assert source.line_text(1) == ""


@parametrize(
    "offset, expected",
    [
        (0, (1, 1)),
        (3, (1, 3)),  # after the two-byte "é": column counts codepoints
        (6, (1, 6)),  # the newline itself belongs to line 1
        (7, (2, 1)),
        (14, (3, 1)),  # end of file
    ],
)
def test_line_of(source_map: SourceMap, offset: int, expected: tuple[int, int]) -> None:
    assert source_map.line_of(0, offset) == expected


def test_line_of_rejects_offset_past_end(source_map: SourceMap) -> None:
    with pytest.raises(OutOfRangeSpanError) as excinfo:
        source_map.line_of(0, 15)
    assert excinfo.value.offset == 15
    assert excinfo.value.length == 14
    assert "src/lib.rs" in str(excinfo.value)


def test_unknown_file_id(source_map: SourceMap) -> None:
    with pytest.raises(UnknownSourceFileError):
        source_map.get(1)
    with pytest.raises(UnknownSourceFileError):
        source_map.line_of(-1, 0)


def test_check_offset_snaps_to_character_start(source_map: SourceMap) -> None:
    source: SourceFile = source_map.get(0)
    # Byte 2 is the continuation byte of "é".
    assert source.check_offset(2) == 1
    assert source.check_offset(3) == 3


def test_line_text_strips_terminators() -> None:
    source: SourceFile = SourceFile.from_text(0, "win.rs", "first\r\nsecond")
    assert source.line_text(1) == "first"
    assert source.line_text(2) == "second"
    with pytest.raises(IndexError):
        source.line_text(3)
    with pytest.raises(IndexError):
        source.line_text(0)


def test_ids_are_sequential_and_find_by_path() -> None:
    sm = SourceMap()
    a: SourceFile = sm.add_file("a.rs", "a\n")
    b: SourceFile = sm.add_file("b.rs", "b\n")
    assert (a.id, b.id) == (0, 1)
    assert len(sm) == 2
    assert [f.path for f in sm] == ["a.rs", "b.rs"]
    assert sm.find("b.rs") is b
    assert sm.find("c.rs") is None


def test_load_file_uses_display_path(tmp_path: Path) -> None:
    path: Path = tmp_path / "main.rs"
    path.write_text("fn main() {}\n", encoding="utf-8")

    sm = SourceMap()
    source: SourceFile = sm.load_file(path, display_path="src/main.rs")

    assert source.path == "src/main.rs"
    assert sm.line_text(source.id, 1) == "fn main() {}"
