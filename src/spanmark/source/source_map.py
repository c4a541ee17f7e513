# topmark:header:start
#
#   project      : SpanMark
#   file         : source_map.py
#   file_relpath : src/spanmark/source/source_map.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Byte-offset indexing of source files.

Spans address source text by UTF-8 byte offsets. `SourceFile` keeps the encoded
text and the byte offset of every line start so that offsets can be mapped to
lines with a binary search. Columns reported by `SourceMap.line_of` count
codepoints; display columns (tabs, wide characters) are the layout's concern
(see `spanmark.source.width`).

A `SourceMap` owns every file referenced during a run. Files are immutable
once added.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.core.errors import OutOfRangeSpanError, UnknownSourceFileError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from spanmark.config.logging import SpanmarkLogger

logger: SpanmarkLogger = get_logger(__name__)


def _is_continuation_byte(value: int) -> bool:
    return value & 0xC0 == 0x80


@dataclass(frozen=True)
class SourceFile:
    """Immutable source text with a byte-offset line table.

    Attributes:
        id: Identifier referenced by `Span.file_id`.
        path: Display path printed on location lines.
        text: The full source text.
        line_start_offsets: Byte offset of the first byte of every line. A text
            ending with a newline has a final, empty line.
    """

    id: int
    path: str
    text: str
    line_start_offsets: tuple[int, ...]
    data: bytes = field(repr=False, compare=False)

    @classmethod
    def from_text(cls, file_id: int, path: str, text: str) -> SourceFile:
        """Build a file and its line table from ``text``."""
        data: bytes = text.encode("utf-8")
        starts: list[int] = [0]
        pos: int = data.find(b"\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = data.find(b"\n", pos + 1)
        return cls(id=file_id, path=path, text=text, line_start_offsets=tuple(starts), data=data)

    @property
    def byte_length(self) -> int:
        """Return the length of the encoded text in bytes."""
        return len(self.data)

    @property
    def line_count(self) -> int:
        """Return the number of lines (at least 1)."""
        return len(self.line_start_offsets)

    def check_offset(self, offset: int) -> int:
        """Return ``offset`` snapped to a character boundary.

        Raises:
            OutOfRangeSpanError: If ``offset`` lies outside ``[0, byte_length]``.
        """
        if offset < 0 or offset > len(self.data):
            raise OutOfRangeSpanError(self.path, offset, len(self.data))
        start: int = self.line_start(self.line_index(offset))
        while offset > start and offset < len(self.data) and _is_continuation_byte(
            self.data[offset]
        ):
            offset -= 1
        return offset

    def line_index(self, offset: int) -> int:
        """Return the 0-based index of the line containing byte ``offset``."""
        if offset < 0 or offset > len(self.data):
            raise OutOfRangeSpanError(self.path, offset, len(self.data))
        return bisect_right(self.line_start_offsets, offset) - 1

    def line_start(self, index: int) -> int:
        """Return the byte offset at which 0-based line ``index`` starts."""
        return self.line_start_offsets[index]

    def line_end(self, index: int) -> int:
        """Return the byte offset just past 0-based line ``index`` (newline excluded)."""
        if index + 1 < len(self.line_start_offsets):
            return self.line_start_offsets[index + 1] - 1
        return len(self.data)

    def line_text(self, line_number: int) -> str:
        """Return 1-based line ``line_number`` without its line terminator.

        Raises:
            IndexError: If the line does not exist.
        """
        if line_number < 1 or line_number > len(self.line_start_offsets):
            raise IndexError(f"line {line_number} out of range for '{self.path}'")
        index: int = line_number - 1
        raw: str = self.data[self.line_start(index) : self.line_end(index)].decode("utf-8")
        return raw[:-1] if raw.endswith("\r") else raw

    def line_prefix(self, offset: int) -> str:
        """Return the text between the start of ``offset``'s line and ``offset``."""
        offset = self.check_offset(offset)
        start: int = self.line_start(self.line_index(offset))
        prefix: str = self.data[start:offset].decode("utf-8")
        return prefix

    def char_column(self, offset: int) -> int:
        """Return the 0-based codepoint column of byte ``offset``."""
        return len(self.line_prefix(offset))


class SourceMap:
    """Registry of the source files referenced by one rendering run."""

    def __init__(self) -> None:
        self._files: list[SourceFile] = []

    def add_file(self, path: str, text: str) -> SourceFile:
        """Register ``text`` under ``path`` and return the new file.

        Ids are assigned sequentially starting at 0.
        """
        source_file: SourceFile = SourceFile.from_text(len(self._files), path, text)
        self._files.append(source_file)
        logger.debug(
            "Registered source file #%d '%s' (%d lines, %d bytes)",
            source_file.id,
            path,
            source_file.line_count,
            source_file.byte_length,
        )
        return source_file

    def load_file(self, path: Path | str, *, display_path: str | None = None) -> SourceFile:
        """Read a UTF-8 file from disk and register it.

        Args:
            path: File to read.
            display_path: Path printed on location lines; defaults to ``path``.

        Returns:
            The registered file.
        """
        file_path = Path(path)
        text: str = file_path.read_text(encoding="utf-8")
        return self.add_file(display_path or str(path), text)

    def get(self, file_id: int) -> SourceFile:
        """Return the file registered under ``file_id``.

        Raises:
            UnknownSourceFileError: If no such file exists.
        """
        if 0 <= file_id < len(self._files):
            return self._files[file_id]
        raise UnknownSourceFileError(file_id)

    def find(self, path: str) -> SourceFile | None:
        """Return the first file registered under ``path``, if any."""
        for source_file in self._files:
            if source_file.path == path:
                return source_file
        return None

    def line_of(self, file_id: int, byte_offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of ``byte_offset``; columns count codepoints.

        Raises:
            OutOfRangeSpanError: If the offset exceeds the file length.
        """
        source_file: SourceFile = self.get(file_id)
        index: int = source_file.line_index(byte_offset)
        return index + 1, source_file.char_column(byte_offset) + 1

    def line_text(self, file_id: int, line_number: int) -> str:
        """Return the raw text of 1-based ``line_number`` without its newline."""
        return self.get(file_id).line_text(line_number)

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)
