# topmark:header:start
#
#   project      : SpanMark
#   file         : layout.py
#   file_relpath : src/spanmark/rendering/layout.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Placement of span annotations on source lines.

`SpanLayout` turns the spans of one diagnostic block into a `FileLayout` per
referenced file. A layout decides, without drawing anything:

* which source lines are printed and where `...` elision rows go;
* how single-line spans are grouped by visual range and stacked into
  underline rows, and in which order their labels appear;
* which margin slot each multi-line span occupies.

All columns are display columns as reported by the configured `CharWidth`
function, counted from the first character of the line (the margin is added by
the drawing code).

Rules:
    * Lines printed: every line carrying a single-line annotation; for a
      multi-line span its first line, up to three interior lines, the line
      before its last line and its last line. A single skipped line is printed;
      longer gaps become one elision row.
    * Groups: spans sharing ``[start_col, end_col)`` on a line form a group;
      a zero-width range widens to one column. Groups are stacked in the first
      row where they overlap nothing, scanning by ascending start column with
      primary groups first on ties.
    * Brackets: multi-line spans take the lowest slot whose previous occupant
      ended on an earlier line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from spanmark.config.logging import get_logger
from spanmark.source.width import expand_text, text_width

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.diagnostic.model import Span
    from spanmark.source.source_map import SourceFile, SourceMap
    from spanmark.source.width import CharWidth

logger: SpanmarkLogger = get_logger(__name__)

# Number of interior lines shown after the first line of a multi-line span.
MAX_INTERIOR_LINES: int = 3


@dataclass(frozen=True)
class Annotation:
    """A span resolved to 0-based line indices and display columns.

    ``end_col`` is exclusive. For a multi-line span it is the column just past
    the last covered character on ``end_line``.
    """

    order: int
    span: Span
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    byte_start: int

    @property
    def is_primary(self) -> bool:
        return self.span.is_primary

    @property
    def label(self) -> str | None:
        return self.span.label

    @property
    def is_multiline(self) -> bool:
        return self.start_line != self.end_line


@dataclass(frozen=True)
class UnderlineGroup:
    """Single-line annotations sharing one visual range on a line."""

    start_col: int
    end_col: int
    is_primary: bool
    labels: tuple[str, ...]

    def overlaps(self, other: UnderlineGroup) -> bool:
        """Return True if the ranges share a column (touching ranges do not)."""
        return self.start_col < other.end_col and other.start_col < self.end_col


@dataclass(frozen=True)
class Bracket:
    """A multi-line annotation drawn in the left margin."""

    slot: int
    start_line: int
    end_line: int
    end_col: int
    is_primary: bool
    label: str | None

    @property
    def marker_col(self) -> int:
        """Return the display column of the span's last character."""
        return max(self.end_col - 1, 0)

    def is_open_after(self, line: int) -> bool:
        """Return True if the bracket continues below ``line``."""
        return self.start_line <= line < self.end_line


@dataclass(frozen=True)
class LayoutLine:
    """One printed source line with everything annotated on it."""

    index: int
    text: str
    rows: tuple[tuple[UnderlineGroup, ...], ...]
    openings: tuple[Bracket, ...]
    closings: tuple[Bracket, ...]

    @property
    def number(self) -> int:
        """Return the 1-based line number."""
        return self.index + 1


@dataclass(frozen=True)
class Elision:
    """Marker for lines skipped between two printed lines."""

    after: int
    before: int


LayoutEntry = Union[LayoutLine, Elision]


@dataclass(frozen=True)
class FileLayout:
    """Layout of every annotation that falls into one source file."""

    source: SourceFile
    location: tuple[int, int]
    entries: tuple[LayoutEntry, ...]
    brackets: tuple[Bracket, ...]
    slot_count: int

    @property
    def margin_width(self) -> int:
        return 2 * self.slot_count

    @property
    def max_line_number(self) -> int:
        numbers: list[int] = [e.number for e in self.entries if isinstance(e, LayoutLine)]
        return max(numbers, default=0)

    def brackets_spanning(self, after: int, before: int) -> list[Bracket]:
        """Return brackets that are drawn across an elision between two lines."""
        return [b for b in self.brackets if b.start_line <= after and b.end_line >= before]


class SpanLayout:
    """Compute `FileLayout`s for the spans of one diagnostic block."""

    def __init__(self, source_map: SourceMap, char_width: CharWidth) -> None:
        self.source_map = source_map
        self.char_width = char_width

    def layout(self, spans: Sequence[Span]) -> list[FileLayout]:
        """Lay out ``spans`` grouped by file.

        Files appear in the order of the first span that references them; the
        location of each file layout is the start of that first span.

        Raises:
            UnknownSourceFileError: If a span references an unknown file.
            OutOfRangeSpanError: If a span offset exceeds its file's length.
        """
        by_file: dict[int, list[Annotation]] = {}
        for order, span in enumerate(spans):
            source: SourceFile = self.source_map.get(span.file_id)
            by_file.setdefault(span.file_id, []).append(self.resolve(source, span, order))

        layouts: list[FileLayout] = []
        for file_id, annotations in by_file.items():
            source = self.source_map.get(file_id)
            layouts.append(self._layout_file(source, annotations))
        return layouts

    def resolve(self, source: SourceFile, span: Span, order: int = 0) -> Annotation:
        """Resolve ``span`` to line indices and display columns in ``source``."""
        start: int = source.check_offset(span.byte_start)
        end: int = source.check_offset(span.byte_end)
        start_line: int = source.line_index(start)
        start_col: int = text_width(source.line_prefix(start), self.char_width)

        end_line: int = source.line_index(end)
        if end > start and end_line > start_line and source.line_start(end_line) == end:
            # An end offset at a line start covers the previous line's newline.
            end_line -= 1
            end_col = self._line_width(source, end_line) + 1
        else:
            end_col = text_width(source.line_prefix(end), self.char_width)

        if end_line == start_line and end_col <= start_col:
            end_col = start_col + 1

        logger.trace(
            "Resolved span #%d in '%s' to %d:%d..%d:%d",
            order,
            source.path,
            start_line + 1,
            start_col,
            end_line + 1,
            end_col,
        )
        return Annotation(
            order=order,
            span=span,
            start_line=start_line,
            start_col=start_col,
            end_line=end_line,
            end_col=end_col,
            byte_start=start,
        )

    def _line_width(self, source: SourceFile, index: int) -> int:
        return text_width(source.line_text(index + 1), self.char_width)

    def _layout_file(self, source: SourceFile, annotations: list[Annotation]) -> FileLayout:
        singles: list[Annotation] = [a for a in annotations if not a.is_multiline]
        brackets, slot_count = assign_slots(a for a in annotations if a.is_multiline)

        wanted: set[int] = {a.start_line for a in singles}
        for bracket in brackets:
            wanted.update(bracket_lines(bracket.start_line, bracket.end_line))

        entries: list[LayoutEntry] = []
        previous: int | None = None
        for index in sorted(wanted):
            if previous is not None:
                gap: int = index - previous
                if gap == 2:
                    entries.append(self._layout_line(source, previous + 1, singles, brackets))
                elif gap > 2:
                    entries.append(Elision(after=previous, before=index))
            entries.append(self._layout_line(source, index, singles, brackets))
            previous = index

        first: Annotation = annotations[0]
        location: tuple[int, int] = (first.start_line + 1, source.char_column(first.byte_start) + 1)
        return FileLayout(
            source=source,
            location=location,
            entries=tuple(entries),
            brackets=tuple(brackets),
            slot_count=slot_count,
        )

    def _layout_line(
        self,
        source: SourceFile,
        index: int,
        singles: list[Annotation],
        brackets: list[Bracket],
    ) -> LayoutLine:
        on_line: list[Annotation] = [a for a in singles if a.start_line == index]
        return LayoutLine(
            index=index,
            text=expand_text(source.line_text(index + 1), self.char_width),
            rows=stack_groups(group_annotations(on_line)),
            openings=tuple(b for b in brackets if b.start_line == index),
            closings=tuple(
                sorted((b for b in brackets if b.end_line == index), key=lambda b: -b.slot)
            ),
        )


def bracket_lines(start_line: int, end_line: int) -> list[int]:
    """Return the line indices printed for a multi-line span."""
    lines: set[int] = {start_line, end_line - 1, end_line}
    lines.update(range(start_line + 1, min(start_line + 1 + MAX_INTERIOR_LINES, end_line)))
    return sorted(lines)


def assign_slots(multiline: Iterable[Annotation]) -> tuple[list[Bracket], int]:
    """Allocate margin slots to multi-line annotations.

    Returns:
        The brackets in allocation order and the number of slots used.
    """
    slot_ends: list[int] = []
    brackets: list[Bracket] = []
    for ann in sorted(multiline, key=lambda a: (a.start_line, a.start_col, a.order)):
        slot: int = next(
            (s for s, end in enumerate(slot_ends) if end < ann.start_line), len(slot_ends)
        )
        if slot == len(slot_ends):
            slot_ends.append(ann.end_line)
        else:
            slot_ends[slot] = ann.end_line
        brackets.append(
            Bracket(
                slot=slot,
                start_line=ann.start_line,
                end_line=ann.end_line,
                end_col=ann.end_col,
                is_primary=ann.is_primary,
                label=ann.label,
            )
        )
    return brackets, len(slot_ends)


def group_annotations(annotations: Iterable[Annotation]) -> list[UnderlineGroup]:
    """Merge single-line annotations with identical visual ranges."""
    members: dict[tuple[int, int], list[Annotation]] = {}
    for ann in annotations:
        members.setdefault((ann.start_col, ann.end_col), []).append(ann)

    groups: list[UnderlineGroup] = []
    for (start_col, end_col), anns in members.items():
        ordered: list[Annotation] = sorted(
            anns, key=lambda a: (not a.is_primary, a.byte_start, a.order)
        )
        groups.append(
            UnderlineGroup(
                start_col=start_col,
                end_col=end_col,
                is_primary=any(a.is_primary for a in anns),
                labels=tuple(a.label for a in ordered if a.label),
            )
        )
    return groups


def stack_groups(groups: Iterable[UnderlineGroup]) -> tuple[tuple[UnderlineGroup, ...], ...]:
    """Distribute groups over underline rows so that no row has overlapping ranges."""
    rows: list[list[UnderlineGroup]] = []
    for group in sorted(groups, key=lambda g: (g.start_col, not g.is_primary, g.end_col)):
        for row in rows:
            if not any(group.overlaps(other) for other in row):
                row.append(group)
                break
        else:
            rows.append([group])
    return tuple(tuple(sorted(row, key=lambda g: g.start_col)) for row in rows)
