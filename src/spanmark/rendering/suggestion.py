# topmark:header:start
#
#   project      : SpanMark
#   file         : suggestion.py
#   file_relpath : src/spanmark/rendering/suggestion.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering of suggested source edits.

A suggestion is planned once (`SuggestionRenderer.plan`) and drawn later, so
that the widest line number it prints can be known before the enclosing block
chooses its gutter width.

Display modes:
    * ``UNDERLINE``: every part stays on one line, deletes nothing and inserts no
      newline. The modified lines are printed and the new text is marked with
      ``+`` (insertion) or ``~`` (replacement).
    * ``DIFF``: the affected original lines are compared with the modified lines
      using `difflib.SequenceMatcher`; removed lines print as ``n - line``,
      added lines as ``n + line`` and unchanged lines as ``n | line``.

Rendering never depends on the suggestion's applicability.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from enum import Enum
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.constants import ELISION_MARKER
from spanmark.rendering.styled import Style, StyledLine
from spanmark.source.width import expand_text, text_width

if TYPE_CHECKING:
    from collections.abc import Sequence

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.diagnostic.model import Suggestion
    from spanmark.rendering.styled import Gutter
    from spanmark.source.source_map import SourceFile, SourceMap
    from spanmark.source.width import CharWidth

logger: SpanmarkLogger = get_logger(__name__)

# Unchanged runs longer than this collapse to first line, elision, last line.
MAX_CONTEXT_RUN: int = 3


class DisplayMode(Enum):
    """How the edits of one file are shown."""

    UNDERLINE = "underline"
    DIFF = "diff"


class RowKind(Enum):
    """Kind of a planned suggestion row."""

    CONTEXT = "context"
    CHANGED = "changed"
    ADDED = "added"
    REMOVED = "removed"
    ELISION = "elision"


@dataclass(frozen=True)
class Edit:
    """A substitution resolved to byte offsets in one file."""

    start: int
    end: int
    replacement: str
    order: int

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    @property
    def is_deletion(self) -> bool:
        return self.start < self.end and not self.replacement


@dataclass(frozen=True)
class Mark:
    """``+``/``~`` marker under new text on a changed line."""

    col: int
    width: int
    char: str


@dataclass(frozen=True)
class SuggestionRow:
    kind: RowKind
    number: int | None = None
    text: str = ""
    marks: tuple[Mark, ...] = ()


@dataclass(frozen=True)
class SuggestionBlock:
    """Planned rows for the edits that fall into one file."""

    source: SourceFile
    location: tuple[int, int]
    mode: DisplayMode
    rows: tuple[SuggestionRow, ...]

    @property
    def max_line_number(self) -> int:
        return max((r.number for r in self.rows if r.number is not None), default=0)


@dataclass(frozen=True)
class SuggestionPlan:
    """All blocks of one suggestion, in order of first reference."""

    suggestion: Suggestion
    blocks: tuple[SuggestionBlock, ...]

    @property
    def max_line_number(self) -> int:
        return max((b.max_line_number for b in self.blocks), default=0)


def resolve_edits(source_map: SourceMap, suggestion: Suggestion) -> dict[int, list[Edit]]:
    """Resolve the parts of ``suggestion`` to non-overlapping edits per file.

    Edits are sorted by position. A part overlapping an earlier kept part is
    dropped with a warning; parts that change nothing are dropped silently.

    Raises:
        UnknownSourceFileError: If a part references an unknown file.
        OutOfRangeSpanError: If a part offset exceeds its file's length.
    """
    by_file: dict[int, list[Edit]] = {}
    for order, part in enumerate(suggestion.parts):
        source: SourceFile = source_map.get(part.span.file_id)
        edit = Edit(
            start=source.check_offset(part.span.byte_start),
            end=source.check_offset(part.span.byte_end),
            replacement=part.replacement,
            order=order,
        )
        by_file.setdefault(source.id, []).append(edit)

    resolved: dict[int, list[Edit]] = {}
    for file_id, edits in by_file.items():
        kept: list[Edit] = []
        for edit in sorted(edits, key=lambda e: (e.start, e.end, e.order)):
            if edit.is_insertion and not edit.replacement:
                continue
            if kept and edit.start < kept[-1].end:
                logger.warning(
                    "Dropping suggestion part #%d (bytes %d..%d in '%s'): overlaps an earlier part",
                    edit.order,
                    edit.start,
                    edit.end,
                    source_map.get(file_id).path,
                )
                continue
            kept.append(edit)
        if kept:
            resolved[file_id] = kept
    return resolved


def apply_edits(data: bytes, edits: Sequence[Edit], *, base: int = 0) -> bytes:
    """Return ``data`` with sorted, non-overlapping ``edits`` applied.

    ``base`` is the file offset of ``data[0]``.
    """
    pieces: list[bytes] = []
    cursor: int = 0
    for edit in edits:
        pieces.append(data[cursor : edit.start - base])
        pieces.append(edit.replacement.encode("utf-8"))
        cursor = edit.end - base
    pieces.append(data[cursor:])
    return b"".join(pieces)


def apply_suggestion(source_map: SourceMap, suggestion: Suggestion) -> dict[int, str]:
    """Return the full modified text of every file the suggestion touches.

    Args:
        source_map: The files the suggestion refers to.
        suggestion: The suggestion to apply (all parts at once).

    Returns:
        Mapping of file id to the text after applying the suggestion.
    """
    return {
        file_id: apply_edits(source_map.get(file_id).data, edits).decode("utf-8")
        for file_id, edits in resolve_edits(source_map, suggestion).items()
    }


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    lines: list[str] = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class SuggestionRenderer:
    """Plan and draw suggestion blocks."""

    def __init__(self, source_map: SourceMap, char_width: CharWidth) -> None:
        self.source_map = source_map
        self.char_width = char_width

    # ------------------------------ planning ------------------------------

    def plan(self, suggestion: Suggestion) -> SuggestionPlan:
        """Plan the rows of ``suggestion`` without drawing them."""
        blocks: list[SuggestionBlock] = []
        for file_id, edits in resolve_edits(self.source_map, suggestion).items():
            blocks.append(self._plan_block(self.source_map.get(file_id), edits))
        return SuggestionPlan(suggestion=suggestion, blocks=tuple(blocks))

    @staticmethod
    def _last_line(source: SourceFile, edit: Edit) -> int:
        end_line: int = source.line_index(edit.end)
        if (
            edit.end > edit.start
            and end_line > source.line_index(edit.start)
            and source.line_start(end_line) == edit.end
        ):
            end_line -= 1
        return end_line

    @staticmethod
    def mode_for(source: SourceFile, edits: Sequence[Edit]) -> DisplayMode:
        """Return the display mode for the edits of one file."""
        for edit in edits:
            if (
                edit.is_deletion
                or "\n" in edit.replacement
                or source.line_index(edit.start) != source.line_index(edit.end)
            ):
                return DisplayMode.DIFF
        return DisplayMode.UNDERLINE

    def _plan_block(self, source: SourceFile, edits: list[Edit]) -> SuggestionBlock:
        mode: DisplayMode = self.mode_for(source, edits)
        rows: list[SuggestionRow]
        if mode is DisplayMode.UNDERLINE:
            rows = self._plan_underline(source, edits)
        else:
            rows = self._plan_diff(source, edits)
        logger.trace(
            "Planned %s suggestion block for '%s': %d rows", mode.value, source.path, len(rows)
        )
        first: Edit = edits[0]
        location: tuple[int, int] = (
            source.line_index(first.start) + 1,
            source.char_column(first.start) + 1,
        )
        return SuggestionBlock(source=source, location=location, mode=mode, rows=tuple(rows))

    def _plan_underline(self, source: SourceFile, edits: list[Edit]) -> list[SuggestionRow]:
        by_line: dict[int, list[Edit]] = {}
        for edit in edits:
            by_line.setdefault(source.line_index(edit.start), []).append(edit)

        rows: list[SuggestionRow] = []
        previous: int | None = None
        for index in sorted(by_line):
            if previous is not None:
                if index - previous == 2:
                    rows.append(
                        SuggestionRow(
                            kind=RowKind.CONTEXT,
                            number=previous + 2,
                            text=expand_text(source.line_text(previous + 2), self.char_width),
                        )
                    )
                elif index - previous > 2:
                    rows.append(SuggestionRow(kind=RowKind.ELISION))
            rows.append(self._changed_row(source, index, by_line[index]))
            previous = index
        return rows

    def _changed_row(self, source: SourceFile, index: int, edits: list[Edit]) -> SuggestionRow:
        line_start: int = source.line_start(index)
        line_end: int = source.line_end(index)
        text: str = ""
        marks: list[Mark] = []
        cursor: int = line_start
        for edit in edits:
            text += source.data[cursor : edit.start].decode("utf-8")
            col: int = text_width(text, self.char_width)
            width: int = text_width(edit.replacement, self.char_width)
            marks.append(Mark(col=col, width=max(width, 1), char="+" if edit.is_insertion else "~"))
            text += edit.replacement
            cursor = edit.end
        text += source.data[cursor:line_end].decode("utf-8")
        if text.endswith("\r"):
            text = text[:-1]
        return SuggestionRow(
            kind=RowKind.CHANGED,
            number=index + 1,
            text=expand_text(text, self.char_width),
            marks=tuple(marks),
        )

    def _plan_diff(self, source: SourceFile, edits: list[Edit]) -> list[SuggestionRow]:
        first_line: int = source.line_index(edits[0].start)
        last_line: int = max(self._last_line(source, e) for e in edits)
        seg_start: int = source.line_start(first_line)
        seg_end: int = (
            source.line_start(last_line + 1)
            if last_line + 1 < source.line_count
            else source.byte_length
        )
        original: bytes = source.data[seg_start:seg_end]
        modified: bytes = apply_edits(original, edits, base=seg_start)
        old_lines: list[str] = _split_lines(original.decode("utf-8"))
        new_lines: list[str] = _split_lines(modified.decode("utf-8"))

        rows: list[SuggestionRow] = []
        matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                run: list[int] = list(range(j1, j2))
                if len(run) > MAX_CONTEXT_RUN:
                    run = [run[0], -1, run[-1]]
                for j in run:
                    if j < 0:
                        rows.append(SuggestionRow(kind=RowKind.ELISION))
                        continue
                    rows.append(self._diff_row(RowKind.CONTEXT, first_line + 1 + j, new_lines[j]))
                continue
            for i in range(i1, i2):
                rows.append(self._diff_row(RowKind.REMOVED, first_line + 1 + i, old_lines[i]))
            for j in range(j1, j2):
                rows.append(self._diff_row(RowKind.ADDED, first_line + 1 + j, new_lines[j]))
        return rows

    def _diff_row(self, kind: RowKind, number: int, text: str) -> SuggestionRow:
        return SuggestionRow(kind=kind, number=number, text=expand_text(text, self.char_width))

    # ------------------------------- drawing -------------------------------

    def draw(self, plan: SuggestionPlan, gutter: Gutter) -> list[StyledLine]:
        """Draw the rows of a planned suggestion (without its ``help:`` header)."""
        out: list[StyledLine] = [gutter.blank()]
        for i, block in enumerate(plan.blocks):
            if i > 0:
                line, col = block.location
                out.append(gutter.location(":::", block.source.path, line, col))
                out.append(gutter.blank())
            for row in block.rows:
                out.extend(self._draw_row(row, gutter))
            if block.mode is DisplayMode.DIFF:
                out.append(gutter.blank())
        return out

    @staticmethod
    def _draw_row(row: SuggestionRow, gutter: Gutter) -> list[StyledLine]:
        if row.kind is RowKind.ELISION:
            return [StyledLine(ELISION_MARKER, Style.LINE_NUMBER)]
        if row.kind is RowKind.REMOVED:
            line: StyledLine = gutter.row(row.number, separator="-", style=Style.REMOVAL)
            line.put(gutter.code_col, row.text, Style.REMOVAL)
            return [line]
        if row.kind is RowKind.ADDED:
            line = gutter.row(row.number, separator="+", style=Style.ADDITION)
            line.put(gutter.code_col, row.text, Style.ADDITION)
            return [line]

        line = gutter.row(row.number)
        line.put(gutter.code_col, row.text)
        if row.kind is RowKind.CONTEXT:
            return [line]
        marker_row: StyledLine = gutter.blank()
        for mark in row.marks:
            style: Style = Style.ADDITION if mark.char == "+" else Style.REPLACEMENT
            marker_row.put(gutter.code_col + mark.col, mark.char * mark.width, style)
        return [line, marker_row]
