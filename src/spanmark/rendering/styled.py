# topmark:header:start
#
#   project      : SpanMark
#   file         : styled.py
#   file_relpath : src/spanmark/rendering/styled.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Styled output rows.

Every output row is assembled as a grid of characters, each tagged with a style
(a `ColoredStrEnum` member such as a `Style` or a diagnostic `Level`). Drawing
code positions text by column and may overwrite earlier characters; only when a
row is rendered are trailing blanks stripped and, if color is enabled, runs of
equally-styled characters passed through their `yachalk` colorizer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from yachalk import chalk

from spanmark.constants import ANONYMIZED_LINE_NUM, ELISION_MARKER
from spanmark.rendering.colored_enum import ColoredStrEnum, plain

if TYPE_CHECKING:
    from collections.abc import Iterable


class Style(ColoredStrEnum):
    """Styles of non-level output elements."""

    PLAIN = ("plain", plain)
    LINE_NUMBER = ("line-number", chalk.blue_bright.bold)
    SECONDARY = ("secondary", chalk.blue_bright.bold)
    HEADER_MESSAGE = ("header-message", chalk.bold)
    ADDITION = ("addition", chalk.green_bright)
    REMOVAL = ("removal", chalk.red_bright)
    REPLACEMENT = ("replacement", chalk.yellow_bright)


class StyledLine:
    """One output row as a mutable grid of styled characters."""

    __slots__ = ("_chars", "_styles")

    def __init__(self, text: str = "", style: ColoredStrEnum = Style.PLAIN) -> None:
        self._chars: list[str] = list(text)
        self._styles: list[ColoredStrEnum] = [style] * len(text)

    def __len__(self) -> int:
        return len(self._chars)

    def _grow(self, size: int) -> None:
        missing: int = size - len(self._chars)
        if missing > 0:
            self._chars.extend(" " * missing)
            self._styles.extend([Style.PLAIN] * missing)

    def put(self, col: int, text: str, style: ColoredStrEnum = Style.PLAIN) -> None:
        """Write ``text`` starting at ``col``, overwriting what is there."""
        self._grow(col + len(text))
        for offset, ch in enumerate(text):
            self._chars[col + offset] = ch
            self._styles[col + offset] = style

    def put_if_blank(self, col: int, ch: str, style: ColoredStrEnum = Style.PLAIN) -> None:
        """Write ``ch`` at ``col`` only if the cell is empty."""
        if col >= len(self._chars) or self._chars[col] == " ":
            self.put(col, ch, style)

    def append(self, text: str, style: ColoredStrEnum = Style.PLAIN) -> None:
        """Write ``text`` right after the current end of the row."""
        self.put(len(self._chars), text, style)

    def char_at(self, col: int) -> str:
        """Return the character at ``col`` (a blank beyond the end)."""
        return self._chars[col] if col < len(self._chars) else " "

    def render(self, *, color: bool = False) -> str:
        """Return the row text with trailing blanks removed.

        Args:
            color: Pass runs of styled characters through their colorizer.

        Returns:
            The rendered row, without a newline.
        """
        end: int = len(self._chars)
        while end > 0 and self._chars[end - 1] == " ":
            end -= 1
        if not color:
            return "".join(self._chars[:end])

        pieces: list[str] = []
        run_start: int = 0
        for idx in range(1, end + 1):
            if idx == end or self._styles[idx] is not self._styles[run_start]:
                text: str = "".join(self._chars[run_start:idx])
                style: ColoredStrEnum = self._styles[run_start]
                plain_run: bool = style is Style.PLAIN or not text.strip()
                pieces.append(text if plain_run else style.color(text))
                run_start = idx
        return "".join(pieces)

    @property
    def text(self) -> str:
        """Return the plain rendering of the row."""
        return self.render(color=False)

    def __repr__(self) -> str:
        return f"StyledLine({self.text!r})"


def render_lines(lines: Iterable[StyledLine], *, color: bool = False) -> str:
    """Join rendered rows, terminating each with a newline."""
    return "".join(f"{line.render(color=color)}\n" for line in lines)


class Gutter:
    """Line-number column shared by every row of one diagnostic block.

    Args:
        width: Width of the widest line number in the block.
        anonymize: Print ``LL`` instead of real line numbers.
    """

    __slots__ = ("anonymize", "width")

    def __init__(self, width: int, *, anonymize: bool = False) -> None:
        self.width = width
        self.anonymize = anonymize

    @property
    def code_col(self) -> int:
        """Return the column at which source text (or the margin) starts."""
        return self.width + 3

    def cell(self, number: int) -> str:
        """Return the right-aligned text of a line number."""
        text: str = ANONYMIZED_LINE_NUM if self.anonymize else str(number)
        return text.rjust(self.width)

    def row(
        self,
        number: int | None = None,
        *,
        separator: str = "|",
        style: ColoredStrEnum = Style.LINE_NUMBER,
    ) -> StyledLine:
        """Return a row holding the gutter, optionally numbered."""
        line = StyledLine()
        if number is not None:
            line.put(0, self.cell(number), Style.LINE_NUMBER)
        line.put(self.width + 1, separator, style)
        return line

    def blank(self) -> StyledLine:
        """Return an empty gutter row (``<W spaces> |``)."""
        return self.row()

    def location(self, marker: str, path: str, line: int, column: int) -> StyledLine:
        """Return a ``-->`` / ``:::`` location row; line numbers are never anonymized."""
        row = StyledLine()
        row.put(self.width, marker, Style.LINE_NUMBER)
        row.append(f" {path}:{line}:{column}")
        return row

    def note(self, level: ColoredStrEnum, message: str) -> list[StyledLine]:
        """Return ``= level: message`` rows; continuation lines align after the prefix."""
        first, *rest = message.split("\n")
        head = StyledLine()
        head.put(self.width + 1, "=", Style.LINE_NUMBER)
        head.append(" ")
        head.append(level.value, level)
        head.append(f": {first}")
        indent: int = self.width + 1 + len(f"= {level.value}: ")
        rows: list[StyledLine] = [head]
        for text in rest:
            rows.append(StyledLine(" " * indent + text))
        return rows

    def elision(self) -> StyledLine:
        """Return an elision row."""
        return StyledLine(ELISION_MARKER, Style.LINE_NUMBER)
