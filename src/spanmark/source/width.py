# topmark:header:start
#
#   project      : SpanMark
#   file         : width.py
#   file_relpath : src/spanmark/source/width.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Display-width policy for source characters.

The layout engine never inspects characters itself: it asks a `CharWidth`
function how many terminal columns a character occupies. The default policy
expands a tab to a fixed number of columns, counts East Asian wide and
full-width characters as two columns and combining marks as zero.
"""

from __future__ import annotations

import unicodedata
from typing import Callable

from spanmark.constants import DEFAULT_TAB_WIDTH

CharWidth = Callable[[str], int]


def make_char_width(tab_width: int = DEFAULT_TAB_WIDTH) -> CharWidth:
    """Return the default width function for the given tab width.

    Args:
        tab_width: Number of columns a tab expands to.

    Returns:
        A function mapping a single character to its display width.
    """

    def char_width(ch: str) -> int:
        if ch == "\t":
            return tab_width
        if unicodedata.combining(ch):
            return 0
        if unicodedata.east_asian_width(ch) in ("W", "F"):
            return 2
        return 1

    return char_width


def text_width(text: str, char_width: CharWidth) -> int:
    """Return the number of display columns ``text`` occupies."""
    return sum(char_width(ch) for ch in text)


def expand_text(text: str, char_width: CharWidth) -> str:
    """Return ``text`` as displayed: tabs become spaces, other characters are kept."""
    if "\t" not in text:
        return text
    return "".join(" " * char_width(ch) if ch == "\t" else ch for ch in text)
