# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/source/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Source text indexing: files, line tables and display-width policy."""

from __future__ import annotations

from spanmark.source.source_map import SourceFile, SourceMap
from spanmark.source.width import CharWidth, expand_text, make_char_width, text_width

__all__ = [
    "CharWidth",
    "SourceFile",
    "SourceMap",
    "expand_text",
    "make_char_width",
    "text_width",
]
