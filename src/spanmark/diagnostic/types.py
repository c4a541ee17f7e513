# topmark:header:start
#
#   project      : SpanMark
#   file         : types.py
#   file_relpath : src/spanmark/diagnostic/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared typing helpers for SpanMark diagnostics.

This module defines small Protocols used to express the output side of the
renderer structurally, so the report aggregator can write to any text stream
(`sys.stderr`, `io.StringIO`, a console adapter) without depending on a concrete class.
"""

from __future__ import annotations

from typing import Protocol


class DiagnosticSink(Protocol):
    """Append-only text destination for rendered diagnostic blocks."""

    def write(self, text: str, /) -> object:
        """Append ``text`` to the destination."""
        ...
