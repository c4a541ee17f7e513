# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic record primitives.

This package provides the immutable records SpanMark renders: `Diagnostic`
(with its children and suggestions), `Span`, `Suggestion` and the enums that
qualify them.

Design:
    - Records are produced elsewhere (analysis passes) and never mutated here.
    - Rendering lives in [`spanmark.rendering`][spanmark.rendering]; run-level
      aggregation in [`spanmark.report`][spanmark.report].
"""

from __future__ import annotations

from spanmark.diagnostic.model import (
    Applicability,
    Diagnostic,
    Level,
    Span,
    SubstitutionPart,
    Suggestion,
    SuggestionStyle,
    codes_of,
)
from spanmark.diagnostic.types import DiagnosticSink

__all__ = [
    "Applicability",
    "Diagnostic",
    "DiagnosticSink",
    "Level",
    "Span",
    "SubstitutionPart",
    "Suggestion",
    "SuggestionStyle",
    "codes_of",
]
