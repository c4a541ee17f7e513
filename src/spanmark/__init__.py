# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark package.

SpanMark renders structured compiler diagnostics (severity, code, labelled
source spans, notes, help entries and suggested edits) as rustc-style
annotated source snippets, and aggregates a run's diagnostics into the usual
trailing summary.

Typical use::

    source_map = SourceMap()
    main = source_map.add_file("src/main.rs", text)
    aggregator = ReportAggregator(source_map, sys.stdout)
    aggregator.emit(Diagnostic(Level.ERROR, "mismatched types", primary_span=Span(main.id, 10, 14)))
    aggregator.finalize()
"""

from __future__ import annotations

from spanmark.config.model import MutableRenderConfig, RenderConfig
from spanmark.diagnostic.model import (
    Applicability,
    Diagnostic,
    Level,
    Span,
    SubstitutionPart,
    Suggestion,
    SuggestionStyle,
)
from spanmark.rendering.annotator import Annotator
from spanmark.rendering.suggestion import apply_suggestion
from spanmark.report.aggregator import ReportAggregator, RunReport
from spanmark.source.source_map import SourceFile, SourceMap

__all__ = [
    "Annotator",
    "Applicability",
    "Diagnostic",
    "Level",
    "MutableRenderConfig",
    "RenderConfig",
    "ReportAggregator",
    "RunReport",
    "SourceFile",
    "SourceMap",
    "Span",
    "SubstitutionPart",
    "Suggestion",
    "SuggestionStyle",
    "apply_suggestion",
]
