# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command-line interface for SpanMark.

The CLI is a thin shell around the library: `spanmark render` loads a record
document, renders every diagnostic through a
[`ReportAggregator`][spanmark.report.aggregator.ReportAggregator] and writes the
report to stdout. Library exceptions are mapped onto `click` exceptions with
sysexits-style exit codes (see `spanmark.cli.errors`).
"""

from __future__ import annotations
