# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/report/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run-level aggregation of rendered diagnostics.

`ReportAggregator` streams rendered blocks to a sink in emission order, keeps
the counts and codes of a run in a `RunReport`, and writes the trailing summary
(abort line, explain hints, future-incompatibility report) when finalized.
"""

from __future__ import annotations

from spanmark.report.aggregator import FutureIncompatible, ReportAggregator, RunReport, RunState

__all__ = [
    "FutureIncompatible",
    "ReportAggregator",
    "RunReport",
    "RunState",
]
