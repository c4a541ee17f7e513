# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/records/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic record documents.

A record document (TOML or JSON) bundles the source files of a run with the
diagnostics to render against them. `load_records` returns a `RecordSet`.
"""

from __future__ import annotations

from spanmark.records.loaders import load_records, parse_records
from spanmark.records.schema import RecordSet, records_from_mapping

__all__ = [
    "RecordSet",
    "load_records",
    "parse_records",
    "records_from_mapping",
]
