# topmark:header:start
#
#   project      : SpanMark
#   file         : test_diagnostic_model.py
#   file_relpath : tests/diagnostic/test_diagnostic_model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the diagnostic record types."""

from __future__ import annotations

import pytest

from spanmark.diagnostic.model import (
    Applicability,
    Diagnostic,
    Level,
    Span,
    Suggestion,
    codes_of,
)
from tests.conftest import find_span, make_source_map, parametrize, render


@parametrize(
    "applicability, expected",
    [
        (Applicability.MACHINE_APPLICABLE, True),
        (Applicability.MAYBE_INCORRECT, False),
        (Applicability.HAS_PLACEHOLDERS, False),
        (Applicability.UNSPECIFIED, False),
    ],
)
def test_only_machine_applicable_suggestions_may_be_applied_blindly(
    applicability: Applicability, expected: bool
) -> None:
    suggestion = Suggestion(Span(0, 0, 0), "x", applicability=applicability)
    assert suggestion.is_machine_applicable is expected


def test_applicability_never_changes_the_rendering() -> None:
    sm = make_source_map(("src/main.rs", "fn main() {\n    call();\n}\n"))
    span: Span = find_span(sm.get(0), "call")

    def rendered(applicability: Applicability) -> str:
        suggestion = Suggestion(span, "<callee>", applicability, message="name it")
        diag = Diagnostic(Level.ERROR, "bad call", primary_span=span, suggestions=(suggestion,))
        return render(sm, diag)

    outputs: set[str] = {rendered(tier) for tier in Applicability}
    assert len(outputs) == 1


@parametrize("text", ["error", " Warning ", "NOTE", "help"])
def test_level_parse_is_case_insensitive(text: str) -> None:
    assert Level.parse(text).value == text.strip().lower()


def test_level_parse_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="unknown diagnostic level"):
        Level.parse("fatal")


@parametrize("start, end", [(-1, 2), (5, 2)])
def test_span_rejects_invalid_ranges(start: int, end: int) -> None:
    with pytest.raises(ValueError):
        Span(0, start, end)


def test_multipart_needs_a_part() -> None:
    with pytest.raises(ValueError):
        Suggestion.multipart("nothing", [])


def test_spans_yield_the_primary_first_and_flag_it() -> None:
    primary = Span(0, 4, 6)
    secondary = Span(0, 0, 2, label="here")
    diag = Diagnostic(Level.ERROR, "m", primary_span=primary, secondary_spans=[secondary])

    spans: list[Span] = list(diag.spans())

    assert [s.byte_start for s in spans] == [4, 0]
    assert spans[0].is_primary
    assert isinstance(diag.secondary_spans, tuple)


def test_walk_and_codes_follow_declaration_order() -> None:
    inner = Diagnostic(Level.NOTE, "inner", code="E0002")
    child = Diagnostic(Level.HELP, "child", children=(inner,))
    top = Diagnostic(Level.ERROR, "top", code="E0001", children=(child,), spanless=True)

    assert [d.message for d in top.walk()] == ["top", "child", "inner"]
    assert codes_of([*top.walk(), top]) == ["E0001", "E0002"]
