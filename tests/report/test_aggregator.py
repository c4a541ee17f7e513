# topmark:header:start
#
#   project      : SpanMark
#   file         : test_aggregator.py
#   file_relpath : tests/report/test_aggregator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `spanmark.report.aggregator.ReportAggregator`."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import pytest

from spanmark.core.errors import DoubleFinalizeError, OutOfRangeSpanError, ReportStateError
from spanmark.diagnostic.model import Diagnostic, Level, Span
from spanmark.rendering.annotator import Annotator
from spanmark.report.aggregator import ReportAggregator, RunReport, RunState
from spanmark.report.summary import FUTURE_ENTRY_HEADING, FUTURE_REPORT_HEADING
from tests.conftest import ListSink, block, find_span, make_config, make_source_map, mark_golden

if TYPE_CHECKING:
    from spanmark.source.source_map import SourceMap

SRC: str = "fn main() {\n    let x = 5u8;\n}\n"


@pytest.fixture
def source_map() -> SourceMap:
    return make_source_map(("src/main.rs", SRC))


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


def diag(source_map: SourceMap, level: Level, message: str, **kwargs: Any) -> Diagnostic:
    return Diagnostic(level, message, primary_span=find_span(source_map.get(0), "x"), **kwargs)


def rendered(source_map: SourceMap, diagnostic: Diagnostic) -> str:
    return Annotator(source_map, make_config()).render(diagnostic)


@mark_golden
def test_single_error_run(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    aggregator.emit(diag(source_map, Level.ERROR, "mismatched types", code="E0308"))
    report: RunReport = aggregator.finalize()

    assert sink.text == block(
        "error[E0308]: mismatched types",
        " --> src/main.rs:2:9",
        "  |",
        "2 |     let x = 5u8;",
        "  |         ^",
        "",
        "error: aborting due to previous error",
        "",
        "For more information about this error, try `rustc --explain E0308`.",
    )
    assert report.error_count == 1
    assert report.warning_count == 0
    assert report.explain_codes == ["E0308"]
    assert report.has_errors
    assert aggregator.state is RunState.DONE
    assert aggregator.report is report


def test_clean_run_writes_nothing(source_map: SourceMap, sink: ListSink) -> None:
    report: RunReport = ReportAggregator(source_map, sink).finalize()
    assert sink.text == ""
    assert not report.has_errors


def test_warnings_only_run_has_no_explain_hint(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    first = diag(source_map, Level.WARNING, "first", code="E0001")
    second = diag(source_map, Level.WARNING, "second")
    aggregator.emit(first)
    aggregator.emit(second)
    aggregator.finalize()

    assert sink.text == (
        f"{rendered(source_map, first)}\n"
        f"{rendered(source_map, second)}\n"
        "warning: 2 warnings emitted\n\n"
    )


def test_explain_codes_follow_first_occurrence(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    for code in ["E0425", "unused_variables", "E0308", "E0425"]:
        aggregator.emit(diag(source_map, Level.ERROR, "oops", code=code))
    aggregator.emit(diag(source_map, Level.WARNING, "hmm", code="E0599"))
    report: RunReport = aggregator.finalize()

    assert report.explain_codes == ["E0425", "E0308", "E0599"]
    assert sink.text.endswith(
        "error: aborting due to 4 previous errors; 1 warning emitted\n\n"
        "Some errors have detailed explanations: E0425, E0308, E0599.\n"
        "For more information about an error, try `rustc --explain E0425`.\n"
    )


def test_configured_explain_codes_restrict_the_hint(
    source_map: SourceMap, sink: ListSink
) -> None:
    config = make_config(explain_codes={"E0308"}, tool_name="mycc")
    aggregator = ReportAggregator(source_map, sink, config)
    aggregator.emit(diag(source_map, Level.ERROR, "a", code="E0425"))
    aggregator.emit(diag(source_map, Level.ERROR, "b", code="E0308"))
    aggregator.finalize()

    assert sink.text.endswith(
        "For more information about this error, try `mycc --explain E0308`.\n"
    )


def test_filtered_levels_are_counted_but_not_printed(
    source_map: SourceMap, sink: ListSink
) -> None:
    aggregator = ReportAggregator(source_map, sink, make_config(levels={Level.ERROR}))
    warning = diag(source_map, Level.WARNING, "quiet please")
    error = diag(source_map, Level.ERROR, "loud")
    aggregator.emit(warning)
    aggregator.emit(error)
    report: RunReport = aggregator.finalize()

    assert "quiet please" not in sink.text
    assert sink.text == (
        f"{rendered(source_map, error)}\n"
        "error: aborting due to previous error; 1 warning emitted\n\n"
    )
    assert report.warning_count == 1
    assert report.diagnostics == [warning, error]


def test_future_incompatibility_report(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    first = diag(source_map, Level.WARNING, "will break", future_incompatible=True)
    second = diag(source_map, Level.WARNING, "will break too", future_incompatible=True)
    aggregator.emit(first)
    aggregator.emit(second)
    report: RunReport = aggregator.finalize()

    assert [entry.original for entry in report.future_incompatible] == [first, second]
    assert sink.text.endswith(
        "warning: 2 warnings emitted\n\n"
        f"{FUTURE_REPORT_HEADING}\n{rendered(source_map, first)}\n"
        f"{FUTURE_ENTRY_HEADING}\n{rendered(source_map, second)}\n"
    )


def test_report_is_unavailable_before_finalize(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    assert aggregator.state is RunState.COLLECTING
    with pytest.raises(ReportStateError):
        _ = aggregator.report


def test_double_finalize_and_late_emission(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    aggregator.finalize()

    with pytest.raises(DoubleFinalizeError):
        aggregator.finalize()
    with pytest.raises(DoubleFinalizeError):
        aggregator.emit(diag(source_map, Level.ERROR, "too late"))
    with pytest.raises(DoubleFinalizeError):
        aggregator.reserve()


def test_unsubmitted_ticket_blocks_finalize(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    aggregator.reserve()
    with pytest.raises(ReportStateError) as excinfo:
        aggregator.finalize()
    assert not isinstance(excinfo.value, DoubleFinalizeError)
    assert aggregator.state is RunState.COLLECTING


def test_tickets_flush_in_reservation_order(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    tickets: list[int] = [aggregator.reserve() for _ in range(3)]
    diags: list[Diagnostic] = [diag(source_map, Level.NOTE, f"note {i}") for i in range(3)]

    aggregator.submit(tickets[2], diags[2])
    assert sink.chunks == []
    aggregator.submit(tickets[0], diags[0])
    assert sink.chunks == [f"{rendered(source_map, diags[0])}\n"]
    aggregator.submit(tickets[1], diags[1])
    assert sink.chunks == [f"{rendered(source_map, d)}\n" for d in diags]


def test_ticket_misuse(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    ticket: int = aggregator.reserve()
    aggregator.submit(ticket, diag(source_map, Level.NOTE, "once"))

    with pytest.raises(ReportStateError):
        aggregator.submit(ticket, diag(source_map, Level.NOTE, "twice"))
    with pytest.raises(ReportStateError):
        aggregator.submit(42, diag(source_map, Level.NOTE, "never reserved"))


def test_render_failure_leaves_the_stream_intact(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    good = diag(source_map, Level.ERROR, "fine")
    bad = Diagnostic(Level.ERROR, "broken", primary_span=Span(0, 2, 400))

    pending: int = aggregator.reserve()
    later: int = aggregator.reserve()
    aggregator.submit(later, good)
    assert sink.chunks == []

    with pytest.raises(OutOfRangeSpanError):
        aggregator.submit(pending, bad)

    # The failed ticket is skipped; the block waiting behind it is written.
    assert sink.chunks == [f"{rendered(source_map, good)}\n"]
    report: RunReport = aggregator.finalize()
    assert report.error_count == 1
    assert report.diagnostics == [good]


def test_concurrent_producers_keep_ticket_order(source_map: SourceMap, sink: ListSink) -> None:
    aggregator = ReportAggregator(source_map, sink)
    diags: list[Diagnostic] = [diag(source_map, Level.NOTE, f"note {i}") for i in range(16)]
    tickets: list[int] = [aggregator.reserve() for _ in diags]
    def produce(index: int) -> None:
        aggregator.submit(tickets[index], diags[index])

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(produce, reversed(range(len(diags)))))

    aggregator.finalize()
    assert sink.text == "".join(f"{rendered(source_map, d)}\n" for d in diags)


def test_ticket_being_rendered_cannot_be_submitted_again(
    source_map: SourceMap, sink: ListSink
) -> None:
    class ResubmittingAnnotator(Annotator):
        """Submits the same ticket again while the first render is running."""

        errors: list[ReportStateError]

        def render(self, diagnostic: Diagnostic) -> str:
            if not hasattr(self, "errors"):
                self.errors = []
                try:
                    aggregator.submit(ticket, diagnostic)
                except ReportStateError as exc:
                    self.errors.append(exc)
            return super().render(diagnostic)

    annotator = ResubmittingAnnotator(source_map, make_config())
    aggregator = ReportAggregator(source_map, sink, annotator=annotator)
    note = diag(source_map, Level.NOTE, "once")
    ticket: int = aggregator.reserve()

    aggregator.submit(ticket, note)

    assert len(annotator.errors) == 1
    assert sink.chunks == [f"{rendered(source_map, note)}\n"]
    assert aggregator.finalize().diagnostics == [note]
