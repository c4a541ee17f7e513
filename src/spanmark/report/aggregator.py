# topmark:header:start
#
#   project      : SpanMark
#   file         : aggregator.py
#   file_relpath : src/spanmark/report/aggregator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Streaming aggregation of rendered diagnostics for one run.

Lifecycle::

    COLLECTING --finalize()--> FINALIZING --> DONE

While collecting, every submitted diagnostic is rendered and its block,
followed by one blank line, is written to the sink in ticket order. Producers
on other threads take a ticket with `ReportAggregator.reserve` and hand their
diagnostic over with `ReportAggregator.submit` whenever it is ready; a block is
written once every earlier ticket has been written. `ReportAggregator.emit`
does both in one call.

A diagnostic is rendered completely before anything is written, so a render
failure leaves the output stream untouched; the failed ticket is skipped.

`finalize` writes the summary line, the explain hints and the
future-incompatibility report, then moves to the terminal `DONE` state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.config.model import RenderConfig
from spanmark.core.errors import DoubleFinalizeError, ReportStateError
from spanmark.diagnostic.model import Level
from spanmark.rendering.annotator import Annotator
from spanmark.report.summary import (
    FUTURE_ENTRY_HEADING,
    FUTURE_REPORT_HEADING,
    explain_lines,
    summary_diagnostic,
)

if TYPE_CHECKING:
    from spanmark.config.logging import SpanmarkLogger
    from spanmark.diagnostic.model import Diagnostic
    from spanmark.diagnostic.types import DiagnosticSink
    from spanmark.source.source_map import SourceMap

logger: SpanmarkLogger = get_logger(__name__)


class RunState(Enum):
    """Lifecycle state of a `ReportAggregator`."""

    COLLECTING = "collecting"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass(frozen=True)
class FutureIncompatible:
    """A diagnostic that will become a hard error, with its rendered block.

    The block is cached when the diagnostic is emitted and printed again
    verbatim in the future-incompatibility report.
    """

    original: Diagnostic
    rendered: str


@dataclass
class RunReport:
    """Everything a run has emitted so far.

    Attributes:
        diagnostics (list[Diagnostic]): Top-level diagnostics in emission order,
            including those filtered out by level.
        error_count (int): Number of error-level diagnostics.
        warning_count (int): Number of warning-level diagnostics.
        explain_codes (list[str]): Explainable codes in order of first occurrence.
        future_incompatible (list[FutureIncompatible]): Entries of the
            future-incompatibility report.
        state (RunState): Lifecycle state.
    """

    diagnostics: list[Diagnostic] = field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    explain_codes: list[str] = field(default_factory=list)
    future_incompatible: list[FutureIncompatible] = field(default_factory=list)
    state: RunState = RunState.COLLECTING

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def record(self, diagnostic: Diagnostic, rendered: str, config: RenderConfig) -> None:
        """Account for an emitted diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.level is Level.ERROR:
            self.error_count += 1
        elif diagnostic.level is Level.WARNING:
            self.warning_count += 1
        code: str | None = diagnostic.code
        if (
            code
            and code not in self.explain_codes
            and config.is_explainable(code)
        ):
            self.explain_codes.append(code)
        if diagnostic.future_incompatible:
            self.future_incompatible.append(FutureIncompatible(diagnostic, rendered))


class ReportAggregator:
    """Collect diagnostics of one run and stream their blocks to a sink.

    Args:
        source_map: Files referenced by the diagnostics.
        sink: Destination of the rendered text.
        config: Rendering configuration; defaults to `RenderConfig()`.
        annotator: Renderer to use; built from ``source_map`` and ``config`` when omitted.
    """

    def __init__(
        self,
        source_map: SourceMap,
        sink: DiagnosticSink,
        config: RenderConfig | None = None,
        *,
        annotator: Annotator | None = None,
    ) -> None:
        self.config: RenderConfig = config or RenderConfig()
        self.annotator: Annotator = annotator or Annotator(source_map, self.config)
        self.sink = sink
        self._lock = threading.Lock()
        self._report = RunReport()
        self._next_ticket: int = 0
        self._next_flush: int = 0
        self._ready: dict[int, tuple[Diagnostic, str] | None] = {}
        self._in_flight: set[int] = set()

    @property
    def state(self) -> RunState:
        return self._report.state

    @property
    def report(self) -> RunReport:
        """Return the run report.

        Raises:
            ReportStateError: If the run has not been finalized yet.
        """
        with self._lock:
            if self._report.state is not RunState.DONE:
                raise ReportStateError("the run report is only available after finalize()")
            return self._report

    def _check_collecting(self) -> None:
        if self._report.state is not RunState.COLLECTING:
            raise DoubleFinalizeError(
                f"cannot append to a run in state '{self._report.state.value}'"
            )

    def reserve(self) -> int:
        """Take the next emission ticket.

        Raises:
            DoubleFinalizeError: If the run was finalized.
        """
        with self._lock:
            self._check_collecting()
            ticket: int = self._next_ticket
            self._next_ticket += 1
            return ticket

    def submit(self, ticket: int, diagnostic: Diagnostic) -> None:
        """Render ``diagnostic`` and write it once every earlier ticket is written.

        Raises:
            DoubleFinalizeError: If the run was finalized.
            ReportStateError: If ``ticket`` was never reserved or already used.
            RenderError: If the diagnostic cannot be rendered; the ticket is skipped.
        """
        with self._lock:
            self._check_collecting()
            if (
                not self._next_flush <= ticket < self._next_ticket
                or ticket in self._ready
                or ticket in self._in_flight
            ):
                raise ReportStateError(f"ticket {ticket} was not reserved or was already used")
            self._in_flight.add(ticket)

        try:
            rendered: str = self.annotator.render(diagnostic)
        except Exception:
            with self._lock:
                self._in_flight.discard(ticket)
                self._ready[ticket] = None
                self._flush()
            raise

        with self._lock:
            self._in_flight.discard(ticket)
            self._check_collecting()
            self._ready[ticket] = (diagnostic, rendered)
            self._flush()

    def emit(self, diagnostic: Diagnostic) -> None:
        """Render and write ``diagnostic`` after everything reserved before it."""
        self.submit(self.reserve(), diagnostic)

    def _flush(self) -> None:
        # Caller holds the lock.
        while self._next_flush in self._ready:
            entry: tuple[Diagnostic, str] | None = self._ready.pop(self._next_flush)
            self._next_flush += 1
            if entry is None:
                logger.debug("Skipping ticket %d after a render failure", self._next_flush - 1)
                continue
            diagnostic, rendered = entry
            self._report.record(diagnostic, rendered, self.config)
            if self.config.shows(diagnostic.level):
                self.sink.write(f"{rendered}\n")
            else:
                logger.trace("Filtered %s '%s'", diagnostic.level.value, diagnostic.message)

    def finalize(self) -> RunReport:
        """Write the trailing summary and close the run.

        Returns:
            The final run report.

        Raises:
            DoubleFinalizeError: If the run was already finalized.
            ReportStateError: If reserved tickets were never submitted.
        """
        with self._lock:
            if self._report.state is not RunState.COLLECTING:
                raise DoubleFinalizeError("the run was already finalized")
            if self._next_flush != self._next_ticket:
                raise ReportStateError(
                    f"{self._next_ticket - self._next_flush} reserved ticket(s) "
                    "were never submitted"
                )
            self._report.state = RunState.FINALIZING
            report: RunReport = self._report
            logger.debug(
                "Finalizing run: %d errors, %d warnings, %d future-incompatible",
                report.error_count,
                report.warning_count,
                len(report.future_incompatible),
            )

            summary: Diagnostic | None = summary_diagnostic(
                report.error_count, report.warning_count
            )
            if summary is not None:
                self.sink.write(f"{self.annotator.render(summary)}\n")
            if report.has_errors:
                for line in explain_lines(report.explain_codes, self.config.tool_name):
                    self.sink.write(f"{line}\n")
            for i, entry in enumerate(report.future_incompatible):
                heading: str = FUTURE_REPORT_HEADING if i == 0 else FUTURE_ENTRY_HEADING
                self.sink.write(f"{heading}\n{entry.rendered}\n")

            report.state = RunState.DONE
            return report
