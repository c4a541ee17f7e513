# topmark:header:start
#
#   project      : SpanMark
#   file         : summary.py
#   file_relpath : src/spanmark/report/summary.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Text of the trailing run summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from spanmark.constants import ELISION_MARKER, MAX_LISTED_EXPLAIN_CODES
from spanmark.diagnostic.model import Diagnostic, Level

if TYPE_CHECKING:
    from collections.abc import Sequence

FUTURE_REPORT_HEADING: str = "Future incompatibility report: Future breakage diagnostic:"
FUTURE_ENTRY_HEADING: str = "Future breakage diagnostic:"


def _warnings_text(count: int) -> str:
    return "1 warning emitted" if count == 1 else f"{count} warnings emitted"


def summary_message(errors: int, warnings: int) -> tuple[Level, str] | None:
    """Return the level and message of the summary line, or None for a clean run.

    Examples:
        >>> summary_message(1, 0)
        (<Level.ERROR: 'error'>, 'aborting due to previous error')
        >>> summary_message(0, 2)[1]
        '2 warnings emitted'
    """
    if errors:
        text: str = (
            "aborting due to previous error"
            if errors == 1
            else f"aborting due to {errors} previous errors"
        )
        if warnings:
            text += f"; {_warnings_text(warnings)}"
        return Level.ERROR, text
    if warnings:
        return Level.WARNING, _warnings_text(warnings)
    return None


def summary_diagnostic(errors: int, warnings: int) -> Diagnostic | None:
    """Return the span-less summary diagnostic, or None for a clean run."""
    summary: tuple[Level, str] | None = summary_message(errors, warnings)
    if summary is None:
        return None
    level, message = summary
    return Diagnostic(level=level, message=message, spanless=True)


def explain_lines(codes: Sequence[str], tool_name: str) -> list[str]:
    """Return the explain hint lines for ``codes`` (in order of first occurrence).

    At most `MAX_LISTED_EXPLAIN_CODES` codes are listed; when more were seen the
    list ends with an elision marker instead of a period.
    """
    if not codes:
        return []
    if len(codes) == 1:
        return [f"For more information about this error, try `{tool_name} --explain {codes[0]}`."]
    listed: str = ", ".join(codes[:MAX_LISTED_EXPLAIN_CODES])
    end: str = ELISION_MARKER if len(codes) > MAX_LISTED_EXPLAIN_CODES else "."
    return [
        f"Some errors have detailed explanations: {listed}{end}",
        f"For more information about an error, try `{tool_name} --explain {codes[0]}`.",
    ]
