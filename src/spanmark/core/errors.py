# topmark:header:start
#
#   project      : SpanMark
#   file         : errors.py
#   file_relpath : src/spanmark/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the SpanMark rendering engine.

Rendering is pure and deterministic, so every exception here signals a caller
contract violation (malformed input or misuse of the run lifecycle), never a
transient condition. Nothing is retried.

Taxonomy:
    * `OutOfRangeSpanError`: a span offset lies beyond its file's bounds.
    * `UnknownSourceFileError`: a span references a file id the source map lacks.
    * `EmptySpanSetError`: a top-level diagnostic has no primary span and is not span-less.
    * `DoubleFinalizeError`: a diagnostic was appended (or the run finalized) after
      finalization.
    * `ReportStateError`: other run-lifecycle misuse (unsubmitted tickets, early reads).
    * `ConfigError` / `RecordError`: invalid configuration or record documents.

The CLI maps these onto `click` exceptions with sysexits-style exit codes
(see `spanmark.cli.errors`).
"""

from __future__ import annotations


class SpanmarkError(Exception):
    """Base class for all SpanMark library errors."""


class RenderError(SpanmarkError):
    """A diagnostic could not be rendered because its input data is malformed."""


class OutOfRangeSpanError(RenderError):
    """A span references a byte offset beyond the end of its source file.

    Attributes:
        path (str): Path of the referenced source file.
        offset (int): The offending byte offset.
        length (int): Length of the file in bytes.
    """

    def __init__(self, path: str, offset: int, length: int) -> None:
        self.path = path
        self.offset = offset
        self.length = length
        super().__init__(
            f"byte offset {offset} is out of range for '{path}' ({length} bytes)"
        )


class UnknownSourceFileError(RenderError):
    """A span references a file id that was never added to the source map."""

    def __init__(self, file_id: int) -> None:
        self.file_id = file_id
        super().__init__(f"no source file registered with id {file_id}")


class EmptySpanSetError(RenderError):
    """A top-level diagnostic carries no primary span but is not a span-less kind."""


class ReportStateError(SpanmarkError):
    """The run report was used in a way its lifecycle does not allow."""


class DoubleFinalizeError(ReportStateError, RuntimeError):
    """A diagnostic was appended, or the run finalized, after finalization."""


class ConfigError(SpanmarkError):
    """Invalid, missing or malformed SpanMark configuration."""


class RecordError(SpanmarkError):
    """A diagnostic record document is malformed.

    Attributes:
        key_path (str): Dotted path of the offending key (e.g. ``diagnostics[0].primary.start``).
    """

    def __init__(self, key_path: str, message: str) -> None:
        self.key_path = key_path
        super().__init__(f"{key_path}: {message}" if key_path else message)
