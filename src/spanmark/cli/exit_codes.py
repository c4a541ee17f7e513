# topmark:header:start
#
#   project      : SpanMark
#   file         : exit_codes.py
#   file_relpath : src/spanmark/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for SpanMark CLI.

SpanMark aligns with the BSD `sysexits` convention where practical, so that
other tooling can interpret failures consistently. ``FAILURE`` (1) means the
rendered report contained error-level diagnostics.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for SpanMark CLI.

    Attributes:
        SUCCESS: The report contained no error-level diagnostics.
        FAILURE: Error-level diagnostics were emitted.
        USAGE_ERROR: Command-line invocation error (invalid flags/args). Mirrors
            BSD ``EX_USAGE (64)``.
        DATA_ERROR: Malformed record document or unrenderable diagnostic.
            Mirrors BSD ``EX_DATAERR (65)``.
        FILE_NOT_FOUND: Input path does not exist. Mirrors BSD ``EX_NOINPUT (66)``.
        SOFTWARE_ERROR: Internal contract violation. Mirrors BSD ``EX_SOFTWARE (70)``.
        IO_ERROR: I/O error reading a file. Mirrors BSD ``EX_IOERR (74)``.
        CONFIG_ERROR: Configuration error (missing/invalid/malformed config).
            Mirrors BSD ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last-resort).
    """

    SUCCESS = 0
    FAILURE = 1

    # sysexits-aligned values for better interoperability
    USAGE_ERROR = 64  # EX_USAGE
    DATA_ERROR = 65  # EX_DATAERR
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    SOFTWARE_ERROR = 70  # EX_SOFTWARE
    IO_ERROR = 74  # EX_IOERR
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
