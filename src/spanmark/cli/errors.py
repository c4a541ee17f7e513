# topmark:header:start
#
#   project      : SpanMark
#   file         : errors.py
#   file_relpath : src/spanmark/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for SpanMark CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no console
    is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from spanmark.cli.exit_codes import ExitCode


class SpanmarkCliError(click.ClickException):
    """Base class for all SpanMark CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorization happens in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(f"Error: {self.format_message()}")
                return
        super().show(file)


class SpanmarkUsageError(SpanmarkCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class SpanmarkConfigError(SpanmarkCliError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


class SpanmarkRecordError(SpanmarkCliError):
    """Error for malformed record documents."""

    exit_code = ExitCode.DATA_ERROR


class SpanmarkRenderFailure(SpanmarkCliError):
    """Error for diagnostics that cannot be rendered (bad spans, unknown files)."""

    exit_code = ExitCode.DATA_ERROR


class SpanmarkFileNotFoundError(SpanmarkCliError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class SpanmarkIOError(SpanmarkCliError):
    """Error for I/O errors reading files."""

    exit_code = ExitCode.IO_ERROR


class SpanmarkStateError(SpanmarkCliError):
    """Error for run-lifecycle contract violations."""

    exit_code = ExitCode.SOFTWARE_ERROR
