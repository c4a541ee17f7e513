# topmark:header:start
#
#   project      : SpanMark
#   file         : console_api.py
#   file_relpath : src/spanmark/cli/console_api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Output surface shared by the CLI commands.

Rendered reports go to `print` (stdout); status lines and failures go to
`warn`/`error` (stderr). Logging is configured separately and never writes
through a console.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleLike(Protocol):
    """What a command needs from its console."""

    def print(self, text: str = "", *, nl: bool = True) -> None: ...

    def warn(self, text: str, *, nl: bool = True) -> None: ...

    def error(self, text: str, *, nl: bool = True) -> None: ...

    def styled(self, text: str, **style_kwargs: object) -> str:
        """Return ``text`` styled for this console, or unchanged when color is off."""
        ...
