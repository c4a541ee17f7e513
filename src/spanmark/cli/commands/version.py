# topmark:header:start
#
#   project      : SpanMark
#   file         : version.py
#   file_relpath : src/spanmark/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark `version` command.

Prints the current SpanMark version as installed in the active Python environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from spanmark.constants import SPANMARK_VERSION

if TYPE_CHECKING:
    from spanmark.cli.console_api import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of SpanMark.",
)
def version_command() -> None:
    """Show the current version of SpanMark."""
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    if ctx.obj.get("verbosity_level", 0) > 0:
        console.print(console.styled("SpanMark version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(SPANMARK_VERSION, bold=True)}")
    else:
        console.print(console.styled(SPANMARK_VERSION, bold=True))
