# topmark:header:start
#
#   project      : SpanMark
#   file         : main.py
#   file_relpath : src/spanmark/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark command-line entry point.

Group-level options (verbosity, color) are resolved once and placed into
``ctx.obj`` together with the console; subcommands read them from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from spanmark.cli.color import ColorMode, resolve_color_mode
from spanmark.cli.commands.render import render_command
from spanmark.cli.commands.version import version_command
from spanmark.cli.console import ClickConsole
from spanmark.cli.options import common_color_options, common_verbose_options, resolve_verbosity
from spanmark.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from spanmark.cli.console_api import ConsoleLike
    from spanmark.config.logging import SpanmarkLogger

logger: SpanmarkLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging and color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    level_cli: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = verbose

    # SPANMARK_LOG_LEVEL wins; -v/-q only apply when passed explicitly.
    level_env: int | None = resolve_env_log_level()
    log_level: int | None = level_env
    if log_level is None and (verbose or quiet):
        log_level = level_cli
    ctx.obj["log_level"] = log_level
    setup_logging(level=log_level)

    explicit_mode: ColorMode | None = ColorMode.NEVER if no_color else color_mode
    ctx.obj["color_mode"] = explicit_mode
    enable_color: bool = resolve_color_mode(cli_mode=explicit_mode)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="SpanMark: render compiler diagnostics as annotated source snippets.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the SpanMark CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'spanmark render RECORDS' to render a record document.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(render_command)

if __name__ == "__main__":
    cli()
