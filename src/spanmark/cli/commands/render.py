# topmark:header:start
#
#   project      : SpanMark
#   file         : render.py
#   file_relpath : src/spanmark/cli/commands/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark `render` command.

Loads a record document, renders every diagnostic through a `ReportAggregator`
and writes the report (blocks, summary line, explain hints and
future-incompatibility report) to stdout.

Exit status:
    * ``0`` when no error-level diagnostic was emitted;
    * ``1`` when at least one was (filtered ones included);
    * sysexits-style codes for usage, input, config and render failures.

Configuration precedence (last wins): built-in defaults, the discovered or
``--config`` file, command-line options.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from spanmark.cli.color import ColorMode
from spanmark.cli.console import ConsoleSink
from spanmark.cli.errors import (
    SpanmarkConfigError,
    SpanmarkFileNotFoundError,
    SpanmarkIOError,
    SpanmarkRecordError,
    SpanmarkRenderFailure,
    SpanmarkStateError,
)
from spanmark.cli.exit_codes import ExitCode
from spanmark.config.loaders import load_config
from spanmark.config.logging import get_logger
from spanmark.config.model import parse_levels
from spanmark.core.errors import ConfigError, RecordError, RenderError, ReportStateError
from spanmark.diagnostic.model import Level
from spanmark.records.loaders import load_records
from spanmark.report.aggregator import ReportAggregator

if TYPE_CHECKING:
    from spanmark.cli.console_api import ConsoleLike
    from spanmark.config.logging import SpanmarkLogger
    from spanmark.config.model import MutableRenderConfig, RenderConfig
    from spanmark.records.schema import RecordSet
    from spanmark.report.aggregator import RunReport

logger: SpanmarkLogger = get_logger(__name__)


def _resolve_config(
    ctx: click.Context,
    *,
    config_file: Path | None,
    no_config: bool,
    ui_testing: bool,
    tool_name: str | None,
    tab_width: int | None,
    levels: tuple[str, ...],
) -> RenderConfig:
    try:
        draft: MutableRenderConfig = load_config(config_file, discover=not no_config)
        if ui_testing:
            draft.anonymize_line_numbers = True
        if tool_name is not None:
            draft.tool_name = tool_name
        if tab_width is not None:
            draft.tab_width = tab_width
        if levels:
            draft.levels = parse_levels(levels, where="--level")

        # An explicit --color/--no-color wins over the config file.
        explicit_mode: ColorMode | None = ctx.obj.get("color_mode")
        if explicit_mode is not None or not draft.color:
            draft.color = bool(ctx.obj.get("color_enabled", False))
        return draft.freeze()
    except ConfigError as exc:
        raise SpanmarkConfigError(str(exc)) from exc


def _load(records_path: Path) -> RecordSet:
    try:
        return load_records(records_path)
    except FileNotFoundError as exc:
        raise SpanmarkFileNotFoundError(f"No such file: {records_path}") from exc
    except RecordError as exc:
        raise SpanmarkRecordError(f"{records_path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SpanmarkIOError(f"Cannot read {records_path}: {exc}") from exc


@click.command(
    name="render",
    help="Render the diagnostics of a record document (TOML or JSON).",
)
@click.argument(
    "records_path",
    metavar="RECORDS",
    type=click.Path(path_type=Path, dir_okay=False),
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Read configuration from this file instead of discovering one.",
)
@click.option(
    "--no-config",
    is_flag=True,
    default=False,
    help="Do not discover spanmark.toml / pyproject.toml.",
)
@click.option(
    "--ui-testing",
    is_flag=True,
    default=False,
    help="Print LL instead of line numbers in the gutter.",
)
@click.option("--tool-name", default=None, help="Command named in --explain hints.")
@click.option(
    "--tab-width",
    type=click.IntRange(min=1),
    default=None,
    help="Number of columns a tab expands to.",
)
@click.option(
    "--level",
    "levels",
    multiple=True,
    type=click.Choice([level.value for level in Level], case_sensitive=False),
    help="Only print diagnostics of this level (repeatable).",
)
@click.pass_context
def render_command(
    ctx: click.Context,
    *,
    records_path: Path,
    config_file: Path | None,
    no_config: bool,
    ui_testing: bool,
    tool_name: str | None,
    tab_width: int | None,
    levels: tuple[str, ...],
) -> None:
    """Render a record document to stdout."""
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    config: RenderConfig = _resolve_config(
        ctx,
        config_file=config_file,
        no_config=no_config,
        ui_testing=ui_testing,
        tool_name=tool_name,
        tab_width=tab_width,
        levels=levels,
    )
    records: RecordSet = _load(records_path)
    logger.info(
        "Rendering %d diagnostics from %s", len(records.diagnostics), records_path
    )

    aggregator = ReportAggregator(records.source_map, ConsoleSink(console), config)
    try:
        for diagnostic in records.diagnostics:
            aggregator.emit(diagnostic)
        report: RunReport = aggregator.finalize()
    except RenderError as exc:
        raise SpanmarkRenderFailure(str(exc)) from exc
    except ReportStateError as exc:
        raise SpanmarkStateError(str(exc)) from exc

    if ctx.obj.get("verbosity_level", 0) > 0:
        console.warn(
            f"{report.error_count} error(s), {report.warning_count} warning(s) "
            f"in {len(report.diagnostics)} diagnostic(s)"
        )
    ctx.exit(ExitCode.FAILURE if report.has_errors else ExitCode.SUCCESS)
