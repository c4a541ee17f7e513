# topmark:header:start
#
#   project      : SpanMark
#   file         : loaders.py
#   file_relpath : src/spanmark/config/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load SpanMark configuration from TOML files.

Configuration lives at the top level of ``spanmark.toml`` or in the
``[tool.spanmark]`` table of ``pyproject.toml``. Parsing is done with `tomlkit`
and returned as plain `dict` structures.

Discovery walks upward from a start directory; in each directory
``spanmark.toml`` wins over ``pyproject.toml``, and a ``pyproject.toml`` only
counts when it has a ``[tool.spanmark]`` table. The nearest match wins.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from spanmark.config.keys import Toml
from spanmark.config.logging import get_logger
from spanmark.config.model import MutableRenderConfig
from spanmark.constants import PYPROJECT_TOML_NAME, PYPROJECT_TOOL_TABLE, SPANMARK_TOML_NAME
from spanmark.core.errors import ConfigError

if TYPE_CHECKING:
    from spanmark.config.logging import SpanmarkLogger
    from spanmark.config.types import TomlTable

logger: SpanmarkLogger = get_logger(__name__)


def parse_toml_text(text: str, *, where: str) -> TomlTable:
    """Parse TOML ``text`` into a plain dict.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except TomlkitParseError as e:
        raise ConfigError(f"Error decoding TOML from {where}: {e}") from e
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (e.g., ``spanmark.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Error loading TOML from {path}: {e}") from e
    return parse_toml_text(text, where=str(path))


def _tool_table(data: TomlTable) -> TomlTable | None:
    tool: Any = data.get(Toml.SECTION_TOOL)
    if not isinstance(tool, dict):
        return None
    table: Any = tool.get(PYPROJECT_TOOL_TABLE)
    return cast("TomlTable", table) if isinstance(table, dict) else None


def config_table(path: Path) -> TomlTable | None:
    """Return the SpanMark table of a config file, or None if it has none.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    data: TomlTable = load_toml_dict(path)
    if path.name == PYPROJECT_TOML_NAME:
        return _tool_table(data)
    return data


def discover_config_file(start: Path) -> Path | None:
    """Return the nearest configuration file at or above ``start``."""
    cur: Path = start.resolve()
    if cur.is_file():
        cur = cur.parent
    while True:
        candidate: Path = cur / SPANMARK_TOML_NAME
        if candidate.is_file():
            logger.debug("Discovered config file: %s", candidate)
            return candidate
        candidate = cur / PYPROJECT_TOML_NAME
        if candidate.is_file():
            try:
                if config_table(candidate) is not None:
                    logger.debug("Discovered config file: %s", candidate)
                    return candidate
            except ConfigError as e:
                # Best-effort discovery; an unrelated broken pyproject is skipped.
                logger.debug("Ignoring %s during discovery: %s", candidate, e)
        if cur.parent == cur:
            return None
        cur = cur.parent


def load_config_file(path: Path) -> MutableRenderConfig:
    """Load a single configuration file into a draft.

    Raises:
        ConfigError: If the file is unreadable, malformed, or a ``pyproject.toml``
            without a ``[tool.spanmark]`` table.
    """
    logger.debug("Creating MutableRenderConfig from TOML config: %s", path)
    table: TomlTable | None = config_table(path)
    if table is None:
        raise ConfigError(f"[tool.{PYPROJECT_TOOL_TABLE}] section missing or malformed in {path}")
    draft: MutableRenderConfig = MutableRenderConfig.from_toml_dict(table, where=str(path))
    draft.config_files = [path]
    return draft


def load_config(
    path: Path | None = None,
    *,
    start: Path | None = None,
    discover: bool = True,
) -> MutableRenderConfig:
    """Return defaults merged with one configuration file.

    Args:
        path: Explicit configuration file; skips discovery.
        start: Directory where discovery starts (defaults to the current directory).
        discover: Look for a configuration file when ``path`` is not given.

    Returns:
        The merged draft; call `MutableRenderConfig.freeze` to use it.
    """
    draft: MutableRenderConfig = MutableRenderConfig.from_defaults()
    if path is None and discover:
        path = discover_config_file(start or Path.cwd())
    if path is not None:
        draft = draft.merge_with(load_config_file(path))
    return draft
