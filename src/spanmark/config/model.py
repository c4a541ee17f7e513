# topmark:header:start
#
#   project      : SpanMark
#   file         : model.py
#   file_relpath : src/spanmark/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering configuration model and merge policy.

This module defines:
    - `RenderConfig`: an immutable snapshot consumed by the renderer and the
      report aggregator.
    - `MutableRenderConfig`: a mutable builder used while merging defaults,
      config files and CLI overrides; it can be frozen into `RenderConfig` and
      thawed back for edits.

Scope:
    - *In scope*: data shapes, field-level defaults, merge policy and
      validation of TOML tables.
    - *Out of scope*: filesystem discovery and TOML I/O (see
      `spanmark.config.loaders`).

Immutability:
    - `RenderConfig` stores frozensets and is ``frozen=True``. Use
      `RenderConfig.thaw` → edit → `MutableRenderConfig.freeze` for updates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from spanmark.config.keys import Toml
from spanmark.config.logging import get_logger
from spanmark.constants import DEFAULT_TAB_WIDTH, DEFAULT_TOOL_NAME, EXPLAINABLE_CODE_PATTERN
from spanmark.core.errors import ConfigError
from spanmark.diagnostic.model import Level
from spanmark.source.width import make_char_width

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.config.types import TomlTable
    from spanmark.source.width import CharWidth

logger: SpanmarkLogger = get_logger(__name__)

ALL_LEVELS: frozenset[Level] = frozenset(Level)

_EXPLAINABLE_CODE_RE: re.Pattern[str] = re.compile(EXPLAINABLE_CODE_PATTERN)


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True)
class RenderConfig:
    """Immutable rendering configuration.

    Attributes:
        tab_width (int): Number of columns a tab expands to.
        anonymize_line_numbers (bool): Print ``LL`` in the gutter instead of line
            numbers (location lines keep real numbers).
        tool_name (str): Command named in ``--explain`` hints.
        levels (frozenset[Level]): Levels that are printed; others are counted only.
        explain_codes (frozenset[str] | None): Codes that have explanations.
            ``None`` accepts every code shaped like ``E0000``.
        color (bool): Style output with ANSI colors.
        char_width (CharWidth | None): Custom display-width function; ``None``
            selects the default policy for ``tab_width``.
    """

    tab_width: int = DEFAULT_TAB_WIDTH
    anonymize_line_numbers: bool = False
    tool_name: str = DEFAULT_TOOL_NAME
    levels: frozenset[Level] = ALL_LEVELS
    explain_codes: frozenset[str] | None = None
    color: bool = False
    char_width: CharWidth | None = field(default=None, compare=False, repr=False)

    def width_function(self) -> CharWidth:
        """Return the display-width function used for layout."""
        if self.char_width is not None:
            return self.char_width
        return make_char_width(self.tab_width)

    def shows(self, level: Level) -> bool:
        """Return True if diagnostics of ``level`` are printed."""
        return level in self.levels

    def is_explainable(self, code: str) -> bool:
        """Return True if ``code`` has a detailed explanation."""
        if self.explain_codes is not None:
            return code in self.explain_codes
        return _EXPLAINABLE_CODE_RE.match(code) is not None

    def thaw(self) -> MutableRenderConfig:
        """Return a mutable copy of this frozen config."""
        return MutableRenderConfig(
            tab_width=self.tab_width,
            anonymize_line_numbers=self.anonymize_line_numbers,
            tool_name=self.tool_name,
            levels=set(self.levels),
            explain_codes=set(self.explain_codes) if self.explain_codes is not None else None,
            color=self.color,
            char_width=self.char_width,
        )


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableRenderConfig:
    """Mutable configuration used while merging sources.

    Every field is tri-state: ``None`` means "inherit" and is resolved to the
    built-in default by `freeze`.
    """

    tab_width: int | None = None
    anonymize_line_numbers: bool | None = None
    tool_name: str | None = None
    levels: set[Level] | None = None
    explain_codes: set[str] | None = None
    color: bool | None = None
    char_width: CharWidth | None = None
    config_files: list[Path] = field(default_factory=list)

    @classmethod
    def from_defaults(cls) -> MutableRenderConfig:
        """Return a builder populated with the built-in defaults."""
        return RenderConfig().thaw()

    @classmethod
    def from_toml_dict(cls, table: TomlTable, *, where: str = "<config>") -> MutableRenderConfig:
        """Build a draft from a parsed configuration table.

        Keys that are absent stay unset. Unknown keys are logged and ignored.

        Args:
            table (TomlTable): The configuration table (top level of ``spanmark.toml``
                or ``[tool.spanmark]``).
            where (str): Source description used in messages.

        Returns:
            MutableRenderConfig: The draft.

        Raises:
            ConfigError: If a value has the wrong type or is out of range.
        """
        for key in table:
            if key not in Toml.all_keys():
                logger.warning("Ignoring unknown configuration key '%s' in %s", key, where)

        draft = cls()
        draft.tab_width = _get_int(table, Toml.KEY_TAB_WIDTH, where)
        draft.anonymize_line_numbers = _get_bool(table, Toml.KEY_ANONYMIZE_LINE_NUMBERS, where)
        draft.tool_name = _get_str(table, Toml.KEY_TOOL_NAME, where)
        draft.color = _get_bool(table, Toml.KEY_COLOR, where)

        levels: list[str] | None = _get_str_list(table, Toml.KEY_LEVELS, where)
        if levels is not None:
            draft.levels = parse_levels(levels, where=f"{where}.{Toml.KEY_LEVELS}")

        codes: list[str] | None = _get_str_list(table, Toml.KEY_EXPLAIN_CODES, where)
        if codes is not None:
            draft.explain_codes = set(codes)

        logger.debug("Parsed configuration from %s: %s", where, draft)
        return draft

    def merge_with(self, other: MutableRenderConfig) -> MutableRenderConfig:
        """Return a new draft where values set in ``other`` override this draft."""
        return MutableRenderConfig(
            tab_width=other.tab_width if other.tab_width is not None else self.tab_width,
            anonymize_line_numbers=other.anonymize_line_numbers
            if other.anonymize_line_numbers is not None
            else self.anonymize_line_numbers,
            tool_name=other.tool_name if other.tool_name is not None else self.tool_name,
            levels=other.levels if other.levels is not None else self.levels,
            explain_codes=other.explain_codes
            if other.explain_codes is not None
            else self.explain_codes,
            color=other.color if other.color is not None else self.color,
            char_width=other.char_width if other.char_width is not None else self.char_width,
            config_files=self.config_files + other.config_files,
        )

    def freeze(self) -> RenderConfig:
        """Validate the draft and return the immutable config.

        Raises:
            ConfigError: If ``tab_width`` is smaller than 1 or ``levels`` is empty.
        """
        defaults = RenderConfig()
        tab_width: int = self.tab_width if self.tab_width is not None else defaults.tab_width
        if tab_width < 1:
            raise ConfigError(f"tab width must be at least 1, got {tab_width}")
        if self.levels is not None and not self.levels:
            raise ConfigError("at least one diagnostic level must be shown")
        return RenderConfig(
            tab_width=tab_width,
            anonymize_line_numbers=bool(self.anonymize_line_numbers),
            tool_name=self.tool_name or defaults.tool_name,
            levels=frozenset(self.levels) if self.levels is not None else defaults.levels,
            explain_codes=frozenset(self.explain_codes) if self.explain_codes is not None else None,
            color=bool(self.color),
            char_width=self.char_width,
        )


def parse_levels(names: Iterable[str], *, where: str = "levels") -> set[Level]:
    """Return the levels named by ``names``.

    Raises:
        ConfigError: If a name is not a diagnostic level.
    """
    levels: set[Level] = set()
    for name in names:
        try:
            levels.add(Level.parse(name))
        except ValueError as exc:
            raise ConfigError(f"{where}: {exc}") from exc
    return levels


# --- Checked getters: a present value of the wrong type is an error ---


def _get_int(table: TomlTable, key: str, where: str) -> int | None:
    value: Any | None = table.get(key)
    if value is None:
        return None
    # bool is a subclass of int; exclude it.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Expected int in {where}.{key}, got {type(value).__name__}: {value!r}")
    return value


def _get_bool(table: TomlTable, key: str, where: str) -> bool | None:
    value: Any | None = table.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ConfigError(f"Expected bool in {where}.{key}, got {type(value).__name__}: {value!r}")
    return value


def _get_str(table: TomlTable, key: str, where: str) -> str | None:
    value: Any | None = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Expected non-empty string in {where}.{key}, got {value!r}")
    return value


def _get_str_list(table: TomlTable, key: str, where: str) -> list[str] | None:
    value: Any | None = table.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"Expected list of strings in {where}.{key}, got {value!r}")
    return list(value)
