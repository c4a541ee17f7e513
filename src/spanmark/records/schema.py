# topmark:header:start
#
#   project      : SpanMark
#   file         : schema.py
#   file_relpath : src/spanmark/records/schema.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Conversion of parsed record documents into diagnostic records.

Document shape (TOML shown; JSON uses the same keys)::

    [[files]]
    path = "src/main.rs"
    text = "fn main() {}\\n"        # or: source = "relative/file.rs"

    [[diagnostics]]
    level = "error"
    code = "E0061"
    message = "..."
    primary = { file = "src/main.rs", start = "4:5", end = "4:12", label = "..." }
    secondary = [{ start = 56, end = 58, label = "..." }]
    children = [{ level = "note", message = "..." }]
    suggestions = [{ message = "...", start = "4:13", end = "4:13", replacement = "x" }]

Positions are byte offsets or ``"line:col"`` strings (1-based; the column
counts codepoints). ``file`` is a path or a 0-based index into ``files`` and
may be omitted when the document holds a single file. A suggestion lists its
substitutions under ``parts`` or gives a single one inline.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from spanmark.config.logging import get_logger
from spanmark.core.errors import RecordError
from spanmark.diagnostic.model import (
    Applicability,
    Diagnostic,
    Level,
    Span,
    SubstitutionPart,
    Suggestion,
    SuggestionStyle,
)
from spanmark.source.source_map import SourceMap

if TYPE_CHECKING:
    from enum import Enum

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.config.types import TomlTable
    from spanmark.source.source_map import SourceFile

logger: SpanmarkLogger = get_logger(__name__)

E = TypeVar("E", bound="Enum")

DIAGNOSTIC_KEYS: frozenset[str] = frozenset(
    {
        "level",
        "code",
        "message",
        "primary",
        "secondary",
        "children",
        "suggestions",
        "future-incompatible",
        "spanless",
    }
)


@dataclass(frozen=True)
class RecordSet:
    """Source files and the diagnostics to render against them."""

    source_map: SourceMap
    diagnostics: tuple[Diagnostic, ...]


def records_from_mapping(data: TomlTable, *, base_dir: Path | None = None) -> RecordSet:
    """Build a `RecordSet` from a parsed document.

    Args:
        data: The parsed document.
        base_dir: Directory that relative ``source`` paths are resolved against.

    Returns:
        The source map and diagnostics.

    Raises:
        RecordError: If the document is malformed; the message names the key path.
    """
    reader = _RecordReader(base_dir or Path.cwd())
    reader.read_files(_get_list(data, "files", "", required=True))
    diagnostics: list[Diagnostic] = [
        reader.read_diagnostic(_as_table(entry, f"diagnostics[{i}]"), f"diagnostics[{i}]")
        for i, entry in enumerate(_get_list(data, "diagnostics", ""))
    ]
    logger.debug(
        "Read %d diagnostics against %d files", len(diagnostics), len(reader.source_map)
    )
    return RecordSet(source_map=reader.source_map, diagnostics=tuple(diagnostics))


# --- Checked getters: `where` is the key path of the enclosing table ---


def _key_path(where: str, key: str) -> str:
    return f"{where}.{key}" if where else key


def _as_table(value: Any, where: str) -> TomlTable:
    if not isinstance(value, dict):
        raise RecordError(where, f"expected a table, got {type(value).__name__}")
    return value


def _get_list(table: TomlTable, key: str, where: str, *, required: bool = False) -> list[Any]:
    value: Any | None = table.get(key)
    if value is None:
        if required:
            raise RecordError(_key_path(where, key), "missing required key")
        return []
    if not isinstance(value, list):
        raise RecordError(_key_path(where, key), f"expected a list, got {type(value).__name__}")
    return value


def _get_str(table: TomlTable, key: str, where: str, *, required: bool = False) -> str | None:
    value: Any | None = table.get(key)
    if value is None:
        if required:
            raise RecordError(_key_path(where, key), "missing required key")
        return None
    if not isinstance(value, str):
        raise RecordError(_key_path(where, key), f"expected a string, got {type(value).__name__}")
    return value


def _get_bool(table: TomlTable, key: str, where: str) -> bool:
    value: Any | None = table.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise RecordError(_key_path(where, key), f"expected a boolean, got {type(value).__name__}")
    return value


def _get_enum(table: TomlTable, key: str, where: str, enum_cls: type[E], default: E) -> E:
    raw: str | None = _get_str(table, key, where)
    if raw is None:
        return default
    normalized: str = raw.strip().lower().replace("_", "-")
    for member in enum_cls:
        if member.value == normalized:
            return member
    allowed: str = ", ".join(str(m.value) for m in enum_cls)
    raise RecordError(_key_path(where, key), f"invalid value {raw!r} (expected one of: {allowed})")


class _RecordReader:
    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir
        self.source_map = SourceMap()

    def read_files(self, entries: list[Any]) -> None:
        for i, entry in enumerate(entries):
            where: str = f"files[{i}]"
            table: TomlTable = _as_table(entry, where)
            path: str = _get_str(table, "path", where, required=True) or ""
            text: str | None = _get_str(table, "text", where)
            source: str | None = _get_str(table, "source", where)
            if (text is None) == (source is None):
                raise RecordError(where, "exactly one of 'text' and 'source' is required")
            if text is not None:
                self.source_map.add_file(path, text)
                continue
            disk_path: Path = self.base_dir / (source or "")
            try:
                self.source_map.load_file(disk_path, display_path=path)
            except (OSError, UnicodeDecodeError) as exc:
                raise RecordError(
                    _key_path(where, "source"), f"cannot read {disk_path}: {exc}"
                ) from exc

    def read_diagnostic(
        self, table: TomlTable, where: str, *, top_level: bool = True
    ) -> Diagnostic:
        for key in table:
            if key not in DIAGNOSTIC_KEYS:
                logger.warning("Ignoring unknown key '%s'", _key_path(where, key))

        level_name: str = _get_str(table, "level", where, required=True) or ""
        try:
            level: Level = Level.parse(level_name)
        except ValueError as exc:
            raise RecordError(_key_path(where, "level"), str(exc)) from exc

        primary: Span | None = None
        if "primary" in table:
            primary_where: str = _key_path(where, "primary")
            primary = self.read_span(_as_table(table["primary"], primary_where), primary_where)

        secondary: list[Span] = []
        for i, entry in enumerate(_get_list(table, "secondary", where)):
            span_where: str = f"{_key_path(where, 'secondary')}[{i}]"
            secondary.append(self.read_span(_as_table(entry, span_where), span_where))

        children: list[Diagnostic] = []
        for i, entry in enumerate(_get_list(table, "children", where)):
            child_where: str = f"{_key_path(where, 'children')}[{i}]"
            children.append(
                self.read_diagnostic(_as_table(entry, child_where), child_where, top_level=False)
            )

        suggestions: list[Suggestion] = []
        for i, entry in enumerate(_get_list(table, "suggestions", where)):
            sugg_where: str = f"{_key_path(where, 'suggestions')}[{i}]"
            suggestions.append(self.read_suggestion(_as_table(entry, sugg_where), sugg_where))

        spanless: bool = _get_bool(table, "spanless", where)
        if top_level and primary is None and not spanless:
            raise RecordError(
                where, "a top-level diagnostic needs 'primary' unless 'spanless' is set"
            )

        return Diagnostic(
            level=level,
            message=_get_str(table, "message", where, required=True) or "",
            code=_get_str(table, "code", where),
            primary_span=primary,
            secondary_spans=tuple(secondary),
            children=tuple(children),
            suggestions=tuple(suggestions),
            future_incompatible=_get_bool(table, "future-incompatible", where),
            spanless=spanless,
        )

    def read_span(self, table: TomlTable, where: str) -> Span:
        source: SourceFile = self.resolve_file(table.get("file"), _key_path(where, "file"))
        start: int = self.read_position(source, table.get("start"), _key_path(where, "start"))
        end_value: Any | None = table.get("end", table.get("start"))
        end: int = self.read_position(source, end_value, _key_path(where, "end"))
        if start > end:
            raise RecordError(where, f"start ({start}) is after end ({end})")
        return Span(
            file_id=source.id,
            byte_start=start,
            byte_end=end,
            label=_get_str(table, "label", where),
            is_primary=_get_bool(table, "primary", where),
        )

    def read_suggestion(self, table: TomlTable, where: str) -> Suggestion:
        parts: list[SubstitutionPart] = []
        entries: list[Any] = _get_list(table, "parts", where)
        if entries:
            for i, entry in enumerate(entries):
                part_where: str = f"{_key_path(where, 'parts')}[{i}]"
                parts.append(self.read_part(_as_table(entry, part_where), part_where))
        else:
            parts.append(self.read_part(table, where))
        return Suggestion.multipart(
            message=_get_str(table, "message", where) or "",
            parts=parts,
            applicability=_get_enum(
                table, "applicability", where, Applicability, Applicability.UNSPECIFIED
            ),
            style=_get_enum(table, "style", where, SuggestionStyle, SuggestionStyle.SHOW_CODE),
        )

    def read_part(self, table: TomlTable, where: str) -> SubstitutionPart:
        replacement: str = _get_str(table, "replacement", where, required=True) or ""
        return SubstitutionPart(span=self.read_span(table, where), replacement=replacement)

    def resolve_file(self, value: Any | None, where: str) -> SourceFile:
        if value is None:
            if len(self.source_map) == 1:
                return self.source_map.get(0)
            raise RecordError(where, "required when the document holds more than one file")
        if isinstance(value, bool):
            raise RecordError(where, "expected a path or a file index")
        if isinstance(value, int):
            if 0 <= value < len(self.source_map):
                return self.source_map.get(value)
            raise RecordError(where, f"file index {value} out of range")
        if isinstance(value, str):
            found: SourceFile | None = self.source_map.find(value)
            if found is None:
                raise RecordError(where, f"unknown file {value!r}")
            return found
        raise RecordError(where, "expected a path or a file index")

    @staticmethod
    def read_position(source: SourceFile, value: Any | None, where: str) -> int:
        if value is None:
            raise RecordError(where, "missing required key")
        if isinstance(value, bool):
            raise RecordError(where, "expected a byte offset or a 'line:col' string")
        if isinstance(value, int):
            if not 0 <= value <= source.byte_length:
                raise RecordError(where, f"byte offset {value} out of range for '{source.path}'")
            return value
        if not isinstance(value, str):
            raise RecordError(where, "expected a byte offset or a 'line:col' string")

        line_text, sep, col_text = value.partition(":")
        if not sep or not line_text.strip().isdigit() or not col_text.strip().isdigit():
            raise RecordError(where, f"invalid position {value!r} (expected 'line:col')")
        line, col = int(line_text), int(col_text)
        if not 1 <= line <= source.line_count:
            raise RecordError(where, f"line {line} out of range for '{source.path}'")
        index: int = line - 1
        raw: str = source.data[source.line_start(index) : source.line_end(index)].decode("utf-8")
        if not 1 <= col <= len(raw) + 1:
            raise RecordError(where, f"column {col} out of range on line {line} of '{source.path}'")
        return source.line_start(index) + len(raw[: col - 1].encode("utf-8"))
