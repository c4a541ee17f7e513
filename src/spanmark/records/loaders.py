# topmark:header:start
#
#   project      : SpanMark
#   file         : loaders.py
#   file_relpath : src/spanmark/records/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Read record documents from disk.

TOML documents are parsed with `tomlkit`; JSON documents (``.json`` suffix)
with the standard `json` module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from spanmark.config.loaders import parse_toml_text
from spanmark.config.logging import get_logger
from spanmark.core.errors import ConfigError, RecordError
from spanmark.records.schema import RecordSet, records_from_mapping

if TYPE_CHECKING:
    from spanmark.config.logging import SpanmarkLogger
    from spanmark.config.types import TomlTable

logger: SpanmarkLogger = get_logger(__name__)

RecordFormat = Literal["toml", "json"]


def format_for(path: Path) -> RecordFormat:
    """Return the document format implied by the file suffix."""
    return "json" if path.suffix.lower() == ".json" else "toml"


def parse_records(
    text: str,
    *,
    fmt: RecordFormat = "toml",
    base_dir: Path | None = None,
    where: str = "<records>",
) -> RecordSet:
    """Parse a record document from ``text``.

    Raises:
        RecordError: If the text cannot be parsed or the document is malformed.
    """
    data: Any
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RecordError("", f"Error decoding JSON from {where}: {exc}") from exc
    else:
        try:
            data = parse_toml_text(text, where=where)
        except ConfigError as exc:
            raise RecordError("", str(exc)) from exc
    if not isinstance(data, dict):
        raise RecordError("", f"{where}: the document must be a table")
    table: TomlTable = data
    return records_from_mapping(table, base_dir=base_dir)


def load_records(path: Path) -> RecordSet:
    """Load a record document; relative ``source`` paths resolve against its directory.

    Raises:
        OSError: If the document cannot be read.
        RecordError: If the document is malformed.
    """
    logger.debug("Loading records from %s", path)
    text: str = path.read_text(encoding="utf-8")
    return parse_records(text, fmt=format_for(path), base_dir=path.parent, where=str(path))
