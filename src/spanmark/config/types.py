# topmark:header:start
#
#   project      : SpanMark
#   file         : types.py
#   file_relpath : src/spanmark/config/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared TOML-related type aliases for the config and record loaders."""

from __future__ import annotations

from typing import Any

TomlTable = dict[str, Any]
