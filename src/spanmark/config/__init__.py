# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for SpanMark.

Modules:
    * `logging`: SpanMark loggers (TRACE level, colored formatter).
    * `keys`: canonical TOML key names.
    * `model`: `RenderConfig` (immutable) and `MutableRenderConfig` (builder).
    * `loaders`: discovery and `tomlkit` parsing of ``spanmark.toml`` and
      ``[tool.spanmark]`` in ``pyproject.toml``.

Submodules are imported explicitly so that `spanmark.config.logging` stays
importable from any layer.
"""

from __future__ import annotations
