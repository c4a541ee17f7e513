# topmark:header:start
#
#   project      : SpanMark
#   file         : keys.py
#   file_relpath : src/spanmark/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML key names for SpanMark configuration.

These keys are the external configuration API, as they appear at the top level
of ``spanmark.toml`` and in ``[tool.spanmark]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML keys used by SpanMark configuration."""

    KEY_TAB_WIDTH: Final[str] = "tab-width"
    KEY_ANONYMIZE_LINE_NUMBERS: Final[str] = "anonymize-line-numbers"
    KEY_TOOL_NAME: Final[str] = "tool-name"
    KEY_LEVELS: Final[str] = "levels"
    KEY_EXPLAIN_CODES: Final[str] = "explain-codes"
    KEY_COLOR: Final[str] = "color"

    # pyproject.toml nesting
    SECTION_TOOL: Final[str] = "tool"

    @classmethod
    def all_keys(cls) -> frozenset[str]:
        """Return every recognized configuration key."""
        return frozenset(
            {
                cls.KEY_TAB_WIDTH,
                cls.KEY_ANONYMIZE_LINE_NUMBERS,
                cls.KEY_TOOL_NAME,
                cls.KEY_LEVELS,
                cls.KEY_EXPLAIN_CODES,
                cls.KEY_COLOR,
            }
        )
