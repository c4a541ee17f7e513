# topmark:header:start
#
#   project      : SpanMark
#   file         : constants.py
#   file_relpath : src/spanmark/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    SPANMARK_VERSION: str = get_version("spanmark")
except PackageNotFoundError:  # running from a source checkout
    SPANMARK_VERSION = "0.0.0"

# Config file names looked up by `spanmark.config.loaders`:
SPANMARK_TOML_NAME: str = "spanmark.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_TABLE: str = "spanmark"

# Environment variable consulted for the internal log level.
LOG_LEVEL_ENV_VAR: str = "SPANMARK_LOG_LEVEL"

DEFAULT_TAB_WIDTH: int = 4
DEFAULT_TOOL_NAME: str = "rustc"

# Placeholder printed in the gutter instead of real line numbers (golden tests).
ANONYMIZED_LINE_NUM: str = "LL"

# Codes matching this pattern have a long-form explanation unless configured otherwise.
EXPLAINABLE_CODE_PATTERN: str = r"^E\d{4}$"

# At most this many codes are listed in the explain footer.
MAX_LISTED_EXPLAIN_CODES: int = 9

ELISION_MARKER: str = "..."
