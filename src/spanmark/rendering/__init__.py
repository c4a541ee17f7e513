# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/rendering/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering of diagnostic records into annotated text.

Modules:
    * `layout`: where annotations go (lines, underline rows, bracket slots).
    * `styled`: a character grid with per-character styles, rendered plain or colored.
    * `annotator`: the per-diagnostic block (header, location, snippet).
    * `suggestion`: underline and diff blocks for suggested edits.
    * `children`: note/help/warning entries attached to a diagnostic.

Submodules are imported explicitly; this package does not re-export them so that
`spanmark.diagnostic` can depend on `spanmark.rendering.colored_enum` without cycles.
"""

from __future__ import annotations
