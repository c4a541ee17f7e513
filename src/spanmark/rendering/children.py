# topmark:header:start
#
#   project      : SpanMark
#   file         : children.py
#   file_relpath : src/spanmark/rendering/children.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering of the note/help/warning entries attached to a diagnostic.

Children print in declaration order. A child without spans or suggestions is
a single ``= level: message`` entry in the gutter; a child with spans gets its
own header, location line and snippet; a child with suggestions gets its header
followed by the suggestion blocks. Inside a child every suggestion shows its
code, whatever its display style. Nested children follow their parent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.diagnostic.model import Diagnostic
    from spanmark.rendering.annotator import Annotator
    from spanmark.rendering.layout import FileLayout
    from spanmark.rendering.styled import Gutter, StyledLine
    from spanmark.rendering.suggestion import SuggestionPlan

logger: SpanmarkLogger = get_logger(__name__)


@dataclass(frozen=True)
class ChildPlan:
    """Planned layout of one child and its nested children."""

    diagnostic: Diagnostic
    layouts: tuple[FileLayout, ...]
    suggestions: tuple[SuggestionPlan, ...]
    nested: tuple[ChildPlan, ...]

    @property
    def is_inline(self) -> bool:
        """Return True if the child renders as a ``= level: message`` entry."""
        return not self.layouts and not self.suggestions

    @property
    def max_line_number(self) -> int:
        return max(
            [layout.max_line_number for layout in self.layouts]
            + [plan.max_line_number for plan in self.suggestions]
            + [plan.max_line_number for plan in self.nested],
            default=0,
        )


class ChildRenderer:
    """Plan and draw children on behalf of an `Annotator`."""

    def __init__(self, annotator: Annotator) -> None:
        self.annotator = annotator

    def plan_all(self, children: Iterable[Diagnostic]) -> list[ChildPlan]:
        """Plan the children whose level is shown, in declaration order."""
        plans: list[ChildPlan] = []
        for child in children:
            if not self.annotator.config.shows(child.level):
                logger.trace("Omitting filtered %s child '%s'", child.level.value, child.message)
                continue
            plans.append(self.plan(child))
        return plans

    def plan(self, child: Diagnostic) -> ChildPlan:
        spans = list(child.spans())
        # Suggestions whose parts are all no-ops have nothing to show.
        suggestions = [self.annotator.suggestions.plan(s) for s in child.suggestions]
        return ChildPlan(
            diagnostic=child,
            layouts=tuple(self.annotator.layout.layout(spans)) if spans else (),
            suggestions=tuple(plan for plan in suggestions if plan.blocks),
            nested=tuple(self.plan_all(child.children)),
        )

    def draw(self, plan: ChildPlan, gutter: Gutter) -> list[StyledLine]:
        """Draw ``plan`` and its nested children."""
        child: Diagnostic = plan.diagnostic
        out: list[StyledLine]
        if plan.is_inline:
            out = gutter.note(child.level, child.message)
        else:
            out = self.annotator.header(child, top_level=False)
            out.extend(self.annotator.draw_snippet(plan.layouts, gutter, child.level))
            for suggestion_plan in plan.suggestions:
                out.extend(self.annotator.suggestions.draw(suggestion_plan, gutter))
        for nested in plan.nested:
            out.extend(self.draw(nested, gutter))
        return out
