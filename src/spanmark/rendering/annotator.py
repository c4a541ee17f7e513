# topmark:header:start
#
#   project      : SpanMark
#   file         : annotator.py
#   file_relpath : src/spanmark/rendering/annotator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering of one diagnostic into its annotated text block.

Block shape (``W`` is the width of the widest line number printed anywhere in
the block, children and suggestions included)::

    error[E0061]: this function takes 1 argument but 0 arguments were supplied
     --> src/main.rs:4:5
      |
    4 |     missing();
      |     ^^^^^^^-- argument #1 of type `u32` is missing
      |
    note: function defined here
    ...

Rendering happens in two phases: every part of the block (span layouts, child
plans, suggestion plans) is planned first, which fixes ``W``; then rows are
drawn. `Annotator.render` is a pure function of the diagnostic, the source map
and the configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.config.model import RenderConfig
from spanmark.constants import ANONYMIZED_LINE_NUM
from spanmark.core.errors import EmptySpanSetError
from spanmark.diagnostic.model import Level, Span, SuggestionStyle
from spanmark.rendering.children import ChildRenderer
from spanmark.rendering.layout import Elision, SpanLayout
from spanmark.rendering.styled import Gutter, Style, StyledLine, render_lines
from spanmark.rendering.suggestion import SuggestionRenderer

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.diagnostic.model import Diagnostic, Suggestion
    from spanmark.rendering.children import ChildPlan
    from spanmark.rendering.colored_enum import ColoredStrEnum
    from spanmark.rendering.layout import Bracket, FileLayout, LayoutLine, UnderlineGroup
    from spanmark.rendering.suggestion import SuggestionPlan
    from spanmark.source.source_map import SourceMap

logger: SpanmarkLogger = get_logger(__name__)

DEFAULT_HELP_MESSAGE: str = "try this"


def is_inline_suggestion(suggestion: Suggestion) -> bool:
    """Return True if ``suggestion`` can be shown as a label in the main snippet."""
    return (
        suggestion.style is SuggestionStyle.INLINE
        and not suggestion.extra_parts
        and "\n" not in suggestion.replacement
    )


def inline_label(suggestion: Suggestion) -> str:
    """Return the label attached to the span of an inline suggestion."""
    message: str = suggestion.message or DEFAULT_HELP_MESSAGE
    return f"help: {message}: `{suggestion.replacement}`"


class Annotator:
    """Render diagnostics against a source map.

    Args:
        source_map: Files referenced by the diagnostics.
        config: Rendering configuration; defaults to `RenderConfig()`.
    """

    def __init__(self, source_map: SourceMap, config: RenderConfig | None = None) -> None:
        self.source_map = source_map
        self.config = config or RenderConfig()
        char_width = self.config.width_function()
        self.layout = SpanLayout(source_map, char_width)
        self.suggestions = SuggestionRenderer(source_map, char_width)
        self.children = ChildRenderer(self)

    # ------------------------------ public API ------------------------------

    def render(self, diagnostic: Diagnostic) -> str:
        """Return the block for ``diagnostic``; every row ends with a newline.

        Raises:
            EmptySpanSetError: If a top-level diagnostic has no primary span
                and is not span-less.
            OutOfRangeSpanError: If a span exceeds its file.
            UnknownSourceFileError: If a span references an unknown file.
        """
        return render_lines(self.render_lines(diagnostic), color=self.config.color)

    def render_lines(self, diagnostic: Diagnostic) -> list[StyledLine]:
        """Return the styled rows of the block for ``diagnostic``."""
        self.check(diagnostic)

        inline: list[Suggestion] = []
        shown: list[Suggestion] = []
        for suggestion in diagnostic.suggestions:
            if suggestion.style is SuggestionStyle.HIDE_CODE:
                continue
            if is_inline_suggestion(suggestion) and self._is_single_line(suggestion.span):
                inline.append(suggestion)
            else:
                shown.append(suggestion)

        spans: list[Span] = list(diagnostic.spans())
        spans.extend(s.span.with_label(inline_label(s)) for s in inline)
        layouts: list[FileLayout] = self.layout.layout(spans) if spans else []

        child_plans: list[ChildPlan] = self.children.plan_all(diagnostic.children)
        plans: dict[int, SuggestionPlan] = {}
        for suggestion in shown:
            plan: SuggestionPlan = self.suggestions.plan(suggestion)
            if plan.blocks:
                plans[id(suggestion)] = plan
            else:
                logger.debug("Dropping suggestion '%s': it changes nothing", suggestion.message)

        gutter: Gutter = self.gutter_for(
            [layout.max_line_number for layout in layouts]
            + [plan.max_line_number for plan in child_plans]
            + [plan.max_line_number for plan in plans.values()]
        )
        logger.debug(
            "Rendering %s '%s' (%d spans, %d children, %d suggestions, gutter %d)",
            diagnostic.level.value,
            diagnostic.message,
            len(spans),
            len(child_plans),
            len(diagnostic.suggestions),
            gutter.width,
        )

        out: list[StyledLine] = self.header(diagnostic, top_level=True)
        out.extend(self.draw_snippet(layouts, gutter, diagnostic.level))

        trailing: list[StyledLine] = []
        for child_plan in child_plans:
            trailing.extend(self.children.draw(child_plan, gutter))
        for suggestion in diagnostic.suggestions:
            if suggestion.style is SuggestionStyle.HIDE_CODE:
                trailing.extend(gutter.note(Level.HELP, suggestion.message or DEFAULT_HELP_MESSAGE))
            elif id(suggestion) in plans:
                trailing.append(self.help_header(suggestion))
                trailing.extend(self.suggestions.draw(plans[id(suggestion)], gutter))
        if trailing:
            out.append(gutter.blank())
            out.extend(trailing)
        return out

    def check(self, diagnostic: Diagnostic) -> None:
        """Validate the top-level span invariant of ``diagnostic``.

        Raises:
            EmptySpanSetError: If the diagnostic has no primary span and is not span-less.
        """
        if diagnostic.primary_span is None and not diagnostic.spanless:
            raise EmptySpanSetError(
                f"{diagnostic.level.value} '{diagnostic.message}' has no primary span"
            )

    def gutter_for(self, line_numbers: Iterable[int]) -> Gutter:
        """Return the gutter sized for the widest of ``line_numbers``."""
        if self.config.anonymize_line_numbers:
            return Gutter(len(ANONYMIZED_LINE_NUM), anonymize=True)
        widest: int = max(line_numbers, default=0)
        return Gutter(max(len(str(widest)), 1))

    # -------------------------------- headers --------------------------------

    def header(self, diagnostic: Diagnostic, *, top_level: bool) -> list[StyledLine]:
        """Return ``level[code]: message`` rows."""
        level: Level = diagnostic.level
        first, *rest = diagnostic.message.split("\n")
        row = StyledLine(level.value, level)
        if diagnostic.code:
            row.append(f"[{diagnostic.code}]", level)
        message_style: ColoredStrEnum = Style.HEADER_MESSAGE if top_level else Style.PLAIN
        row.append(": ", message_style)
        row.append(first, message_style)
        return [row, *(StyledLine(text, message_style) for text in rest)]

    def help_header(self, suggestion: Suggestion) -> StyledLine:
        """Return the ``help: message`` row introducing a suggestion block."""
        row = StyledLine(Level.HELP.value, Level.HELP)
        row.append(f": {suggestion.message or DEFAULT_HELP_MESSAGE}")
        return row

    # ------------------------------- snippets -------------------------------

    def draw_snippet(
        self, layouts: Sequence[FileLayout], gutter: Gutter, level: Level
    ) -> list[StyledLine]:
        """Draw location lines and annotated source for every file layout."""
        out: list[StyledLine] = []
        for i, layout in enumerate(layouts):
            line, col = layout.location
            if i > 0:
                out.append(gutter.blank())
            out.append(gutter.location(":::" if i > 0 else "-->", layout.source.path, line, col))
            out.append(gutter.blank())
            out.extend(self._draw_file(layout, gutter, level))
        return out

    def _is_single_line(self, span: Span) -> bool:
        source = self.source_map.get(span.file_id)
        return source.line_index(source.check_offset(span.byte_start)) == source.line_index(
            source.check_offset(span.byte_end)
        )

    @staticmethod
    def _marker_style(is_primary: bool, level: Level) -> ColoredStrEnum:
        return level if is_primary else Style.SECONDARY

    def _verticals(
        self,
        row: StyledLine,
        brackets: Iterable[Bracket],
        base: int,
        level: Level,
    ) -> None:
        for bracket in brackets:
            row.put(base + 2 * bracket.slot, "|", self._marker_style(bracket.is_primary, level))

    def _draw_file(self, layout: FileLayout, gutter: Gutter, level: Level) -> list[StyledLine]:
        out: list[StyledLine] = []
        margin_col: int = gutter.code_col
        for entry in layout.entries:
            if isinstance(entry, Elision):
                row = gutter.elision()
                self._verticals(
                    row, layout.brackets_spanning(entry.after, entry.before), margin_col, level
                )
                out.append(row)
                continue
            out.extend(self._draw_line(layout, entry, gutter, level))
        return out

    def _draw_line(
        self,
        layout: FileLayout,
        entry: LayoutLine,
        gutter: Gutter,
        level: Level,
    ) -> list[StyledLine]:
        margin_col: int = gutter.code_col
        code_col: int = margin_col + layout.margin_width
        index: int = entry.index

        source_row: StyledLine = gutter.row(entry.number)
        for bracket in layout.brackets:
            style = self._marker_style(bracket.is_primary, level)
            if bracket.start_line == index:
                source_row.put(margin_col + 2 * bracket.slot, "/", style)
            elif bracket.start_line < index <= bracket.end_line:
                source_row.put(margin_col + 2 * bracket.slot, "|", style)
        source_row.put(code_col, entry.text)
        out: list[StyledLine] = [source_row]

        active: list[Bracket] = [
            b for b in layout.brackets if b.start_line <= index <= b.end_line
        ]
        for groups in entry.rows:
            out.extend(self._draw_underline_row(groups, gutter, active, code_col, level))

        continuing: list[Bracket] = [b for b in layout.brackets if b.is_open_after(index)]
        for k, bracket in enumerate(entry.closings):
            row = gutter.blank()
            self._verticals(row, continuing, margin_col, level)
            self._verticals(row, entry.closings[k:], margin_col, level)
            style = self._marker_style(bracket.is_primary, level)
            slot_col: int = margin_col + 2 * bracket.slot
            marker_col: int = code_col + bracket.marker_col
            for col in range(slot_col + 1, marker_col):
                row.put_if_blank(col, "_", style)
            row.put(marker_col, "^" if bracket.is_primary else "-", style)
            first, *rest = (bracket.label or "").split("\n")
            row.put(marker_col + 2, first, style)
            out.append(row)
            for text in rest:
                # Continuation lines of a label keep the outer brackets drawn.
                more = gutter.blank()
                self._verticals(more, continuing, margin_col, level)
                self._verticals(more, entry.closings[k + 1 :], margin_col, level)
                more.put(marker_col + 2, text, style)
                out.append(more)
        return out

    def _draw_underline_row(
        self,
        groups: Sequence[UnderlineGroup],
        gutter: Gutter,
        active: Sequence[Bracket],
        code_col: int,
        level: Level,
    ) -> list[StyledLine]:
        def new_row() -> StyledLine:
            row = gutter.blank()
            self._verticals(row, active, gutter.code_col, level)
            return row

        underline: StyledLine = new_row()
        for group in groups:
            marker: str = "^" if group.is_primary else "-"
            underline.put(
                code_col + group.start_col,
                marker * (group.end_col - group.start_col),
                self._marker_style(group.is_primary, level),
            )

        pending: list[tuple[UnderlineGroup, tuple[str, ...]]] = [
            (g, g.labels) for g in groups[:-1] if g.labels
        ]
        last: UnderlineGroup = groups[-1]
        if last.labels:
            first, *rest = last.labels
            if "\n" in first:
                pending.append((last, last.labels))
            else:
                underline.put(
                    code_col + last.end_col + 1,
                    first,
                    self._marker_style(last.is_primary, level),
                )
                if rest:
                    pending.append((last, tuple(rest)))
        out: list[StyledLine] = [underline]
        if not pending:
            return out

        connector: StyledLine = new_row()
        for group, _ in pending:
            connector.put(
                code_col + group.start_col, "|", self._marker_style(group.is_primary, level)
            )
        out.append(connector)

        for i in reversed(range(len(pending))):
            group, labels = pending[i]
            style = self._marker_style(group.is_primary, level)
            for label in labels:
                for text in label.split("\n"):
                    row = new_row()
                    for left, _ in pending[:i]:
                        row.put(
                            code_col + left.start_col,
                            "|",
                            self._marker_style(left.is_primary, level),
                        )
                    row.put(code_col + group.start_col, text, style)
                    out.append(row)
        return out
