# topmark:header:start
#
#   project      : SpanMark
#   file         : model.py
#   file_relpath : src/spanmark/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic record types rendered by SpanMark.

A diagnostic record is built by an external producer (type checker, linter, ...)
and handed to the renderer fully formed. All record types are immutable; list
arguments are normalized to tuples so records can be shared between threads
and rendered repeatedly with byte-identical output.

Sections:
    * Level: severity with the terminal color used for headers and primary markers.
    * Span: labelled byte range in a source file.
    * Applicability / SuggestionStyle: how safe a suggestion is and how it is shown.
    * SubstitutionPart / Suggestion: proposed source edits (single or multipart).
    * Diagnostic: the record itself, with children and suggestions.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from yachalk import chalk

from spanmark.rendering.colored_enum import ColoredStrEnum

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence


class Level(ColoredStrEnum):
    """Severity of a diagnostic or of one of its children."""

    ERROR = ("error", chalk.red_bright.bold)
    WARNING = ("warning", chalk.yellow_bright.bold)
    NOTE = ("note", chalk.green_bright.bold)
    HELP = ("help", chalk.cyan_bright.bold)

    @classmethod
    def parse(cls, text: str) -> Level:
        """Return the level named by ``text`` (case-insensitive).

        Raises:
            ValueError: If ``text`` names no level.
        """
        key = text.strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"unknown diagnostic level: {text!r}")


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open byte range ``[byte_start, byte_end)`` in a source file.

    Invariant:
        ``0 <= byte_start <= byte_end``; the range may cross line boundaries.
    """

    file_id: int
    byte_start: int
    byte_end: int
    label: str | None = None
    is_primary: bool = False

    def __post_init__(self) -> None:
        if self.byte_start < 0 or self.byte_end < 0:
            raise ValueError("Span offsets cannot be negative")
        if self.byte_start > self.byte_end:
            raise ValueError(
                f"Span invariant violated: byte_start ({self.byte_start}) > "
                f"byte_end ({self.byte_end})"
            )

    @property
    def is_empty(self) -> bool:
        """Return True for a zero-width span."""
        return self.byte_start == self.byte_end

    def with_label(self, label: str | None) -> Span:
        """Return a copy of this span carrying ``label``."""
        return replace(self, label=label)

    def as_primary(self) -> Span:
        """Return a copy of this span flagged as primary."""
        return replace(self, is_primary=True)


class Applicability(Enum):
    """How confident the producer is that a suggestion can be applied blindly.

    Only `MACHINE_APPLICABLE` suggestions may be applied automatically; rendering
    never depends on this value.
    """

    MACHINE_APPLICABLE = "machine-applicable"
    MAYBE_INCORRECT = "maybe-incorrect"
    HAS_PLACEHOLDERS = "has-placeholders"
    UNSPECIFIED = "unspecified"


class SuggestionStyle(Enum):
    """How a suggestion is displayed.

    Attributes:
        SHOW_CODE: Render the edited source as an underline or diff block.
        INLINE: Attach ``help: <message>: `<replacement>``` as a label on the
            suggestion span (single-part, single-line suggestions only).
        HIDE_CODE: Print only the help message.
    """

    SHOW_CODE = "show-code"
    INLINE = "inline"
    HIDE_CODE = "hide-code"


@dataclass(frozen=True, slots=True)
class SubstitutionPart:
    """Replace the text covered by ``span`` with ``replacement``."""

    span: Span
    replacement: str

    @property
    def is_insertion(self) -> bool:
        """Return True when nothing is removed (zero-width span)."""
        return self.span.is_empty

    @property
    def is_deletion(self) -> bool:
        """Return True when text is removed and nothing inserted."""
        return not self.span.is_empty and self.replacement == ""


@dataclass(frozen=True)
class Suggestion:
    """A proposed source edit.

    The primary substitution is ``span``/``replacement``; multipart suggestions
    add further substitutions in ``extra_parts``. All parts are applied together.
    """

    span: Span
    replacement: str
    applicability: Applicability = Applicability.UNSPECIFIED
    message: str = ""
    style: SuggestionStyle = SuggestionStyle.SHOW_CODE
    extra_parts: tuple[SubstitutionPart, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_parts", tuple(self.extra_parts))

    @classmethod
    def multipart(
        cls,
        message: str,
        parts: Sequence[SubstitutionPart | tuple[Span, str]],
        applicability: Applicability = Applicability.UNSPECIFIED,
        style: SuggestionStyle = SuggestionStyle.SHOW_CODE,
    ) -> Suggestion:
        """Build a suggestion made of several substitutions.

        Args:
            message: Help text shown above the rendered edit.
            parts: Substitutions as `SubstitutionPart` or ``(span, replacement)`` pairs.
            applicability: Confidence tier of the whole suggestion.
            style: Display style.

        Returns:
            The suggestion; its first part becomes ``span``/``replacement``.

        Raises:
            ValueError: If ``parts`` is empty.
        """
        normalized: list[SubstitutionPart] = [
            p if isinstance(p, SubstitutionPart) else SubstitutionPart(p[0], p[1]) for p in parts
        ]
        if not normalized:
            raise ValueError("a suggestion needs at least one substitution part")
        first, *rest = normalized
        return cls(
            span=first.span,
            replacement=first.replacement,
            applicability=applicability,
            message=message,
            style=style,
            extra_parts=tuple(rest),
        )

    @property
    def parts(self) -> tuple[SubstitutionPart, ...]:
        """Return all substitutions in declaration order."""
        return (SubstitutionPart(self.span, self.replacement), *self.extra_parts)

    @property
    def is_machine_applicable(self) -> bool:
        """Return True if the suggestion may be applied without review."""
        return self.applicability is Applicability.MACHINE_APPLICABLE


@dataclass(frozen=True)
class Diagnostic:
    """A fully-formed diagnostic ready to be rendered.

    Invariants:
        * A top-level diagnostic has a ``primary_span`` unless it is ``spanless``.
        * Children may carry any number of spans, including none.

    Attributes:
        level: Severity.
        message: Header message (may span several lines).
        code: Optional error code such as ``E0061``.
        primary_span: The span the diagnostic is about (drawn with ``^``).
        secondary_spans: Supporting spans (drawn with ``-``) in declaration order.
        children: Notes/help entries rendered after the snippet, in order.
        suggestions: Proposed edits rendered after the children.
        future_incompatible: Re-print this diagnostic in the future-incompatibility report.
        spanless: Mark a top-level diagnostic that legitimately has no source location.
    """

    level: Level
    message: str
    code: str | None = None
    primary_span: Span | None = None
    secondary_spans: tuple[Span, ...] = ()
    children: tuple[Diagnostic, ...] = ()
    suggestions: tuple[Suggestion, ...] = ()
    future_incompatible: bool = False
    spanless: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "secondary_spans", tuple(self.secondary_spans))
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "suggestions", tuple(self.suggestions))

    @property
    def has_spans(self) -> bool:
        """Return True if the diagnostic points at any source location."""
        return self.primary_span is not None or bool(self.secondary_spans)

    def spans(self) -> Iterator[Span]:
        """Yield all spans, primary first, each flagged with its role."""
        if self.primary_span is not None:
            yield self.primary_span.as_primary()
        yield from self.secondary_spans

    def walk(self) -> Iterator[Diagnostic]:
        """Yield this diagnostic followed by all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


def codes_of(diagnostics: Iterable[Diagnostic]) -> list[str]:
    """Return the distinct codes carried by ``diagnostics`` in order of first occurrence."""
    seen: dict[str, None] = {}
    for diag in diagnostics:
        if diag.code is not None:
            seen.setdefault(diag.code, None)
    return list(seen)
