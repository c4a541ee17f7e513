# topmark:header:start
#
#   project      : SpanMark
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the SpanMark test suite.

This file sets up global fixtures, typed wrappers around pytest decorators and
small builders shared by the rendering, report and CLI tests.

Notes:
    Tests should respect the immutable/mutable configuration split:

    - Build configs using `spanmark.config.model.MutableRenderConfig`, then
      `freeze()` into a `RenderConfig` before handing it to the renderer.
    - Do **not** mutate a frozen `RenderConfig`. If you need to tweak one,
      call `RenderConfig.thaw()`, edit the returned draft, then `freeze()` again.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from spanmark.config import logging
from spanmark.config.model import MutableRenderConfig
from spanmark.diagnostic.model import Span
from spanmark.rendering.annotator import Annotator
from spanmark.source.source_map import SourceMap

if TYPE_CHECKING:
    from spanmark.config.model import RenderConfig
    from spanmark.diagnostic.model import Diagnostic
    from spanmark.source.source_map import SourceFile

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.cli`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_golden: DecoratorType[Any] = as_typed_mark(pytest.mark.golden)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_spanmark_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure SpanMark's runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    SPANMARK_LOG_LEVEL in their shell.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv("SPANMARK_LOG_LEVEL", raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the log level to TRACE for all tests.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


class ListSink:
    """`DiagnosticSink` collecting everything written to it."""

    def __init__(self) -> None:
        self.chunks: list[str] = []

    def write(self, text: str, /) -> None:
        self.chunks.append(text)

    @property
    def text(self) -> str:
        """Return everything written so far."""
        return "".join(self.chunks)


def make_config(**overrides: Any) -> RenderConfig:
    """Return a frozen `RenderConfig` built from defaults and overrides.

    Args:
        **overrides (Any): Attribute overrides applied to the mutable draft before freezing.

    Returns:
        RenderConfig: An immutable configuration snapshot.
    """
    draft: MutableRenderConfig = MutableRenderConfig.from_defaults()
    for k, v in overrides.items():
        setattr(draft, k, v)
    return draft.freeze()


def make_source_map(*files: tuple[str, str]) -> SourceMap:
    """Return a source map holding ``(path, text)`` pairs, ids assigned in order."""
    source_map = SourceMap()
    for path, text in files:
        source_map.add_file(path, text)
    return source_map


def find_span(
    source: SourceFile,
    needle: str,
    *,
    nth: int = 0,
    label: str | None = None,
    primary: bool = False,
) -> Span:
    """Return the span covering the ``nth`` occurrence of ``needle`` in ``source``.

    Raises:
        AssertionError: If ``needle`` does not occur ``nth + 1`` times.
    """
    encoded: bytes = needle.encode("utf-8")
    start: int = -1
    for _ in range(nth + 1):
        start = source.data.find(encoded, start + 1)
        assert start >= 0, f"{needle!r} occurs fewer than {nth + 1} times in {source.path}"
    return Span(source.id, start, start + len(encoded), label=label, is_primary=primary)


def insertion_after(source: SourceFile, needle: str, *, nth: int = 0) -> Span:
    """Return a zero-width span right after the ``nth`` occurrence of ``needle``."""
    span: Span = find_span(source, needle, nth=nth)
    return Span(source.id, span.byte_end, span.byte_end)


def render(source_map: SourceMap, diagnostic: Diagnostic, **overrides: Any) -> str:
    """Render ``diagnostic`` with a config built from ``overrides``."""
    return Annotator(source_map, make_config(**overrides)).render(diagnostic)


def block(*rows: str) -> str:
    """Join expected output rows, terminating each with a newline."""
    return "".join(f"{row}\n" for row in rows)
