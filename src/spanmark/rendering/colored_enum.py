# topmark:header:start
#
#   project      : SpanMark
#   file         : colored_enum.py
#   file_relpath : src/spanmark/rendering/colored_enum.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""String enums that carry a terminal style.

Diagnostic levels and the styles of rendered rows are `ColoredStrEnum`
members: the member value is the plain text (``"error"``, ``"primary"``) and
`.color` is a colorizer, usually a `yachalk` builder such as
``chalk.red_bright.bold``. Drawing code records *which* member styles a
character; whether that becomes ANSI escapes is decided once per row in
`spanmark.rendering.styled.StyledLine.render`.

Example:
    ```python
    class Marker(ColoredStrEnum):
        PRIMARY = ("primary", chalk.red_bright.bold)

    Marker.PRIMARY.value          # 'primary'
    Marker.PRIMARY.color("^^^")   # bold red carets
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class Colorizer(Protocol):
    """Callable compatible with `yachalk.ChalkBuilder.__call__`.

    Renderers always pass a single string.
    """

    def __call__(self, *args: object, sep: str = " ") -> str: ...


def plain(*args: object, sep: str = " ") -> str:
    """Colorizer that leaves text untouched."""
    return sep.join(str(a) for a in args)


class ColoredStrEnum(str, Enum):
    """`str` enum member paired with a colorizer.

    Members are declared as ``NAME = (text, colorizer)``; hashing, equality and
    ``str()`` all use ``text``.
    """

    _value_: str
    _color: Colorizer

    def __new__(cls, text: str, color: Colorizer) -> ColoredStrEnum:
        obj: ColoredStrEnum = str.__new__(cls, text)
        obj._value_ = text
        obj._color = color
        return obj

    @property
    def value(self) -> str:
        """Return the plain text of the member."""
        return self._value_

    @property
    def color(self) -> Colorizer:
        """Return the colorizer used when the member's text is styled."""
        return self._color

    def __str__(self) -> str:
        return self._value_
