# topmark:header:start
#
#   project      : Plugline
#   file         : colored_enum.py
#   file_relpath : src/plugline/core/colored_enum.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Color-aware string enum for human-facing rendering.

`ColoredStrEnum` keeps `_value_` as the plain `str` and stores the color
function separately (`_color`), so Enum semantics (hashing, equality, `repr`)
are unaffected. Members are declared as ``(text, colorizer)`` pairs:

    ```python
    from yachalk import chalk

    class Verb(ColoredStrEnum):
        GET = ("GET", chalk.green)

    Verb.GET.value            # 'GET'
    Verb.GET.color("GET")     # green "GET"
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class Colorizer(Protocol):
    """Callable that decorates a string for display (e.g. a `yachalk.ChalkBuilder`)."""

    def __call__(self, *args: object, sep: str = " ") -> str:
        """Colorize and concatenate the provided arguments."""
        ...


class ColoredStrEnum(str, Enum):
    """Enum whose *value* is a string and that carries an associated colorizer."""

    _value_: str
    _color: Colorizer

    def __new__(cls, text: str, color: Colorizer) -> ColoredStrEnum:
        """Construct a colored enum member from its text and colorizer."""
        obj: ColoredStrEnum = str.__new__(cls, text)
        obj._value_ = text
        obj._color = color
        return obj

    @property
    def value(self) -> str:
        """Return the textual value of the enum member."""
        return self._value_

    @property
    def color(self) -> Colorizer:
        """Return the colorizer associated with this member."""
        return self._color

    def styled(self, *, enable: bool = True) -> str:
        """Return the member text, colorized unless ``enable`` is False."""
        return self._color(self._value_) if enable else self._value_
