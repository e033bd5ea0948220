"""Output modes, formatting options and the indentation helpers both serializers share."""

from __future__ import annotations

import enum
import re

_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f]+")


class Mode(enum.Enum):
    COMPACT = "compact"
    PRETTY = "pretty"


class FormatOpts:
    __slots__ = ("indent_char", "indent_size")

    def __init__(self, indent_size: int = 2, indent_char: str = " ") -> None:
        if indent_size < 0:
            raise ValueError("indent_size must be >= 0")
        if indent_char not in {" ", "\t"}:
            raise ValueError("indent_char must be a space or a tab")
        self.indent_size = indent_size
        self.indent_char = indent_char

    @property
    def indent(self) -> str:
        """One indentation unit."""
        return self.indent_char * self.indent_size

    def __repr__(self) -> str:
        return f"FormatOpts(indent_size={self.indent_size}, indent_char={self.indent_char!r})"


class IndentCache:
    """Memoized ``unit * level`` prefixes for one serialization run."""

    __slots__ = ("_prefixes", "unit")

    def __init__(self, unit: str) -> None:
        self.unit = unit
        self._prefixes: list[str] = [""]

    def __getitem__(self, level: int) -> str:
        prefixes = self._prefixes
        while len(prefixes) <= level:
            prefixes.append(prefixes[-1] + self.unit)
        return prefixes[level]


def collapse_whitespace(text: str) -> str:
    """Trim ``text`` and squeeze internal whitespace runs to a single space."""
    return _WHITESPACE_RUN.sub(" ", text).strip(" ")


def is_whitespace(text: str) -> bool:
    return not text or _WHITESPACE_RUN.fullmatch(text) is not None
