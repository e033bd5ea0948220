"""Typed failures raised by the tokenizers, serializers and input layer."""

from __future__ import annotations


class TurboToolsError(Exception):
    """Base class for every error turbotools reports to its caller.

    Errors carry a short machine-readable ``code`` plus an optional source
    position, so a caller can tell an unterminated string from an invalid
    escape without parsing the message.
    """

    def __init__(
        self,
        code: str,
        message: str | None = None,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.code = code
        self.message = message or code
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __repr__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"{type(self).__name__}({self.code!r}, line={self.line}, column={self.column})"
        return f"{type(self).__name__}({self.code!r})"

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code


class MalformedInput(TurboToolsError):
    """The tokenizer could not make syntactic sense of the input."""


class UnbalancedStructure(TurboToolsError):
    """A serializer received end tokens that do not match their start tokens."""


class InputUnavailable(TurboToolsError):
    """No input could be read from the requested source."""


def source_position(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based (line, column) of ``offset`` in ``text``."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def malformed_at(text: str, offset: int, code: str, message: str | None = None) -> MalformedInput:
    line, column = source_position(text, offset)
    return MalformedInput(code, message, line=line, column=column)


def decode_utf8(data: str | bytes) -> str:
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInput("invalid-utf-8", f"Input is not valid UTF-8 at byte {exc.start}") from exc
