"""JSON serialization from a token stream."""

from __future__ import annotations

from collections.abc import Iterable

from .errors import UnbalancedStructure
from .formatting import FormatOpts, IndentCache, Mode
from .tokens import JSON_FIXED_TEXT, JsonToken

_MATCHING_START = {
    JsonToken.OBJECT_END: JsonToken.OBJECT_START,
    JsonToken.ARRAY_END: JsonToken.ARRAY_START,
}


def _token_text(token: JsonToken) -> str:
    kind = token.kind
    if kind == JsonToken.STRING:
        return f'"{token.data}"'
    if kind == JsonToken.NUMBER:
        return str(token.data)
    text = JSON_FIXED_TEXT.get(kind)
    if text is None:
        raise UnbalancedStructure("unknown-token", f"Unknown token kind {kind!r}")
    return text


def _unbalanced(message: str) -> UnbalancedStructure:
    return UnbalancedStructure("unbalanced-structure", message)


def serialize_json(
    tokens: Iterable[JsonToken],
    mode: Mode = Mode.COMPACT,
    opts: FormatOpts | None = None,
) -> str:
    """Render a JSON token stream.

    Scalars are written exactly as they were scanned, so numbers keep their
    spelling and strings keep their escapes. Start and end tokens are checked
    against each other while rendering; a mismatch raises UnbalancedStructure.
    """
    if mode is Mode.PRETTY:
        return _serialize_pretty(tokens, opts or FormatOpts())
    return _serialize_compact(tokens)


def _serialize_compact(tokens: Iterable[JsonToken]) -> str:
    parts: list[str] = []
    stack: list[int] = []
    for token in tokens:
        kind = token.kind
        if kind == JsonToken.OBJECT_START or kind == JsonToken.ARRAY_START:
            stack.append(kind)
        elif kind in _MATCHING_START:
            _check_close(stack, kind)
        parts.append(_token_text(token))
    if stack:
        raise _unbalanced(f"{len(stack)} container(s) left open at end of stream")
    return "".join(parts)


def _serialize_pretty(tokens: Iterable[JsonToken], opts: FormatOpts) -> str:
    indents = IndentCache(opts.indent)
    parts: list[str] = []
    stack: list[int] = []
    # Set right after a start token until we know whether the container is empty.
    just_opened = False
    for token in tokens:
        kind = token.kind
        if kind in _MATCHING_START:
            _check_close(stack, kind)
            if not just_opened:
                parts.append("\n")
                parts.append(indents[len(stack)])
            just_opened = False
            parts.append(JSON_FIXED_TEXT[kind])
            continue

        if just_opened:
            parts.append("\n")
            parts.append(indents[len(stack)])
            just_opened = False

        if kind == JsonToken.OBJECT_START or kind == JsonToken.ARRAY_START:
            parts.append(JSON_FIXED_TEXT[kind])
            stack.append(kind)
            just_opened = True
        elif kind == JsonToken.COMMA:
            parts.append(",\n")
            parts.append(indents[len(stack)])
        elif kind == JsonToken.COLON:
            parts.append(": ")
        else:
            parts.append(_token_text(token))
    if stack:
        raise _unbalanced(f"{len(stack)} container(s) left open at end of stream")
    return "".join(parts)


def _check_close(stack: list[int], kind: int) -> None:
    if not stack:
        raise _unbalanced(f"Closing {JSON_FIXED_TEXT[kind]!r} with no open container")
    opened = stack.pop()
    if opened != _MATCHING_START[kind]:
        raise _unbalanced(f"Closing {JSON_FIXED_TEXT[kind]!r} does not match open {JSON_FIXED_TEXT[opened]!r}")
