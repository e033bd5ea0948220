"""HTML serialization from a token stream."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .constants import IMPLIED_END_GROUPS, VOID_ELEMENTS, ascii_lower
from .formatting import FormatOpts, IndentCache, Mode, collapse_whitespace, is_whitespace
from .tokens import Comment, Declaration, RawBlock, TagClose, TagOpen, Text


def _escape_text(text: str) -> str:
    # Only '<' can turn text back into markup once whitespace is squeezed out.
    return text.replace("<", "&lt;")


def _choose_attr_quote(value: str) -> str:
    if '"' in value and "'" not in value:
        return "'"
    return '"'


def _escape_attr_value(value: str, quote_char: str) -> str:
    # Values are kept as authored (entities undecoded), so '&' is left alone.
    value = value.replace("<", "&lt;")
    if quote_char == '"':
        return value.replace('"', "&quot;")
    return value


def serialize_start_tag(
    name: str,
    attrs: Sequence[tuple[str, str | None]] | None,
    self_closing: bool = False,
) -> str:
    parts: list[str] = ["<", name]
    for key, value in attrs or ():
        if value is None:
            parts.extend([" ", key])
            continue
        quote = _choose_attr_quote(value)
        parts.extend([" ", key, "=", quote, _escape_attr_value(value, quote), quote])
    parts.append("/>" if self_closing else ">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def serialize_html(
    tokens: Iterable[Any],
    mode: Mode = Mode.COMPACT,
    opts: FormatOpts | None = None,
) -> str:
    """Render an HTML token stream.

    Compact output drops comments and whitespace-only text and squeezes the
    remaining text. Pretty output puts every tag, text run, comment and
    declaration on its own indented line. In both modes raw-block content is
    written back untouched.
    """
    if mode is Mode.PRETTY:
        return _serialize_pretty(list(tokens), opts or FormatOpts())
    return _serialize_compact(tokens)


def _serialize_compact(tokens: Iterable[Any]) -> str:
    parts: list[str] = []
    # Text on both sides of a dropped comment is squeezed as one run.
    pending_text: list[str] = []
    for token in tokens:
        if isinstance(token, Text):
            pending_text.append(token.data)
            continue
        if isinstance(token, Comment):
            continue
        if pending_text:
            _append_compact_text(parts, pending_text)
        if isinstance(token, TagOpen):
            parts.append(serialize_start_tag(token.name, token.attrs, token.self_closing))
        elif isinstance(token, TagClose):
            parts.append(serialize_end_tag(token.name))
        elif isinstance(token, RawBlock):
            parts.append(token.data)
        elif isinstance(token, Declaration) and "<" not in token.data:
            parts.append(f"<{token.data}>")
    if pending_text:
        _append_compact_text(parts, pending_text)
    return "".join(parts)


def _append_compact_text(parts: list[str], pending_text: list[str]) -> None:
    text = collapse_whitespace("".join(pending_text))
    pending_text.clear()
    if text:
        parts.append(_escape_text(text))


def _next_significant(tokens: list[Any], index: int) -> int:
    """Index of the first token after ``index`` that is not whitespace-only text."""
    index += 1
    while index < len(tokens):
        token = tokens[index]
        if not (isinstance(token, Text) and is_whitespace(token.data)):
            break
        index += 1
    return index


def _serialize_pretty(tokens: list[Any], opts: FormatOpts) -> str:
    indents = IndentCache(opts.indent)
    lines: list[str] = []
    # Lowercased names of the elements currently open; its length is the indent level.
    stack: list[str] = []
    count = len(tokens)
    i = 0
    while i < count:
        token = tokens[i]
        prefix = indents[len(stack)]

        if isinstance(token, Text):
            text = collapse_whitespace(token.data)
            if text:
                lines.append(prefix + _escape_text(text))

        elif isinstance(token, TagOpen):
            lower = ascii_lower(token.name)
            siblings = IMPLIED_END_GROUPS.get(lower)
            if siblings is not None:
                while stack and stack[-1] in siblings:
                    stack.pop()
                prefix = indents[len(stack)]
            open_tag = serialize_start_tag(token.name, token.attrs, token.self_closing)

            if token.self_closing or lower in VOID_ELEMENTS:
                lines.append(prefix + open_tag)
            elif (
                i + 2 < count
                and isinstance(tokens[i + 1], RawBlock)
                and isinstance(tokens[i + 2], TagClose)
            ):
                # Raw element: one unit, so its content bytes stay exactly as scanned.
                close = tokens[i + 2]
                lines.append(prefix + open_tag + tokens[i + 1].data + serialize_end_tag(close.name))
                i += 2
            else:
                nxt = _next_significant(tokens, i)
                if nxt < count and isinstance(tokens[nxt], TagClose) and ascii_lower(tokens[nxt].name) == lower:
                    lines.append(prefix + open_tag + serialize_end_tag(tokens[nxt].name))
                    i = nxt
                else:
                    lines.append(prefix + open_tag)
                    stack.append(lower)

        elif isinstance(token, TagClose):
            lower = ascii_lower(token.name)
            if lower in stack:
                # Closing an outer element also closes anything left open inside it.
                depth = len(stack) - 1 - stack[::-1].index(lower)
                del stack[depth:]
            lines.append(indents[len(stack)] + serialize_end_tag(token.name))

        elif isinstance(token, Comment):
            lines.append(f"{prefix}<!--{token.data}-->")

        elif isinstance(token, Declaration):
            lines.append(f"{prefix}<{token.data}>")

        elif isinstance(token, RawBlock):
            lines.append(prefix + token.data)

        i += 1
    return "\n".join(lines)
