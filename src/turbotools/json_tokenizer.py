import re

from .constants import JSON_DIGITS, JSON_HEX_DIGITS, JSON_LITERALS, JSON_SIMPLE_ESCAPES, JSON_WHITESPACE
from .errors import decode_utf8, malformed_at
from .tokens import JsonToken

_STRING_STOP_PATTERN = re.compile(r'["\\\x00-\x1f]')
_NUMBER_PATTERN = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_NUMBER_CONTINUATION = frozenset("0123456789.eE+-")


class TokenizerOpts:
    __slots__ = ("discard_bom",)

    def __init__(self, discard_bom=True):
        self.discard_bom = bool(discard_bom)


class JsonTokenizer:
    """Single-pass JSON scanner that also enforces the grammar.

    The scanner keeps a stack of open containers and one expectation state, so
    every token is checked against its position the moment it is read. The
    resulting stream is always exactly one balanced JSON value.
    """

    # Expectation states
    VALUE = 0  # top level, after ':' or after ',' in an array
    VALUE_OR_END = 1  # just after '['
    KEY_OR_END = 2  # just after '{'
    KEY = 3  # after ',' in an object
    COLON = 4
    AFTER_VALUE = 5  # ',' or a closing bracket
    DONE = 6

    __slots__ = ("buffer", "length", "opts", "pos", "stack", "state", "tokens")

    def __init__(self, opts=None):
        self.opts = opts or TokenizerOpts()
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.state = self.VALUE
        self.stack = []
        self.tokens = []

    def run(self, text):
        text = decode_utf8(text)
        if text and text[0] == "\ufeff" and self.opts.discard_bom:
            text = text[1:]

        self.buffer = text
        self.length = len(text)
        self.pos = 0
        self.state = self.VALUE
        self.stack = []
        self.tokens = []

        while True:
            c = self._skip_whitespace()
            if c is None:
                self._finish()
                return self.tokens
            if self.state == self.DONE:
                raise self._error(self.pos, "trailing-content", "Unexpected content after the top-level value")

            if c == "{" or c == "[":
                self._open_container(c)
            elif c == "}" or c == "]":
                self._close_container(c)
            elif c == ":":
                if self.state != self.COLON:
                    raise self._error(self.pos, "unexpected-token", "Unexpected ':'")
                self._emit(JsonToken.COLON, None, self.pos)
                self.pos += 1
                self.state = self.VALUE
            elif c == ",":
                if self.state != self.AFTER_VALUE or not self.stack:
                    raise self._error(self.pos, "unexpected-token", "Unexpected ','")
                self._emit(JsonToken.COMMA, None, self.pos)
                self.pos += 1
                self.state = self.KEY if self.stack[-1] == JsonToken.OBJECT_START else self.VALUE
            elif c == '"':
                if self.state == self.KEY or self.state == self.KEY_OR_END:
                    self._scan_string()
                    self.state = self.COLON
                else:
                    self._require_value_position("string")
                    self._scan_string()
                    self._value_done()
            elif c == "-" or c in JSON_DIGITS:
                self._require_value_position("number")
                self._scan_number()
                self._value_done()
            elif c in JSON_LITERALS:
                self._require_value_position("literal")
                self._scan_literal(JSON_LITERALS[c])
                self._value_done()
            else:
                raise self._error(self.pos, "unexpected-character", f"Unexpected character {c!r}")

    # ---------------------
    # Helper methods
    # ---------------------

    def _skip_whitespace(self):
        buffer = self.buffer
        length = self.length
        pos = self.pos
        while pos < length and buffer[pos] in JSON_WHITESPACE:
            pos += 1
        self.pos = pos
        if pos >= length:
            return None
        return buffer[pos]

    def _emit(self, kind, data, offset):
        self.tokens.append(JsonToken(kind, data, offset))

    def _error(self, offset, code, message=None):
        return malformed_at(self.buffer, offset, code, message)

    def _require_value_position(self, what):
        if self.state != self.VALUE and self.state != self.VALUE_OR_END:
            raise self._error(self.pos, "unexpected-token", f"Unexpected {what}")

    def _value_done(self):
        self.state = self.AFTER_VALUE if self.stack else self.DONE

    def _finish(self):
        if self.state == self.DONE:
            return
        if not self.stack and self.state == self.VALUE and not self.tokens:
            raise self._error(self.length, "unexpected-eof", "No JSON value found")
        raise self._error(
            self.length,
            "unexpected-eof",
            f"Unexpected end of input with {len(self.stack)} unclosed container(s)",
        )

    # ---------------------
    # Token scanners
    # ---------------------

    def _open_container(self, c):
        self._require_value_position("'" + c + "'")
        kind = JsonToken.OBJECT_START if c == "{" else JsonToken.ARRAY_START
        self._emit(kind, None, self.pos)
        self.stack.append(kind)
        self.pos += 1
        self.state = self.KEY_OR_END if kind == JsonToken.OBJECT_START else self.VALUE_OR_END

    def _close_container(self, c):
        expected = JsonToken.OBJECT_START if c == "}" else JsonToken.ARRAY_START
        if not self.stack or self.stack[-1] != expected:
            raise self._error(self.pos, "mismatched-bracket", f"Unmatched {c!r}")
        empty_ok = self.KEY_OR_END if expected == JsonToken.OBJECT_START else self.VALUE_OR_END
        if self.state != self.AFTER_VALUE and self.state != empty_ok:
            raise self._error(self.pos, "unexpected-token", f"Unexpected {c!r}")
        self.stack.pop()
        kind = JsonToken.OBJECT_END if c == "}" else JsonToken.ARRAY_END
        self._emit(kind, None, self.pos)
        self.pos += 1
        self._value_done()

    def _scan_string(self):
        buffer = self.buffer
        length = self.length
        start = self.pos
        pos = start + 1
        while True:
            match = _STRING_STOP_PATTERN.search(buffer, pos)
            if match is None:
                raise self._error(start, "unterminated-string", "Unterminated string")
            stop = match.start()
            ch = buffer[stop]
            if ch == '"':
                self._emit(JsonToken.STRING, buffer[start + 1 : stop], start)
                self.pos = stop + 1
                return
            if ch != "\\":
                raise self._error(stop, "control-character-in-string", f"Unescaped control character {ch!r}")
            escape = stop + 1
            if escape >= length:
                raise self._error(start, "unterminated-string", "Unterminated string")
            e = buffer[escape]
            if e in JSON_SIMPLE_ESCAPES:
                pos = escape + 1
                continue
            if e == "u":
                digits = buffer[escape + 1 : escape + 5]
                if len(digits) == 4 and all(d in JSON_HEX_DIGITS for d in digits):
                    pos = escape + 5
                    continue
                if escape + 1 + len(digits) >= length and all(d in JSON_HEX_DIGITS for d in digits):
                    raise self._error(start, "unterminated-string", "Unterminated string")
            raise self._error(stop, "invalid-escape", f"Invalid escape sequence {buffer[stop : escape + 1]!r}")

    def _scan_number(self):
        start = self.pos
        match = _NUMBER_PATTERN.match(self.buffer, start)
        if match is None:
            raise self._error(start, "invalid-number", "Invalid number")
        end = match.end()
        if end < self.length and self.buffer[end] in _NUMBER_CONTINUATION:
            raise self._error(start, "invalid-number", f"Invalid number {self.buffer[start : end + 1]!r}")
        self._emit(JsonToken.NUMBER, match.group(), start)
        self.pos = end

    def _scan_literal(self, literal):
        start = self.pos
        if not self.buffer.startswith(literal, start):
            raise self._error(start, "invalid-literal", f"Expected {literal!r}")
        if literal == "true":
            kind = JsonToken.TRUE
        elif literal == "false":
            kind = JsonToken.FALSE
        else:
            kind = JsonToken.NULL
        self._emit(kind, None, start)
        self.pos = start + len(literal)


def tokenize_json(text, opts=None):
    """Tokenize JSON ``text`` (str or UTF-8 bytes) into a list of JsonToken."""
    return JsonTokenizer(opts).run(text)
