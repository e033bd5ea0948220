import re

from .constants import RAW_TEXT_ELEMENTS, REQUIRED_RAW_TEXT_ELEMENTS, ascii_lower
from .errors import decode_utf8, malformed_at
from .tokens import Comment, Declaration, RawBlock, TagClose, TagOpen, Text

_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_TAG_WHITESPACE = ("\t", "\n", "\f", "\r", " ")

_TAG_NAME_TERMINATOR_PATTERN = re.compile(r"[\t\n\f\r /<>]")
_ATTR_NAME_TERMINATOR_PATTERN = re.compile(r"[\t\n\f\r /<>=]")
_ATTR_VALUE_UNQUOTED_TERMINATOR_PATTERN = re.compile(r"[\t\n\f\r >]")


class TokenizerOpts:
    __slots__ = ("discard_bom", "raw_text_elements")

    def __init__(self, discard_bom=True, raw_text_elements=None):
        self.discard_bom = bool(discard_bom)
        if raw_text_elements is None:
            elements = RAW_TEXT_ELEMENTS
        else:
            elements = frozenset(ascii_lower(name) for name in raw_text_elements)
        self.raw_text_elements = elements | REQUIRED_RAW_TEXT_ELEMENTS


class HtmlTokenizer:
    """Permissive HTML tokenizer.

    Anything that does not look like markup is kept as text, unmatched or
    missing end tags are left for the serializer to cope with, and no entity
    is decoded. The only hard failures are markup cut off by the end of the
    input: a tag, comment or declaration with no terminator, or a raw element
    with no closing tag.
    """

    DATA = 0
    TAG_OPEN = 1
    END_TAG_OPEN = 2
    TAG_NAME = 3
    END_TAG_TAIL = 4
    BEFORE_ATTRIBUTE_NAME = 5
    ATTRIBUTE_NAME = 6
    AFTER_ATTRIBUTE_NAME = 7
    BEFORE_ATTRIBUTE_VALUE = 8
    ATTRIBUTE_VALUE_DOUBLE = 9
    ATTRIBUTE_VALUE_SINGLE = 10
    ATTRIBUTE_VALUE_UNQUOTED = 11
    SELF_CLOSING_START_TAG = 12
    MARKUP_DECLARATION_OPEN = 13
    BOGUS_COMMENT = 14
    RAW_BLOCK = 15

    __slots__ = (
        "buffer",
        "current_attr_name",
        "current_tag_attrs",
        "current_tag_is_end",
        "current_tag_name",
        "current_tag_self_closing",
        "length",
        "opts",
        "pos",
        "raw_tag_name",
        "state",
        "tag_start",
        "text_buffer",
        "tokens",
    )

    def __init__(self, opts=None):
        self.opts = opts or TokenizerOpts()
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.state = self.DATA
        self.tokens = []
        self.text_buffer = []
        self.tag_start = 0
        self.current_tag_name = ""
        self.current_tag_is_end = False
        self.current_tag_attrs = []
        self.current_tag_self_closing = False
        self.current_attr_name = None
        self.raw_tag_name = None

    def run(self, html):
        html = decode_utf8(html)
        if html and html[0] == "\ufeff" and self.opts.discard_bom:
            html = html[1:]

        self.buffer = html
        self.length = len(html)
        self.pos = 0
        self.state = self.DATA
        self.tokens = []
        self.text_buffer.clear()
        self.tag_start = 0
        self._reset_tag()
        self.raw_tag_name = None

        while True:
            state = self.state
            if state == self.DATA:
                if self._state_data():
                    break
            elif state == self.TAG_OPEN:
                if self._state_tag_open():
                    break
            elif state == self.END_TAG_OPEN:
                if self._state_end_tag_open():
                    break
            elif state == self.TAG_NAME:
                self._state_tag_name()
            elif state == self.END_TAG_TAIL:
                self._state_end_tag_tail()
            elif state == self.BEFORE_ATTRIBUTE_NAME:
                self._state_before_attribute_name()
            elif state == self.ATTRIBUTE_NAME:
                self._state_attribute_name()
            elif state == self.AFTER_ATTRIBUTE_NAME:
                self._state_after_attribute_name()
            elif state == self.BEFORE_ATTRIBUTE_VALUE:
                self._state_before_attribute_value()
            elif state == self.ATTRIBUTE_VALUE_DOUBLE:
                self._state_attribute_value_quoted('"')
            elif state == self.ATTRIBUTE_VALUE_SINGLE:
                self._state_attribute_value_quoted("'")
            elif state == self.ATTRIBUTE_VALUE_UNQUOTED:
                self._state_attribute_value_unquoted()
            elif state == self.SELF_CLOSING_START_TAG:
                self._state_self_closing_start_tag()
            elif state == self.MARKUP_DECLARATION_OPEN:
                self._state_markup_declaration_open()
            elif state == self.BOGUS_COMMENT:
                self._state_bogus_comment()
            elif state == self.RAW_BLOCK:
                self._state_raw_block()
        return self.tokens

    # ---------------------
    # Helper methods
    # ---------------------

    def _get_char(self):
        if self.pos >= self.length:
            return None
        c = self.buffer[self.pos]
        self.pos += 1
        return c

    def _skip_tag_whitespace(self):
        buffer = self.buffer
        length = self.length
        pos = self.pos
        while pos < length and buffer[pos] in _TAG_WHITESPACE:
            pos += 1
        self.pos = pos

    def _error(self, code, message, offset=None):
        return malformed_at(self.buffer, self.tag_start if offset is None else offset, code, message)

    def _eof_in_tag(self):
        return self._error("eof-in-tag", "Tag is not closed before end of input")

    def _flush_text(self):
        if not self.text_buffer:
            return
        data = "".join(self.text_buffer)
        self.text_buffer.clear()
        if data:
            self.tokens.append(Text(data))

    def _reset_tag(self):
        self.current_tag_name = ""
        self.current_tag_is_end = False
        self.current_tag_attrs = []
        self.current_tag_self_closing = False
        self.current_attr_name = None

    def _finish_attribute(self, value):
        if self.current_attr_name is None:
            return
        self.current_tag_attrs.append((self.current_attr_name, value))
        self.current_attr_name = None

    def _emit_current_tag(self):
        self._finish_attribute(None)
        name = self.current_tag_name
        if self.current_tag_is_end:
            self.tokens.append(TagClose(name))
            self.state = self.DATA
        else:
            self_closing = self.current_tag_self_closing
            self.tokens.append(TagOpen(name, self.current_tag_attrs, self_closing))
            if not self_closing and ascii_lower(name) in self.opts.raw_text_elements:
                self.raw_tag_name = name
                self.state = self.RAW_BLOCK
            else:
                self.state = self.DATA
        self._reset_tag()

    # ---------------------
    # State handlers
    # ---------------------

    def _state_data(self):
        buffer = self.buffer
        pos = self.pos
        lt = buffer.find("<", pos)
        if lt == -1:
            if pos < self.length:
                self.text_buffer.append(buffer[pos:])
            self.pos = self.length
            self._flush_text()
            return True
        if lt > pos:
            self.text_buffer.append(buffer[pos:lt])
        self.tag_start = lt
        self.pos = lt + 1
        self.state = self.TAG_OPEN
        return False

    def _state_tag_open(self):
        c = self._get_char()
        if c is None:
            # A lone '<' at the very end is text.
            self.text_buffer.append("<")
            self._flush_text()
            return True
        if c == "!":
            self._flush_text()
            self.state = self.MARKUP_DECLARATION_OPEN
            return False
        if c == "/":
            self.state = self.END_TAG_OPEN
            return False
        if c == "?":
            self._flush_text()
            self.state = self.BOGUS_COMMENT
            return False
        if c in _ASCII_LETTERS:
            self._flush_text()
            self.current_tag_is_end = False
            self.pos -= 1
            self.state = self.TAG_NAME
            return False
        # Not markup: keep '<' as text and look at c again in the data state.
        self.text_buffer.append("<")
        self.pos -= 1
        self.state = self.DATA
        return False

    def _state_end_tag_open(self):
        c = self._get_char()
        if c is None:
            self.text_buffer.append("</")
            self._flush_text()
            return True
        if c in _ASCII_LETTERS:
            self._flush_text()
            self.current_tag_is_end = True
            self.pos -= 1
            self.state = self.TAG_NAME
            return False
        self.text_buffer.append("</")
        self.pos -= 1
        self.state = self.DATA
        return False

    def _state_tag_name(self):
        start = self.pos
        match = _TAG_NAME_TERMINATOR_PATTERN.search(self.buffer, start)
        if match is None:
            raise self._eof_in_tag()
        end = match.start()
        self.current_tag_name = self.buffer[start:end]
        if self.current_tag_is_end:
            self.pos = end
            self.state = self.END_TAG_TAIL
            return
        c = self.buffer[end]
        self.pos = end + 1
        if c == ">":
            self._emit_current_tag()
        elif c == "/":
            self.state = self.SELF_CLOSING_START_TAG
        else:
            self.state = self.BEFORE_ATTRIBUTE_NAME

    def _state_end_tag_tail(self):
        # Anything between an end tag's name and '>' carries no meaning.
        gt = self.buffer.find(">", self.pos)
        if gt == -1:
            raise self._eof_in_tag()
        self.pos = gt + 1
        self._emit_current_tag()

    def _state_before_attribute_name(self):
        self._skip_tag_whitespace()
        c = self._get_char()
        if c is None:
            raise self._eof_in_tag()
        if c == "/":
            self.state = self.SELF_CLOSING_START_TAG
        elif c == ">":
            self._emit_current_tag()
        elif c == "<":
            # Stray '<' inside a tag is dropped so names never carry one.
            return
        else:
            # '=' as the first character belongs to the name
            self.pos -= 1
            self.state = self.ATTRIBUTE_NAME

    def _state_attribute_name(self):
        start = self.pos
        match = _ATTR_NAME_TERMINATOR_PATTERN.search(self.buffer, start + 1)
        if match is None:
            raise self._eof_in_tag()
        end = match.start()
        self.current_attr_name = self.buffer[start:end]
        c = self.buffer[end]
        self.pos = end + 1
        if c == "=":
            self.state = self.BEFORE_ATTRIBUTE_VALUE
        elif c == ">":
            self._emit_current_tag()
        elif c == "/":
            self._finish_attribute(None)
            self.state = self.SELF_CLOSING_START_TAG
        else:
            self.state = self.AFTER_ATTRIBUTE_NAME

    def _state_after_attribute_name(self):
        self._skip_tag_whitespace()
        c = self._get_char()
        if c is None:
            raise self._eof_in_tag()
        if c == "=":
            self.state = self.BEFORE_ATTRIBUTE_VALUE
        elif c == ">":
            self._emit_current_tag()
        elif c == "/":
            self._finish_attribute(None)
            self.state = self.SELF_CLOSING_START_TAG
        elif c == "<":
            return
        else:
            self._finish_attribute(None)
            self.pos -= 1
            self.state = self.ATTRIBUTE_NAME

    def _state_before_attribute_value(self):
        self._skip_tag_whitespace()
        c = self._get_char()
        if c is None:
            raise self._eof_in_tag()
        if c == '"':
            self.state = self.ATTRIBUTE_VALUE_DOUBLE
        elif c == "'":
            self.state = self.ATTRIBUTE_VALUE_SINGLE
        elif c == ">":
            # Missing attribute value
            self._finish_attribute("")
            self._emit_current_tag()
        else:
            self.pos -= 1
            self.state = self.ATTRIBUTE_VALUE_UNQUOTED

    def _state_attribute_value_quoted(self, quote):
        close = self.buffer.find(quote, self.pos)
        if close == -1:
            raise self._eof_in_tag()
        self._finish_attribute(self.buffer[self.pos : close])
        self.pos = close + 1
        self.state = self.BEFORE_ATTRIBUTE_NAME

    def _state_attribute_value_unquoted(self):
        start = self.pos
        match = _ATTR_VALUE_UNQUOTED_TERMINATOR_PATTERN.search(self.buffer, start)
        if match is None:
            raise self._eof_in_tag()
        end = match.start()
        self._finish_attribute(self.buffer[start:end])
        self.pos = end + 1
        if self.buffer[end] == ">":
            self._emit_current_tag()
        else:
            self.state = self.BEFORE_ATTRIBUTE_NAME

    def _state_self_closing_start_tag(self):
        c = self._get_char()
        if c is None:
            raise self._eof_in_tag()
        if c == ">":
            self.current_tag_self_closing = True
            self._emit_current_tag()
            return
        # A stray '/' inside the tag is ignored.
        self.pos -= 1
        self.state = self.BEFORE_ATTRIBUTE_NAME

    def _state_markup_declaration_open(self):
        buffer = self.buffer
        pos = self.pos
        if buffer.startswith("--", pos):
            end = buffer.find("-->", pos + 2)
            if end == -1:
                raise self._error("eof-in-comment", "Comment is not closed before end of input")
            self.tokens.append(Comment(buffer[pos + 2 : end]))
            self.pos = end + 3
        elif ascii_lower(buffer[pos : pos + 7]) == "doctype":
            end = buffer.find(">", pos)
            if end == -1:
                raise self._error("eof-in-declaration", "Declaration is not closed before end of input")
            data = buffer[pos - 1 : end]
            if "<" in data:
                # Not a usable doctype: keep it as a comment like any other bogus markup.
                self.tokens.append(Comment(data[1:]))
            else:
                self.tokens.append(Declaration(data))
            self.pos = end + 1
        else:
            # <!x ...> and <![CDATA[...> are bogus comments ending at the first '>'.
            self._state_bogus_comment()
            return
        self.state = self.DATA

    def _state_bogus_comment(self):
        end = self.buffer.find(">", self.pos)
        if end == -1:
            raise self._error("eof-in-comment", "Comment is not closed before end of input")
        # For <?...> the '?' is part of the comment text.
        start = self.tag_start + 1 if self.buffer[self.tag_start + 1] == "?" else self.pos
        self.tokens.append(Comment(self.buffer[start:end]))
        self.pos = end + 1
        self.state = self.DATA

    def _state_raw_block(self):
        name = self.raw_tag_name
        match = _raw_end_pattern(ascii_lower(name)).search(self.buffer, self.pos)
        if match is None:
            raise self._error("eof-in-raw-block", f"<{name}> content is not closed before end of input")
        close = match.start()
        self.tokens.append(RawBlock(name, self.buffer[self.pos : close]))
        self.tokens.append(TagClose(self.buffer[close + 2 : close + 2 + len(name)]))
        self.pos = match.end()
        self.raw_tag_name = None
        self.state = self.DATA


_RAW_END_PATTERNS = {}


def _raw_end_pattern(name):
    pattern = _RAW_END_PATTERNS.get(name)
    if pattern is None:
        pattern = re.compile(r"</" + re.escape(name) + r"[\t\n\f\r ]*>", re.IGNORECASE | re.ASCII)
        _RAW_END_PATTERNS[name] = pattern
    return pattern


def tokenize_html(html, opts=None):
    """Tokenize ``html`` (str or UTF-8 bytes) into TagOpen/TagClose/Text/Comment/RawBlock/Declaration tokens."""
    return HtmlTokenizer(opts).run(html)
