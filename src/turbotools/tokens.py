class JsonToken:
    __slots__ = ("data", "kind", "offset")

    OBJECT_START = 0
    OBJECT_END = 1
    ARRAY_START = 2
    ARRAY_END = 3
    COLON = 4
    COMMA = 5
    STRING = 6
    NUMBER = 7
    TRUE = 8
    FALSE = 9
    NULL = 10

    def __init__(self, kind, data=None, offset=0):
        self.kind = kind
        self.data = data
        self.offset = offset

    def __repr__(self):
        name = _JSON_KIND_NAMES.get(self.kind, str(self.kind))
        if self.data is None:
            return f"<{name}>"
        return f"<{name} {self.data!r}>"

    def __eq__(self, other):
        if not isinstance(other, JsonToken):
            return NotImplemented
        return self.kind == other.kind and self.data == other.data

    __hash__ = None


_JSON_KIND_NAMES = {
    JsonToken.OBJECT_START: "object-start",
    JsonToken.OBJECT_END: "object-end",
    JsonToken.ARRAY_START: "array-start",
    JsonToken.ARRAY_END: "array-end",
    JsonToken.COLON: "colon",
    JsonToken.COMMA: "comma",
    JsonToken.STRING: "string",
    JsonToken.NUMBER: "number",
    JsonToken.TRUE: "true",
    JsonToken.FALSE: "false",
    JsonToken.NULL: "null",
}

# Literal source text for the tokens that carry no data.
JSON_FIXED_TEXT = {
    JsonToken.OBJECT_START: "{",
    JsonToken.OBJECT_END: "}",
    JsonToken.ARRAY_START: "[",
    JsonToken.ARRAY_END: "]",
    JsonToken.COLON: ":",
    JsonToken.COMMA: ",",
    JsonToken.TRUE: "true",
    JsonToken.FALSE: "false",
    JsonToken.NULL: "null",
}


class TagOpen:
    __slots__ = ("attrs", "name", "self_closing")

    def __init__(self, name, attrs=None, self_closing=False):
        self.name = name
        # Ordered (name, value) pairs; value is None for a bare attribute.
        self.attrs = attrs if attrs is not None else []
        self.self_closing = bool(self_closing)

    def __repr__(self):
        parts = []
        for name, value in self.attrs:
            parts.append(name if value is None else f"{name}={value!r}")
        attrs = " ".join(parts)
        closing = " /" if self.self_closing else ""
        return f"<start:{self.name}{closing} {attrs}>"

    def __eq__(self, other):
        if not isinstance(other, TagOpen):
            return NotImplemented
        return self.name == other.name and self.attrs == other.attrs and self.self_closing == other.self_closing

    __hash__ = None


class TagClose:
    __slots__ = ("name",)

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"<end:{self.name}>"

    def __eq__(self, other):
        if not isinstance(other, TagClose):
            return NotImplemented
        return self.name == other.name

    __hash__ = None


class _DataToken:
    __slots__ = ("data",)

    def __init__(self, data):
        self.data = data

    def __repr__(self):
        return f"{type(self).__name__}({self.data!r})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.data == other.data

    __hash__ = None


class Text(_DataToken):
    __slots__ = ()


class Comment(_DataToken):
    __slots__ = ()


class Declaration(_DataToken):
    """``<!DOCTYPE ...>``; data excludes the angle brackets.

    Other ``<!...>`` and ``<?...>`` markup is tokenized as a Comment.
    """

    __slots__ = ()


class RawBlock:
    __slots__ = ("data", "name")

    def __init__(self, name, data):
        self.name = name
        self.data = data

    def __repr__(self):
        return f"RawBlock({self.name!r}, {self.data!r})"

    def __eq__(self, other):
        if not isinstance(other, RawBlock):
            return NotImplemented
        return self.name == other.name and self.data == other.data

    __hash__ = None
