"""Element tables and character classes shared by the tokenizers and serializers."""

# Elements whose content is copied byte-for-byte instead of being tokenized.
RAW_TEXT_ELEMENTS = frozenset({"script", "style", "textarea", "pre", "title"})

# Raw elements that can never be switched off through TokenizerOpts.
REQUIRED_RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

# HTML5 void elements (no closing tag)
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

# Opening the key element first closes any innermost open elements named in its set.
IMPLIED_END_GROUPS = {
    "li": frozenset({"li"}),
    "dt": frozenset({"dt", "dd"}),
    "dd": frozenset({"dt", "dd"}),
    "p": frozenset({"p"}),
    "option": frozenset({"option"}),
    "tr": frozenset({"tr", "td", "th"}),
    "td": frozenset({"td", "th"}),
    "th": frozenset({"td", "th"}),
}

HTML_WHITESPACE = " \t\n\r\f"

JSON_WHITESPACE = frozenset(" \t\n\r")
JSON_DIGITS = frozenset("0123456789")
JSON_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
JSON_SIMPLE_ESCAPES = frozenset('"\\/bfnrt')
JSON_LITERALS = {"t": "true", "f": "false", "n": "null"}

_ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})


def ascii_lower(name):
    """Lowercase ASCII letters only, the way HTML compares tag names."""
    return name.translate(_ASCII_LOWER_TABLE)
