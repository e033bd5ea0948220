"""Tests for formatting options and shared whitespace helpers."""

import unittest

from turbotools import FormatOpts, Mode
from turbotools.formatting import IndentCache, collapse_whitespace, is_whitespace


class TestFormatOpts(unittest.TestCase):
    def test_defaults(self):
        opts = FormatOpts()
        assert opts.indent_size == 2
        assert opts.indent_char == " "
        assert opts.indent == "  "

    def test_tabs(self):
        assert FormatOpts(indent_size=2, indent_char="\t").indent == "\t\t"

    def test_zero_width(self):
        assert FormatOpts(indent_size=0).indent == ""

    def test_rejects_negative_width(self):
        with self.assertRaises(ValueError):
            FormatOpts(indent_size=-1)

    def test_rejects_other_characters(self):
        with self.assertRaises(ValueError):
            FormatOpts(indent_char="-")

    def test_repr(self):
        assert repr(FormatOpts(4)) == "FormatOpts(indent_size=4, indent_char=' ')"

    def test_modes(self):
        assert {mode.value for mode in Mode} == {"compact", "pretty"}


class TestIndentCache(unittest.TestCase):
    def test_levels(self):
        indents = IndentCache("  ")
        assert indents[0] == ""
        assert indents[3] == "      "
        assert indents[1] == "  "


class TestWhitespace(unittest.TestCase):
    def test_collapse(self):
        assert collapse_whitespace("  a \n\t b\r\n") == "a b"

    def test_collapse_keeps_other_spaces(self):
        # Non-breaking space is content, not markup whitespace.
        assert collapse_whitespace("a\u00a0\u00a0b") == "a\u00a0\u00a0b"

    def test_collapse_to_empty(self):
        assert collapse_whitespace(" \n ") == ""

    def test_is_whitespace(self):
        assert is_whitespace("")
        assert is_whitespace(" \t\n\f\r")
        assert not is_whitespace(" x ")


if __name__ == "__main__":
    unittest.main()
