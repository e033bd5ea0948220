"""Tests for typed errors and source positions."""

import unittest

from turbotools import InputUnavailable, MalformedInput, TurboToolsError, UnbalancedStructure
from turbotools.errors import decode_utf8, malformed_at, source_position


class TestErrorTypes(unittest.TestCase):
    def test_hierarchy(self):
        """Every failure a caller can see derives from TurboToolsError."""
        for cls in (MalformedInput, UnbalancedStructure, InputUnavailable):
            assert issubclass(cls, TurboToolsError)

    def test_code_and_message(self):
        error = MalformedInput("invalid-number", "Bad number")
        assert error.code == "invalid-number"
        assert error.message == "Bad number"
        assert error.line is None
        assert str(error) == "invalid-number - Bad number"

    def test_message_defaults_to_code(self):
        error = UnbalancedStructure("unbalanced-structure")
        assert error.message == "unbalanced-structure"
        assert str(error) == "unbalanced-structure"

    def test_position_in_str(self):
        error = MalformedInput("eof-in-tag", "Tag is not closed", line=3, column=7)
        assert str(error) == "(3,7): eof-in-tag - Tag is not closed"
        assert repr(error) == "MalformedInput('eof-in-tag', line=3, column=7)"


class TestSourcePosition(unittest.TestCase):
    def test_first_character(self):
        assert source_position("abc", 0) == (1, 1)

    def test_after_newlines(self):
        text = "ab\ncd\nef"
        assert source_position(text, 3) == (2, 1)
        assert source_position(text, 7) == (3, 2)

    def test_offset_is_clamped(self):
        assert source_position("ab", 10) == (1, 3)
        assert source_position("ab", -1) == (1, 1)

    def test_malformed_at(self):
        error = malformed_at("x\n  y", 4, "unexpected-character")
        assert isinstance(error, MalformedInput)
        assert (error.line, error.column) == (2, 3)


class TestDecodeUtf8(unittest.TestCase):
    def test_str_passes_through(self):
        assert decode_utf8("é") == "é"

    def test_bytes_are_decoded(self):
        assert decode_utf8("é".encode()) == "é"
        assert decode_utf8(bytearray(b"ab")) == "ab"

    def test_invalid_bytes(self):
        with self.assertRaises(MalformedInput) as ctx:
            decode_utf8(b"ok\xc3")
        assert ctx.exception.code == "invalid-utf-8"
        assert "byte 2" in ctx.exception.message


if __name__ == "__main__":
    unittest.main()
