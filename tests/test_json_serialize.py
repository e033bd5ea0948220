"""Tests for JSON minify/pretty-print serialization."""

import json
import unittest

from turbotools import FormatOpts, Mode, UnbalancedStructure
from turbotools.json_serialize import serialize_json
from turbotools.json_tokenizer import tokenize_json
from turbotools.pipeline import minify_json, unminify_json
from turbotools.tokens import JsonToken

SAMPLES = [
    '{"a":1,"b":[2,3]}',
    "[]",
    "{}",
    '"just a string"',
    "-12.5e-3",
    "true",
    '{"nested":{"deeper":{"deepest":[[],{},[null,false]]}},"unicode":"\\u00e9 é","esc":"a\\"b"}',
    '[{"id":1,"tags":["x","y"]},{"id":2,"tags":[]}]',
]


class TestJsonCompact(unittest.TestCase):
    def test_minified_input_is_unchanged(self):
        assert minify_json('{"a":1,"b":[2,3]}') == '{"a":1,"b":[2,3]}'

    def test_whitespace_is_removed(self):
        text = '{\n  "a" : 1 ,\n  "b" : [ 2 , 3 ]\n}\n'
        assert minify_json(text) == '{"a":1,"b":[2,3]}'

    def test_whitespace_inside_strings_is_kept(self):
        assert minify_json('[ "a  b" , " " ]') == '["a  b"," "]'

    def test_raw_text_is_byte_preserving(self):
        text = '[1.0, 1E+2, "\\u0041\\/", -0]'
        assert minify_json(text) == '[1.0,1E+2,"\\u0041\\/",-0]'

    def test_minify_is_idempotent(self):
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                once = minify_json(sample)
                assert minify_json(once) == once


class TestJsonPretty(unittest.TestCase):
    def test_concrete_scenario(self):
        expected = '{\n  "a": 1,\n  "b": [\n    2,\n    3\n  ]\n}'
        assert unminify_json('{"a":1,"b":[2,3]}') == expected

    def test_empty_containers_stay_inline(self):
        assert unminify_json("[]") == "[]"
        assert unminify_json('{"a":{},"b":[ ]}') == '{\n  "a": {},\n  "b": []\n}'

    def test_scalar_top_level(self):
        assert unminify_json(" 42 ") == "42"

    def test_custom_indent(self):
        opts = FormatOpts(indent_size=4)
        assert unminify_json("[1,[2]]", opts) == "[\n    1,\n    [\n        2\n    ]\n]"

    def test_tab_indent(self):
        opts = FormatOpts(indent_size=1, indent_char="\t")
        assert unminify_json('{"a":[1]}', opts) == '{\n\t"a": [\n\t\t1\n\t]\n}'

    def test_zero_indent_still_breaks_lines(self):
        assert unminify_json("[1,2]", FormatOpts(indent_size=0)) == "[\n1,\n2\n]"

    def test_pretty_is_idempotent(self):
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                once = unminify_json(sample)
                assert unminify_json(once) == once

    def test_matches_stdlib_layout(self):
        sample = '{"a":[1,2,{"b":null}],"c":"d","e":{}}'
        assert unminify_json(sample) == json.dumps(json.loads(sample), indent=2)


class TestJsonRoundTrip(unittest.TestCase):
    def test_minify_of_pretty_equals_minify(self):
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                assert minify_json(unminify_json(sample)) == minify_json(sample)

    def test_pretty_of_minify_keeps_value(self):
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                assert json.loads(unminify_json(minify_json(sample))) == json.loads(sample)


class TestJsonUnbalancedStructure(unittest.TestCase):
    """Hand-built streams: the tokenizer never produces these."""

    def test_end_without_start(self):
        tokens = [JsonToken(JsonToken.ARRAY_END)]
        for mode in Mode:
            with self.subTest(mode=mode):
                with self.assertRaises(UnbalancedStructure):
                    serialize_json(tokens, mode)

    def test_mismatched_end(self):
        tokens = [JsonToken(JsonToken.OBJECT_START), JsonToken(JsonToken.ARRAY_END)]
        for mode in Mode:
            with self.subTest(mode=mode):
                with self.assertRaises(UnbalancedStructure) as ctx:
                    serialize_json(tokens, mode)
                assert ctx.exception.code == "unbalanced-structure"

    def test_unknown_token_kind(self):
        streams = (
            [JsonToken(99)],
            [JsonToken(JsonToken.ARRAY_START), JsonToken(-1), JsonToken(JsonToken.ARRAY_END)],
        )
        for tokens in streams:
            for mode in Mode:
                with self.subTest(tokens=tokens, mode=mode):
                    with self.assertRaises(UnbalancedStructure) as ctx:
                        serialize_json(tokens, mode)
                    assert ctx.exception.code == "unknown-token"

    def test_unclosed_at_end(self):
        tokens = tokenize_json('{"a":[1]}')[:-1]
        for mode in Mode:
            with self.subTest(mode=mode):
                with self.assertRaises(UnbalancedStructure):
                    serialize_json(tokens, mode)

    def test_default_mode_is_compact(self):
        assert serialize_json(tokenize_json("[ 1 ]")) == "[1]"


if __name__ == "__main__":
    unittest.main()
