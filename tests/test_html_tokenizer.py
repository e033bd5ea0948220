"""Tests for the permissive HTML tokenizer."""

import unittest

from turbotools import MalformedInput
from turbotools.html_tokenizer import TokenizerOpts, tokenize_html
from turbotools.tokens import Comment, Declaration, RawBlock, TagClose, TagOpen, Text


class TestHtmlTags(unittest.TestCase):
    def test_element_with_attributes(self):
        tokens = tokenize_html('<div class="a" id=b hidden>x</div>')
        assert tokens == [
            TagOpen("div", [("class", "a"), ("id", "b"), ("hidden", None)]),
            Text("x"),
            TagClose("div"),
        ]

    def test_single_quoted_and_empty_values(self):
        tokens = tokenize_html("<a title='say \"hi\"' data-x=\"\">")
        assert tokens == [TagOpen("a", [("title", 'say "hi"'), ("data-x", "")])]

    def test_missing_value_before_close(self):
        assert tokenize_html("<input value=>") == [TagOpen("input", [("value", "")])]

    def test_attribute_values_are_not_decoded(self):
        tokens = tokenize_html('<a href="?a=1&amp;b=2">')
        assert tokens[0].attrs == [("href", "?a=1&amp;b=2")]

    def test_self_closing(self):
        assert tokenize_html("<br/>") == [TagOpen("br", [], True)]
        assert tokenize_html('<img src="x" />') == [TagOpen("img", [("src", "x")], True)]

    def test_whitespace_around_equals(self):
        tokens = tokenize_html('<p  class = "x"\n>')
        assert tokens == [TagOpen("p", [("class", "x")])]

    def test_end_tag_junk_is_ignored(self):
        assert tokenize_html("</div foo>") == [TagClose("div")]

    def test_source_casing_is_kept(self):
        tokens = tokenize_html('<DIV Class="x"></Div>')
        assert tokens == [TagOpen("DIV", [("Class", "x")]), TagClose("Div")]

    def test_unmatched_tags_are_tokenized(self):
        assert tokenize_html("</p><b>") == [TagClose("p"), TagOpen("b")]


class TestHtmlText(unittest.TestCase):
    def test_text_is_kept_verbatim(self):
        assert tokenize_html("  a\n b  ") == [Text("  a\n b  ")]

    def test_less_than_that_is_not_markup(self):
        assert tokenize_html("a < b") == [Text("a < b")]
        assert tokenize_html("1 </ 2") == [Text("1 </ 2")]
        assert tokenize_html("x <3 y") == [Text("x <3 y")]

    def test_lone_less_than_at_end(self):
        assert tokenize_html("a <") == [Text("a <")]
        assert tokenize_html("a </") == [Text("a </")]

    def test_entities_are_not_decoded(self):
        assert tokenize_html("&lt;&amp;") == [Text("&lt;&amp;")]

    def test_empty_input(self):
        assert tokenize_html("") == []

    def test_bom_is_discarded(self):
        assert tokenize_html("\ufeffhi") == [Text("hi")]
        assert tokenize_html("\ufeffhi", TokenizerOpts(discard_bom=False)) == [Text("\ufeffhi")]

    def test_bytes_input(self):
        assert tokenize_html("<p>é</p>".encode()) == [TagOpen("p"), Text("é"), TagClose("p")]


class TestHtmlMarkupDeclarations(unittest.TestCase):
    def test_comment(self):
        assert tokenize_html("a<!-- hi -->b") == [Text("a"), Comment(" hi "), Text("b")]

    def test_empty_comment(self):
        assert tokenize_html("<!---->") == [Comment("")]

    def test_doctype(self):
        assert tokenize_html("<!DOCTYPE html><html>") == [Declaration("!DOCTYPE html"), TagOpen("html")]

    def test_lowercase_doctype(self):
        assert tokenize_html("<!doctype html>") == [Declaration("!doctype html")]

    def test_cdata_is_a_bogus_comment(self):
        assert tokenize_html("<![CDATA[a<b>]]>") == [Comment("[CDATA[a<b"), Text("]]>")]

    def test_processing_instruction_is_a_bogus_comment(self):
        assert tokenize_html('<?xml version="1.0"?>') == [Comment('?xml version="1.0"?')]

    def test_bogus_comment_ends_at_first_gt(self):
        assert tokenize_html("<!x <!-- y>z") == [Comment("x <!-- y"), Text("z")]
        assert tokenize_html("<!>") == [Comment("")]

    def test_doctype_holding_lt_is_a_bogus_comment(self):
        assert tokenize_html("<!DOCTYPE <!-- x>") == [Comment("DOCTYPE <!-- x")]


class TestHtmlStrayLessThanInTags(unittest.TestCase):
    def test_lt_ends_tag_name(self):
        assert tokenize_html("<a<!--b>") == [TagOpen("a", [("!--b", None)])]

    def test_lt_ends_attribute_name(self):
        assert tokenize_html('<a x<y="1">') == [TagOpen("a", [("x", None), ("y", "1")])]

    def test_lt_before_attribute_is_dropped(self):
        assert tokenize_html("<a <b>") == [TagOpen("a", [("b", None)])]

    def test_lt_ends_end_tag_name(self):
        assert tokenize_html("</a<!--x>") == [TagClose("a")]


class TestHtmlRawBlocks(unittest.TestCase):
    def test_script_content_is_not_tokenized(self):
        html = '<script>if (a < b) { x = "</div><!-- y -->"; }</script>'
        assert tokenize_html(html) == [
            TagOpen("script"),
            RawBlock("script", 'if (a < b) { x = "</div><!-- y -->"; }'),
            TagClose("script"),
        ]

    def test_raw_end_tag_is_case_insensitive(self):
        tokens = tokenize_html("<SCRIPT>a</Script >")
        assert tokens == [TagOpen("SCRIPT"), RawBlock("SCRIPT", "a"), TagClose("Script")]

    def test_empty_raw_block(self):
        assert tokenize_html("<style></style>") == [TagOpen("style"), RawBlock("style", ""), TagClose("style")]

    def test_pre_keeps_whitespace(self):
        tokens = tokenize_html("<pre>  a\n  <b>b</b></pre>")
        assert tokens[1] == RawBlock("pre", "  a\n  <b>b</b>")

    def test_self_closing_raw_element_has_no_block(self):
        assert tokenize_html("<script/>x") == [TagOpen("script", [], True), Text("x")]

    def test_raw_elements_can_be_narrowed(self):
        opts = TokenizerOpts(raw_text_elements=())
        tokens = tokenize_html("<pre><b>x</b></pre>", opts)
        assert tokens == [TagOpen("pre"), TagOpen("b"), Text("x"), TagClose("b"), TagClose("pre")]

    def test_script_and_style_stay_raw(self):
        opts = TokenizerOpts(raw_text_elements=())
        assert tokenize_html("<script><b></script>", opts)[1] == RawBlock("script", "<b>")


class TestHtmlMalformedInput(unittest.TestCase):
    def assert_malformed(self, html, code):
        with self.assertRaises(MalformedInput) as ctx:
            tokenize_html(html)
        assert ctx.exception.code == code, ctx.exception
        return ctx.exception

    def test_truncated_tags(self):
        for html in ("<div", "<div class='x", '<a href="', "<a b", "<a b=", "<br /", "</div", "<p x=y"):
            with self.subTest(html=html):
                self.assert_malformed(html, "eof-in-tag")

    def test_unterminated_comment(self):
        self.assert_malformed("<!-- x", "eof-in-comment")
        self.assert_malformed("<!-- x --", "eof-in-comment")

    def test_unterminated_declarations(self):
        self.assert_malformed("<!DOCTYPE html", "eof-in-declaration")
        self.assert_malformed("<!doctype", "eof-in-declaration")

    def test_unterminated_bogus_comments(self):
        self.assert_malformed("<![CDATA[x", "eof-in-comment")
        self.assert_malformed("<?xml", "eof-in-comment")
        self.assert_malformed("<!x", "eof-in-comment")
        self.assert_malformed("<!", "eof-in-comment")

    def test_unclosed_raw_block(self):
        self.assert_malformed("<script>var a;", "eof-in-raw-block")
        self.assert_malformed("<style>a{}</styl", "eof-in-raw-block")

    def test_error_position_is_tag_start(self):
        error = self.assert_malformed("<p>ok</p>\n  <div class='x", "eof-in-tag")
        assert (error.line, error.column) == (2, 3)


if __name__ == "__main__":
    unittest.main()
