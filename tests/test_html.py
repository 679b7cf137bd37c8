"""End-to-end tests: Markdown in, HTML out."""

from __future__ import annotations

import pytest

from huellas import CompileConfig, to_html
from huellas.renderers.html import IMAGE_PROTOCOLS, LINK_PROTOCOLS, html_escape, sanitize_uri


class TestBlocks:
    """Paragraphs, blank lines and line endings."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("", ""),
            ("a", "<p>a</p>"),
            ("a\n", "<p>a</p>\n"),
            ("a\nb", "<p>a\nb</p>"),
            ("a\n\nb", "<p>a</p>\n<p>b</p>"),
            ("\n\n  \na", "<p>a</p>"),
            ("  a  ", "<p>a</p>"),
            ("a \nb", "<p>a\nb</p>"),
            ("a\r\nb", "<p>a\nb</p>"),
        ],
    )
    def test_paragraphs(self, source: str, expected: str) -> None:
        assert to_html(source) == expected

    def test_html_is_escaped(self) -> None:
        assert to_html("<b> & \"q\" 'x'") == "<p>&lt;b&gt; &amp; &quot;q&quot; 'x'</p>"


class TestInline:
    """Escapes, references and breaks."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("\\*a", "<p>*a</p>"),
            ("\\<", "<p>&lt;</p>"),
            ("\\a", "<p>\\a</p>"),
            ("&amp;", "<p>&amp;</p>"),
            ("&copy;", "<p>©</p>"),
            ("&#35;", "<p>#</p>"),
            ("&#x22;", "<p>&quot;</p>"),
            ("&#0;", "<p>\ufffd</p>"),
            ("&nope;", "<p>&amp;nope;</p>"),
            ("&amp", "<p>&amp;amp</p>"),
        ],
    )
    def test_escapes_and_references(self, source: str, expected: str) -> None:
        assert to_html(source) == expected

    @pytest.mark.parametrize(
        "source",
        ["a\\\nb", "a  \nb", "a     \nb"],
    )
    def test_hard_breaks(self, source: str) -> None:
        assert to_html(source) == "<p>a<br />\nb</p>"

    def test_trailing_tabs_are_not_a_break(self) -> None:
        assert to_html("a\t \t\nb") == "<p>a\nb</p>"

    def test_trailing_break_can_be_disabled(self) -> None:
        from huellas import Constructs, ParseConfig

        config = ParseConfig(constructs=Constructs(hard_break_trailing=False))
        assert to_html("a  \nb", config=config) == "<p>a\nb</p>"

    def test_backslash_at_end_is_literal(self) -> None:
        assert to_html("a\\") == "<p>a\\</p>"


class TestLinks:
    """Resources and references."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("[a](b)", '<p><a href="b">a</a></p>'),
            ("[a](b 'c')", '<p><a href="b" title="c">a</a></p>'),
            ('[a]( b "c" )', '<p><a href="b" title="c">a</a></p>'),
            ("[a](<b c>)", '<p><a href="b%20c">a</a></p>'),
            ("[a](<>)", '<p><a href="">a</a></p>'),
            ("[a]()", '<p><a href="">a</a></p>'),
            ("[a](b(c))", '<p><a href="b(c)">a</a></p>'),
            ("[a](ü)", '<p><a href="%C3%BC">a</a></p>'),
            ("[a](b\\)c)", '<p><a href="b)c">a</a></p>'),
            ("[a](&amp;)", '<p><a href="&amp;">a</a></p>'),
            ('[a](b "&quot;")', '<p><a href="b" title="&quot;">a</a></p>'),
            ("[<](b)", '<p><a href="b">&lt;</a></p>'),
        ],
    )
    def test_resources(self, source: str, expected: str) -> None:
        assert to_html(source) == expected

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("[a", "<p>[a</p>"),
            ("a]", "<p>a]</p>"),
            ("[a](b", "<p>[a](b</p>"),
            ("[a] (b)", "<p>[a] (b)</p>"),
            ("[a](b c)", "<p>[a](b c)</p>"),
            ("[a]", "<p>[a]</p>"),
        ],
    )
    def test_not_links(self, source: str, expected: str) -> None:
        assert to_html(source) == expected

    @pytest.mark.parametrize(
        "source",
        [
            "[a][b]\n\n[b]: /u",
            "[a][]\n\n[a]: /u",
            "[a]\n\n[a]: /u",
            "[a]\n\n[a]:\n/u",
            "[a]\n\n[a]: </u>",
        ],
    )
    def test_references(self, source: str) -> None:
        assert to_html(source) == '<p><a href="/u">a</a></p>\n'

    def test_reference_keeps_source_text(self) -> None:
        """Only the identifier is case folded; the link text is the source."""
        assert to_html("[A]\n\n[a]: /u") == '<p><a href="/u">A</a></p>\n'

    def test_reference_title(self) -> None:
        assert to_html('[a]\n\n[a]: /u "t"') == '<p><a href="/u" title="t">a</a></p>\n'

    def test_title_on_next_line(self) -> None:
        assert to_html("[a]\n\n[a]: /u\n't'") == '<p><a href="/u" title="t">a</a></p>\n'

    def test_first_definition_wins(self) -> None:
        assert to_html("[a]\n\n[a]: /1\n[a]: /2") == '<p><a href="/1">a</a></p>\n'

    def test_definition_before_use(self) -> None:
        assert to_html("[a]: /u\n[a]") == '<p><a href="/u">a</a></p>'

    def test_undefined_full_reference_blocks_shortcut(self) -> None:
        """A shortcut reference cannot be followed by a label, defined or not."""
        assert to_html("[a][x]\n\n[a]: /u") == "<p>[a][x]</p>\n"

    def test_undefined_full_reference_is_text(self) -> None:
        assert to_html("[a][x]") == "<p>[a][x]</p>"

    def test_definition_is_not_rendered(self) -> None:
        assert to_html("[a]: /u") == ""

    def test_links_do_not_nest(self) -> None:
        assert to_html("[a [b](c) d](e)") == '<p>[a <a href="c">b</a> d](e)</p>'

    def test_label_spans_lines(self) -> None:
        assert to_html("[a\nb](c)") == '<p><a href="c">a\nb</a></p>'


class TestImages:
    """Images, alt text and nesting."""

    def test_image(self) -> None:
        assert to_html("![a](b)") == '<p><img src="b" alt="a" /></p>'

    def test_image_title(self) -> None:
        assert to_html("![a](b 'c')") == '<p><img src="b" alt="a" title="c" /></p>'

    def test_image_in_link(self) -> None:
        assert to_html("[![a](b)](c)") == '<p><a href="c"><img src="b" alt="a" /></a></p>'

    def test_link_in_image_alt_is_text(self) -> None:
        assert to_html("![[a](b)](c)") == '<p><img src="c" alt="a" /></p>'

    def test_image_in_image_alt_is_text(self) -> None:
        assert to_html("![![a](b)](c)") == '<p><img src="c" alt="a" /></p>'

    def test_break_in_alt_is_dropped(self) -> None:
        assert to_html("![a\\\nb](c)") == '<p><img src="c" alt="a\nb" /></p>'

    def test_image_reference(self) -> None:
        assert to_html("![a]\n\n[a]: /u") == '<p><img src="/u" alt="a" /></p>\n'

    def test_bang_without_bracket(self) -> None:
        assert to_html("!a") == "<p>!a</p>"


class TestProtocols:
    """Dangerous protocol filtering."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("[a](javascript:alert(1))", '<p><a href="">a</a></p>'),
            ("[a](JAVASCRIPT:x)", '<p><a href="">a</a></p>'),
            ("[a](https://x)", '<p><a href="https://x">a</a></p>'),
            ("[a](mailto:x@y)", '<p><a href="mailto:x@y">a</a></p>'),
            ("[a](/x:y)", '<p><a href="/x:y">a</a></p>'),
            ("[a](?x:y)", '<p><a href="?x:y">a</a></p>'),
            ("![a](irc://x)", '<p><img src="" alt="a" /></p>'),
            ("![a](http://x)", '<p><img src="http://x" alt="a" /></p>'),
        ],
    )
    def test_safe_by_default(self, source: str, expected: str) -> None:
        assert to_html(source) == expected

    def test_allow_dangerous_protocol(self) -> None:
        config = CompileConfig(allow_dangerous_protocol=True)
        assert to_html("[a](javascript:b)", compile_config=config) == '<p><a href="javascript:b">a</a></p>'

    def test_sanitize_uri(self) -> None:
        assert sanitize_uri("a b", LINK_PROTOCOLS) == "a%20b"
        assert sanitize_uri("a&b", LINK_PROTOCOLS) == "a&amp;b"
        assert sanitize_uri("%20", LINK_PROTOCOLS) == "%20"
        assert sanitize_uri("data:x", IMAGE_PROTOCOLS) == ""
        assert sanitize_uri("data:x", None) == "data:x"

    def test_html_escape_keeps_single_quote(self) -> None:
        assert html_escape("<'\">&") == "&lt;'&quot;&gt;&amp;"
