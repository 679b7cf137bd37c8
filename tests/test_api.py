"""Tests for the high-level Huellas API."""

from concurrent.futures import ThreadPoolExecutor


class TestParseFunction:
    """Tests for the parse() function."""

    def test_parse_paragraph(self) -> None:
        """A single line is content wrapping a paragraph."""
        from huellas import TokenType, parse

        events = parse("Hello")
        assert events[0].token_type is TokenType.CONTENT
        assert events[1].token_type is TokenType.PARAGRAPH
        assert events[-1].token_type is TokenType.CONTENT

    def test_parse_empty(self) -> None:
        from huellas import parse

        assert parse("") == []

    def test_offsets_are_bytes(self) -> None:
        """Offsets count UTF-8 bytes, columns count bytes too."""
        from huellas import parse

        events = parse("ü")
        assert events[-1].point.offset == 2
        assert events[-1].point.column == 3


class TestToHtml:
    """Tests for the to_html() function."""

    def test_link(self) -> None:
        from huellas import to_html

        assert to_html("[a](b)") == '<p><a href="b">a</a></p>'

    def test_parse_then_compile(self) -> None:
        from huellas import compile_html, encode, to_html, tokenize

        data = encode("[a]\n\n[a]: /u")
        assert compile_html(tokenize(data), data) == to_html("[a]\n\n[a]: /u")

    def test_html_compiler_class(self) -> None:
        from huellas import HtmlCompiler, encode, tokenize

        data = encode("![a](b)")
        assert HtmlCompiler(tokenize(data), data).compile() == '<p><img src="b" alt="a" /></p>'


class TestMarkdownClass:
    """Tests for the Markdown class."""

    def test_call(self) -> None:
        from huellas import Markdown

        md = Markdown()
        assert md("[a]\n\n[a]: /url") == '<p><a href="/url">a</a></p>\n'

    def test_parse_and_render(self) -> None:
        from huellas import Markdown

        md = Markdown()
        source = "x [a](b 't') y"
        assert md.render(md.parse(source), source) == md(source)

    def test_parse_many(self) -> None:
        from huellas import Markdown

        md = Markdown()
        sources = ["a", "[a](b)", ""]
        assert md.parse_many(sources) == [md.parse(s) for s in sources]

    def test_compile_config(self) -> None:
        from huellas import CompileConfig, Markdown

        md = Markdown(compile_config=CompileConfig(allow_dangerous_protocol=True))
        assert md("[a](javascript:b)") == '<p><a href="javascript:b">a</a></p>'

    def test_config_property(self) -> None:
        from huellas import Constructs, Markdown, ParseConfig

        config = ParseConfig(constructs=Constructs(definition=False))
        md = Markdown(config=config)
        assert md.config is config
        assert md("[a]: b") == "<p>[a]: b</p>"

    def test_shared_between_threads(self) -> None:
        """One processor, many threads, same results."""
        from huellas import Markdown

        md = Markdown()
        sources = [f"[{i}](/{i})\n\n[x{i}]\n\n[x{i}]: /y" for i in range(50)]
        expected = [md(source) for source in sources]
        with ThreadPoolExecutor(max_workers=8) as pool:
            assert list(pool.map(md, sources)) == expected


class TestPublicSurface:
    """Names exported from the package root."""

    def test_all_names_exist(self) -> None:
        import huellas

        for name in huellas.__all__:
            assert hasattr(huellas, name), name

    def test_version(self) -> None:
        import huellas

        assert huellas.__version__ == "0.1.0"
