"""
Huellas — Event-stream Markdown tokenizer for Python

Parses Markdown into a flat list of Enter/Exit events with absolute byte
offsets, using a backtracking, continuation-passing tokenizer. Zero runtime
dependencies.

Quick Start:
    >>> from huellas import parse, to_html
    >>> events = parse("[a](b)")
    >>> to_html("[a](b)")
    '<p><a href="b">a</a></p>'

    >>> # Or use the high-level Markdown class
    >>> from huellas import Markdown
    >>> md = Markdown()
    >>> md("[a]\\n\\n[a]: /url")
    '<p><a href="/url">a</a></p>\\n'

Configuration:
    >>> from huellas import Constructs, ParseConfig
    >>> to_html("[a](b)", config=ParseConfig(constructs=Constructs(label_end=False)))
    '<p>[a](b)</p>'
"""

from collections.abc import Iterable

from huellas.config import (
    CompileConfig,
    Constructs,
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from huellas.errors import ContractError, HuellasError
from huellas.event import Edge, Event, Link
from huellas.location import Point
from huellas.parser import ParseState, encode, parse, tokenize
from huellas.renderers.html import HtmlCompiler, compile_html
from huellas.serialization import format_events, from_dict, from_json, to_dict, to_json
from huellas.tokenizer import Checkpoint, State, TokenizeState, Tokenizer
from huellas.tokens import ContentType, TokenType

__version__ = "0.1.0"


def to_html(
    source: str,
    *,
    config: ParseConfig | None = None,
    compile_config: CompileConfig | None = None,
) -> str:
    """Parse Markdown and compile it to HTML.

    Args:
        source: Markdown source text
        config: Parse configuration (defaults to the context's)
        compile_config: Compile configuration (safe protocols only by default)

    Returns:
        HTML string

    Example:
        >>> to_html("[a")
        '<p>[a</p>'
    """
    data = encode(source)
    return compile_html(tokenize(data, config), data, compile_config)


class Markdown:
    """High-level Markdown processor holding parse and compile settings.

    Usage:
        >>> md = Markdown(compile_config=CompileConfig(allow_dangerous_protocol=True))
        >>> md("[a](javascript:b)")
        '<p><a href="javascript:b">a</a></p>'

        >>> # Access the events
        >>> events = md.parse("a")
        >>> events[0].token_type
        <TokenType.CONTENT: 5>

    Thread Safety:
        Holds only immutable configuration. Safe to share between threads.

    """

    __slots__ = ("_config", "_compile_config")

    def __init__(
        self,
        *,
        config: ParseConfig | None = None,
        compile_config: CompileConfig | None = None,
    ) -> None:
        """Initialize Markdown processor.

        Args:
            config: Parse configuration (defaults to the context's at creation)
            compile_config: Compile configuration
        """
        self._config = config if config is not None else get_parse_config()
        self._compile_config = compile_config if compile_config is not None else CompileConfig()

    @property
    def config(self) -> ParseConfig:
        """Parse configuration used by this processor."""
        return self._config

    def __call__(self, source: str) -> str:
        """Parse and compile Markdown in one call."""
        return to_html(source, config=self._config, compile_config=self._compile_config)

    def parse(self, source: str) -> list[Event]:
        """Parse Markdown source into events."""
        return parse(source, config=self._config)

    def parse_many(self, sources: Iterable[str]) -> list[list[Event]]:
        """Parse several documents with the same configuration.

        Args:
            sources: Markdown source texts

        Returns:
            One event list per source, in order
        """
        return [self.parse(source) for source in sources]

    def render(self, events: list[Event], source: str) -> str:
        """Compile events produced by ``parse(source)`` to HTML.

        Args:
            events: Events from ``self.parse(source)``
            source: The same source text

        Returns:
            HTML string
        """
        return compile_html(events, encode(source), self._compile_config)


__all__ = [
    "Checkpoint",
    "CompileConfig",
    "Constructs",
    "ContentType",
    "ContractError",
    "Edge",
    "Event",
    "HtmlCompiler",
    "HuellasError",
    "Link",
    "Markdown",
    "ParseConfig",
    "ParseState",
    "Point",
    "State",
    "TokenType",
    "TokenizeState",
    "Tokenizer",
    "compile_html",
    "encode",
    "format_events",
    "from_dict",
    "from_json",
    "get_parse_config",
    "parse",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
    "to_dict",
    "to_html",
    "to_json",
    "tokenize",
]
