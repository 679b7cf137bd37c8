"""Document parsing: flow tokenization plus subtokenize passes.

Pipeline:
1. Normalize line endings and encode to UTF-8 bytes
2. Tokenize the whole document with the flow content type
3. Repeat subtokenize passes until no chunk is left, collecting definition
   identifiers after each pass so text parsed later can resolve references

Thread Safety:
- ParseState is created per document and never shared
- Configuration is passed in explicitly or read from ContextVar (thread-local)
- The returned events are owned by the caller

"""

from __future__ import annotations

from dataclasses import dataclass, field

from huellas.config import ParseConfig, get_parse_config
from huellas.content import flow
from huellas.event import Edge, Event
from huellas.subtokenize import subtokenize
from huellas.tokenizer import Tokenizer
from huellas.tokens import TokenType
from huellas.utils.logger import get_logger
from huellas.utils.text import normalize_identifier, normalize_line_endings

logger = get_logger(__name__)


@dataclass(slots=True)
class ParseState:
    """Per-document state shared by every tokenizer of one parse.

    Attributes:
        bytes: Normalized UTF-8 input
        config: Active parse configuration
        definitions: Normalized identifiers of all definitions seen so far

    """

    bytes: bytes
    config: ParseConfig
    definitions: set[str] = field(default_factory=set)


def encode(source: str) -> bytes:
    """Normalize line endings and encode ``source`` for tokenizing."""
    return normalize_line_endings(source).encode("utf-8")


def tokenize(data: bytes, config: ParseConfig | None = None) -> list[Event]:
    """Turn normalized bytes into a fully subtokenized event list.

    Args:
        data: Input as produced by ``encode``
        config: Parse configuration (defaults to the context's)

    Returns:
        Flat list of Enter/Exit events

    Raises:
        ContractError: On an internal construct defect; never for input.
    """
    parse_state = ParseState(data, config if config is not None else get_parse_config())

    tokenizer = Tokenizer(parse_state)
    tokenizer.run(flow.start)
    events = tokenizer.flush()
    logger.debug("Flow produced %d events for %d bytes", len(events), len(data))

    passes = 0
    done = False
    while not done:
        events, done = subtokenize(events, parse_state)
        if not done:
            passes += 1
            _collect_definitions(events, parse_state)
    logger.debug(
        "Parsed in %d subtokenize pass(es), %d definition(s)",
        passes,
        len(parse_state.definitions),
    )
    return events


def parse(source: str, *, config: ParseConfig | None = None) -> list[Event]:
    """Parse Markdown source into events.

    Args:
        source: Markdown text
        config: Parse configuration (defaults to the context's)

    Returns:
        Flat list of Enter/Exit events with absolute byte offsets into
        ``encode(source)``

    Example:
        >>> events = parse("[a](b)")
        >>> events[0].token_type
        <TokenType.CONTENT: 5>
    """
    return tokenize(encode(source), config)


def _collect_definitions(events: list[Event], parse_state: ParseState) -> None:
    start = None
    for event in events:
        if event.token_type is not TokenType.DEFINITION_LABEL_STRING:
            continue
        if event.edge is Edge.ENTER:
            start = event.point.offset
        elif start is not None:
            raw = parse_state.bytes[start : event.point.offset].decode("utf-8")
            parse_state.definitions.add(normalize_identifier(raw))
            start = None
