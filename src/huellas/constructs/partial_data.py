"""Data: everything no other construct claims.

A content type tries its constructs at a marker byte; when all of them fail,
or at a byte that is not a marker, it falls back to data. A data run takes
at least one byte and stops before the next marker, line ending or the end.
Line endings become ``LineEnding`` events of their own.
"""

from __future__ import annotations

from huellas.charsets import LINE_FEED
from huellas.edit_map import EditMap
from huellas.event import Edge
from huellas.tokenizer import Next, StateFn, Tokenizer
from huellas.tokens import TokenType


def start(markers: frozenset[int], after: StateFn) -> StateFn:
    """Tokenize one data run or line ending, then continue with ``after``.

    Args:
        markers: Bytes at which the content type tries constructs
        after: State to return to once the run ends

    Returns:
        State function to call on the current byte
    """

    def inside(tokenizer: Tokenizer) -> Next:
        current = tokenizer.current
        if current is None or current == LINE_FEED or current in markers:
            tokenizer.exit(TokenType.DATA)
            return after(tokenizer)
        tokenizer.consume()
        return inside

    def at_start(tokenizer: Tokenizer) -> Next:
        if tokenizer.current == LINE_FEED:
            tokenizer.enter(TokenType.LINE_ENDING)
            tokenizer.consume()
            tokenizer.exit(TokenType.LINE_ENDING)
            return after

        tokenizer.enter(TokenType.DATA)
        tokenizer.consume()
        return inside

    return at_start


def resolve_data(tokenizer: Tokenizer) -> None:
    """Merge directly adjacent data runs into one."""
    events = tokenizer.events
    edits = EditMap()

    for index in range(len(events) - 1):
        closing, opening = events[index], events[index + 1]
        if (
            closing.edge is Edge.EXIT
            and closing.token_type is TokenType.DATA
            and opening.edge is Edge.ENTER
            and opening.token_type is TokenType.DATA
            and opening.link is None
            and events[index - 1].link is None
        ):
            edits.add(index, 2, [])

    tokenizer.events = edits.consume(events)
