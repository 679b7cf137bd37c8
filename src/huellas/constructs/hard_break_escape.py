"""Hard break (escape): a backslash right before a line ending.

Grammar::

    hard_break_escape ::= '\\' eol

The line ending itself is left for the text content type to tokenize.
"""

from __future__ import annotations

from huellas.charsets import BACKSLASH, LINE_FEED
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import TokenType


def start(tokenizer: Tokenizer) -> Next:
    """At the backslash."""
    if tokenizer.current != BACKSLASH:
        return State.NOK
    tokenizer.enter(TokenType.HARD_BREAK_ESCAPE)
    tokenizer.consume()
    return after


def after(tokenizer: Tokenizer) -> Next:
    """After the backslash, which must be the last byte of the line."""
    if tokenizer.current != LINE_FEED:
        return State.NOK
    tokenizer.exit(TokenType.HARD_BREAK_ESCAPE)
    return State.OK
