"""Flow content type: the document as a sequence of blocks.

Without containers, headings or code, a document is blank lines and
content blocks. A content block is a run of non-blank lines; each line is
a ``ChunkContent`` chunk (with its line ending, except the last) linked to
the next, so the content grammar sees the block as one stream.
"""

from __future__ import annotations

from huellas.charsets import LINE_FEED
from huellas.constructs import blank_line
from huellas.constructs.partial_space_or_tab import space_or_tab
from huellas.event import link
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import ContentType, TokenType


def start(tokenizer: Tokenizer) -> Next:
    """At the start of a line."""
    if tokenizer.current is None:
        return State.OK
    return tokenizer.check(
        blank_line.start, lambda blank: blank_line_before if blank else before_content
    )(tokenizer)


def blank_line_before(tokenizer: Tokenizer) -> Next:
    """At a blank line."""
    return tokenizer.attempt(space_or_tab, lambda _ok: blank_line_after)(tokenizer)


def blank_line_after(tokenizer: Tokenizer) -> Next:
    """After the whitespace of a blank line."""
    if tokenizer.current is None:
        return State.OK
    tokenizer.enter(TokenType.BLANK_LINE_ENDING)
    tokenizer.consume()
    tokenizer.exit(TokenType.BLANK_LINE_ENDING)
    return start


def before_content(tokenizer: Tokenizer) -> Next:
    """At a non-blank line, before its indent."""
    return tokenizer.attempt(space_or_tab, lambda _ok: content_start)(tokenizer)


def content_start(tokenizer: Tokenizer) -> Next:
    """At the first byte of a content block."""
    tokenizer.enter(TokenType.CONTENT)
    tokenizer.enter(TokenType.CHUNK_CONTENT, ContentType.CONTENT)
    return content_inside(tokenizer)


def content_inside(tokenizer: Tokenizer) -> Next:
    """In a content line."""
    current = tokenizer.current
    if current is None:
        tokenizer.exit(TokenType.CHUNK_CONTENT)
        tokenizer.exit(TokenType.CONTENT)
        return State.OK
    if current == LINE_FEED:
        return tokenizer.check(
            continuation, lambda more: content_continue if more else content_end
        )(tokenizer)
    tokenizer.consume()
    return content_inside


def content_continue(tokenizer: Tokenizer) -> Next:
    """At a line ending inside a content block."""
    tokenizer.consume()
    tokenizer.exit(TokenType.CHUNK_CONTENT)
    tokenizer.enter(TokenType.CHUNK_CONTENT, ContentType.CONTENT)
    link(tokenizer.events, len(tokenizer.events) - 1)
    return content_inside


def content_end(tokenizer: Tokenizer) -> Next:
    """At the line ending that ends a content block."""
    tokenizer.exit(TokenType.CHUNK_CONTENT)
    tokenizer.exit(TokenType.CONTENT)
    tokenizer.enter(TokenType.LINE_ENDING)
    tokenizer.consume()
    tokenizer.exit(TokenType.LINE_ENDING)
    return start


def continuation(tokenizer: Tokenizer) -> Next:
    """Lookahead: whether the line after this line ending continues the block."""
    tokenizer.consume()
    return continuation_after


def continuation_after(tokenizer: Tokenizer) -> Next:
    if tokenizer.current is None:
        return State.NOK
    return tokenizer.check(
        blank_line.start, lambda blank: State.NOK if blank else State.OK
    )(tokenizer)
