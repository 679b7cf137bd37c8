"""Content content type: definitions, then a paragraph.

A content block is the run of non-blank lines flow found. Definitions are
tried at the start of each line until one fails; everything from there on
is one paragraph whose lines are linked text chunks.
"""

from __future__ import annotations

from huellas.charsets import LINE_FEED
from huellas.constructs import definition
from huellas.event import link
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import ContentType, TokenType


def start(tokenizer: Tokenizer) -> Next:
    """At the start of a content line."""
    if tokenizer.current is None:
        return State.OK
    if tokenizer.parse_state.config.constructs.definition:
        return tokenizer.attempt(
            definition.start, lambda ok: definition_after if ok else paragraph_start
        )(tokenizer)
    return paragraph_start(tokenizer)


def definition_after(tokenizer: Tokenizer) -> Next:
    """After a definition, at the end of its line."""
    if tokenizer.current is None:
        return State.OK
    tokenizer.enter(TokenType.LINE_ENDING)
    tokenizer.consume()
    tokenizer.exit(TokenType.LINE_ENDING)
    return start


def paragraph_start(tokenizer: Tokenizer) -> Next:
    """At the first line of the paragraph."""
    tokenizer.enter(TokenType.PARAGRAPH)
    tokenizer.enter(TokenType.CHUNK_TEXT, ContentType.TEXT)
    return paragraph_inside(tokenizer)


def paragraph_inside(tokenizer: Tokenizer) -> Next:
    """In a paragraph line."""
    current = tokenizer.current
    if current is None:
        tokenizer.exit(TokenType.CHUNK_TEXT)
        tokenizer.exit(TokenType.PARAGRAPH)
        return State.OK

    tokenizer.consume()
    if current == LINE_FEED:
        # Content never ends in a line ending, so another line follows.
        tokenizer.exit(TokenType.CHUNK_TEXT)
        tokenizer.enter(TokenType.CHUNK_TEXT, ContentType.TEXT)
        link(tokenizer.events, len(tokenizer.events) - 1)
    return paragraph_inside
