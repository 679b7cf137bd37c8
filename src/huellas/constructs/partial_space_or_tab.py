"""Spaces and tabs, optionally across one line ending.

Grammar::

    space_or_tab ::= 1*( ' ' | '\\t' )
    space_or_tab_eol ::= space_or_tab | [ space_or_tab ] eol [ space_or_tab ]

``space_or_tab_eol`` fails when the line after the line ending is blank,
which is how labels, titles and destinations refuse blank lines.

When a content type is given, the whitespace and line ending become chunks
linked to the surrounding run so they are re-parsed as part of it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from huellas.charsets import LINE_FEED, SPACE_OR_TAB
from huellas.event import link
from huellas.tokenizer import Next, State, StateFn, Tokenizer
from huellas.tokens import ContentType, TokenType


@dataclass(frozen=True, slots=True)
class SpaceOrTabOptions:
    """How a whitespace run is tokenized.

    Attributes:
        minimum: Fewest bytes needed to match
        maximum: Most bytes taken
        token_type: Token for the run
        content_type: Chunk content type, if the run is part of a string
        connect: Whether to link the run to the previous chunk

    """

    minimum: int = 1
    maximum: float = math.inf
    token_type: TokenType = TokenType.SPACE_OR_TAB
    content_type: ContentType | None = None
    connect: bool = False


def space_or_tab(tokenizer: Tokenizer) -> Next:
    """One or more spaces or tabs."""
    return space_or_tab_with_options(SpaceOrTabOptions())(tokenizer)


def space_or_tab_min_max(minimum: int, maximum: float) -> StateFn:
    """Between ``minimum`` and ``maximum`` spaces or tabs."""
    return space_or_tab_with_options(SpaceOrTabOptions(minimum=minimum, maximum=maximum))


def space_or_tab_with_options(options: SpaceOrTabOptions) -> StateFn:
    """Whitespace run with explicit options."""

    def start(tokenizer: Tokenizer) -> Next:
        if tokenizer.current in SPACE_OR_TAB and options.maximum > 0:
            tokenizer.enter(options.token_type, options.content_type)
            if options.content_type is not None and options.connect:
                link(tokenizer.events, len(tokenizer.events) - 1)
            tokenizer.consume()
            return _inside(options, 1)
        return State.OK if options.minimum == 0 else State.NOK

    return start


def _inside(options: SpaceOrTabOptions, size: int) -> StateFn:
    def inside(tokenizer: Tokenizer) -> Next:
        if tokenizer.current in SPACE_OR_TAB and size < options.maximum:
            tokenizer.consume()
            return _inside(options, size + 1)
        tokenizer.exit(options.token_type)
        return State.OK if size >= options.minimum else State.NOK

    return inside


def space_or_tab_eol(tokenizer: Tokenizer) -> Next:
    """Optional whitespace, a line ending, optional whitespace."""
    return space_or_tab_eol_with_options()(tokenizer)


def space_or_tab_eol_with_options(
    content_type: ContentType | None = None, connect: bool = False
) -> StateFn:
    """Whitespace across one line ending, as chunks of ``content_type``.

    Args:
        content_type: Chunk content type, or None for plain whitespace
        connect: Whether the first chunk links to a preceding one
    """

    def start(tokenizer: Tokenizer) -> Next:
        return tokenizer.attempt(
            space_or_tab_with_options(
                SpaceOrTabOptions(content_type=content_type, connect=connect)
            ),
            lambda ok: _before_eol(content_type, connect or (ok and content_type is not None), ok),
        )(tokenizer)

    return start


def _before_eol(content_type: ContentType | None, connect: bool, had_space: bool) -> StateFn:
    def before_eol(tokenizer: Tokenizer) -> Next:
        if tokenizer.current != LINE_FEED:
            return State.OK if had_space else State.NOK
        tokenizer.enter(TokenType.LINE_ENDING, content_type)
        if content_type is not None and connect:
            link(tokenizer.events, len(tokenizer.events) - 1)
        tokenizer.consume()
        tokenizer.exit(TokenType.LINE_ENDING)
        return _after_eol(content_type)

    return before_eol


def _after_eol(content_type: ContentType | None) -> StateFn:
    def after_eol(tokenizer: Tokenizer) -> Next:
        return tokenizer.attempt(
            space_or_tab_with_options(
                SpaceOrTabOptions(content_type=content_type, connect=True)
            ),
            lambda _ok: _after_more_space_or_tab,
        )(tokenizer)

    return after_eol


def _after_more_space_or_tab(tokenizer: Tokenizer) -> Next:
    # A blank line is not allowed here.
    if tokenizer.current is None or tokenizer.current == LINE_FEED:
        return State.NOK
    return State.OK
