"""Title: the optional quoted text after a destination.

Grammar::

    title ::= '"' *( byte - '"' | escape ) '"'
            | "'" *( byte - "'" | escape ) "'"
            | '(' *( byte - '(' - ')' | escape ) ')'
    ; Restriction: no blank lines.

Token roles: ``token_1`` the whole title, ``token_2`` its markers and
``token_3`` the string between them. ``tokenize_state.marker`` holds the
closing marker; the content is made of linked string chunks, like a label.
"""

from __future__ import annotations

from huellas.charsets import BACKSLASH, LEFT_PAREN, LINE_FEED, RIGHT_PAREN, TITLE_MARKERS
from huellas.constructs.partial_space_or_tab import space_or_tab_eol_with_options
from huellas.event import link
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import ContentType, TokenType


def start(tokenizer: Tokenizer) -> Next:
    """Before a title.

    ```markdown
    > | "a"
        ^
    ```
    """
    marker = TITLE_MARKERS.get(tokenizer.current) if tokenizer.current is not None else None
    if marker is None:
        return State.NOK

    roles = tokenizer.tokenize_state
    roles.marker = marker
    tokenizer.enter(roles.token_1)
    tokenizer.enter(roles.token_2)
    tokenizer.consume()
    tokenizer.exit(roles.token_2)
    return begin


def begin(tokenizer: Tokenizer) -> Next:
    """After the opening marker, or after the string, at the closing marker."""
    scratch = tokenizer.tokenize_state
    if tokenizer.current == scratch.marker:
        tokenizer.enter(scratch.token_2)
        tokenizer.consume()
        tokenizer.exit(scratch.token_2)
        tokenizer.exit(scratch.token_1)
        scratch.marker = 0
        scratch.connect = False
        return State.OK

    tokenizer.enter(scratch.token_3)
    return at_break(tokenizer)


def at_break(tokenizer: Tokenizer) -> Next:
    """In the title string, at something."""
    scratch = tokenizer.tokenize_state
    current = tokenizer.current

    if current == scratch.marker:
        tokenizer.exit(scratch.token_3)
        return begin(tokenizer)

    if current is None or (scratch.marker == RIGHT_PAREN and current == LEFT_PAREN):
        return _nok(tokenizer)

    if current == LINE_FEED:
        return tokenizer.attempt(
            space_or_tab_eol_with_options(ContentType.STRING, scratch.connect),
            lambda ok: after_eol if ok else at_blank_line,
        )(tokenizer)

    tokenizer.enter(TokenType.DATA, ContentType.STRING)
    if scratch.connect:
        link(tokenizer.events, len(tokenizer.events) - 1)
    else:
        scratch.connect = True
    return inside(tokenizer)


def after_eol(tokenizer: Tokenizer) -> Next:
    """After a line ending in the title."""
    tokenizer.tokenize_state.connect = True
    return at_break(tokenizer)


def at_blank_line(tokenizer: Tokenizer) -> Next:
    """At a line ending followed by a blank line."""
    return _nok(tokenizer)


def inside(tokenizer: Tokenizer) -> Next:
    """In title text."""
    scratch = tokenizer.tokenize_state
    current = tokenizer.current

    if (
        current is None
        or current == LINE_FEED
        or current == scratch.marker
        or (scratch.marker == RIGHT_PAREN and current == LEFT_PAREN)
    ):
        tokenizer.exit(TokenType.DATA)
        return at_break(tokenizer)

    tokenizer.consume()
    return escape if current == BACKSLASH else inside


def escape(tokenizer: Tokenizer) -> Next:
    """After ``\\`` in a title."""
    current = tokenizer.current
    marker = tokenizer.tokenize_state.marker
    if current in (marker, BACKSLASH) or (marker == RIGHT_PAREN and current == LEFT_PAREN):
        tokenizer.consume()
        return inside
    return inside(tokenizer)


def _nok(tokenizer: Tokenizer) -> State:
    tokenizer.tokenize_state.marker = 0
    tokenizer.tokenize_state.connect = False
    return State.NOK
