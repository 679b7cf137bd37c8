"""Destination: the URL of a definition or resource.

Grammar::

    destination ::= destination_enclosed | destination_raw
    destination_enclosed ::= '<' *( enclosed_byte | enclosed_escape ) '>'
    enclosed_byte ::= byte - eol - '<' - '\\' - '>'
    enclosed_escape ::= '\\' [ '<' | '\\' | '>' ]
    destination_raw ::= 1*( raw_byte | raw_escape )
    ; Restriction: parens must be balanced, at most 32 deep.
    raw_byte ::= byte - ascii_control - ' ' - eol - '\\'
    raw_escape ::= '\\' [ '(' | ')' | '\\' ]

Token roles: ``token_1`` the whole destination, ``token_2`` an enclosed
destination, ``token_3`` its angle brackets, ``token_4`` a raw
destination and ``token_5`` the string inside either. The string is a data
chunk with the string content type. ``tokenize_state.size`` tracks paren
depth in raw destinations.
"""

from __future__ import annotations

from huellas.charsets import (
    ASCII_CONTROL,
    BACKSLASH,
    DESTINATION_ESCAPABLE,
    GREATER_THAN,
    LEFT_PAREN,
    LESS_THAN,
    LINE_FEED,
    RIGHT_PAREN,
    SPACE,
    TAB,
)
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import ContentType, TokenType

_RAW_ESCAPABLE = frozenset((LEFT_PAREN, RIGHT_PAREN, BACKSLASH))


def start(tokenizer: Tokenizer) -> Next:
    """Before a destination.

    ```markdown
    > | <aa>
        ^
    > | aa
        ^
    ```
    """
    current = tokenizer.current
    roles = tokenizer.tokenize_state

    if current == LESS_THAN:
        tokenizer.enter(roles.token_1)
        tokenizer.enter(roles.token_2)
        tokenizer.enter(roles.token_3)
        tokenizer.consume()
        tokenizer.exit(roles.token_3)
        return enclosed_before

    if current is None or current in (SPACE, RIGHT_PAREN) or current in ASCII_CONTROL:
        return State.NOK

    tokenizer.enter(roles.token_1)
    tokenizer.enter(roles.token_4)
    tokenizer.enter(roles.token_5)
    tokenizer.enter(TokenType.DATA, ContentType.STRING)
    return raw(tokenizer)


def enclosed_before(tokenizer: Tokenizer) -> Next:
    """After ``<``, at ``>`` or content."""
    roles = tokenizer.tokenize_state
    if tokenizer.current == GREATER_THAN:
        tokenizer.enter(roles.token_3)
        tokenizer.consume()
        tokenizer.exit(roles.token_3)
        tokenizer.exit(roles.token_2)
        tokenizer.exit(roles.token_1)
        return State.OK

    tokenizer.enter(roles.token_5)
    tokenizer.enter(TokenType.DATA, ContentType.STRING)
    return enclosed(tokenizer)


def enclosed(tokenizer: Tokenizer) -> Next:
    """In an enclosed destination."""
    current = tokenizer.current
    if current == GREATER_THAN:
        tokenizer.exit(TokenType.DATA)
        tokenizer.exit(tokenizer.tokenize_state.token_5)
        return enclosed_before(tokenizer)
    if current is None or current in (LINE_FEED, LESS_THAN):
        return State.NOK

    tokenizer.consume()
    return enclosed_escape if current == BACKSLASH else enclosed


def enclosed_escape(tokenizer: Tokenizer) -> Next:
    """After ``\\`` in an enclosed destination."""
    if tokenizer.current in DESTINATION_ESCAPABLE:
        tokenizer.consume()
        return enclosed
    return enclosed(tokenizer)


def raw(tokenizer: Tokenizer) -> Next:
    """In a raw destination."""
    scratch = tokenizer.tokenize_state
    current = tokenizer.current

    if scratch.size == 0 and (
        current is None or current in (SPACE, TAB, LINE_FEED, RIGHT_PAREN)
    ):
        tokenizer.exit(TokenType.DATA)
        tokenizer.exit(scratch.token_5)
        tokenizer.exit(scratch.token_4)
        tokenizer.exit(scratch.token_1)
        return State.OK

    if current == LEFT_PAREN and scratch.size < tokenizer.parse_state.config.resource_destination_balance_max:
        tokenizer.consume()
        scratch.size += 1
        return raw

    if current == RIGHT_PAREN:
        tokenizer.consume()
        scratch.size -= 1
        return raw

    if current is None or current == SPACE or current in ASCII_CONTROL or current == LEFT_PAREN:
        scratch.size = 0
        return State.NOK

    tokenizer.consume()
    return raw_escape if current == BACKSLASH else raw


def raw_escape(tokenizer: Tokenizer) -> Next:
    """After ``\\`` in a raw destination."""
    if tokenizer.current in _RAW_ESCAPABLE:
        tokenizer.consume()
        return raw
    return raw(tokenizer)
