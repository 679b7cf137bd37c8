"""Character reference: named, decimal or hexadecimal.

Grammar::

    character_reference ::= '&' ( named | '#' decimal | '#' ( 'x' | 'X' ) hexadecimal ) ';'
    named ::= 1*31 ascii_alphanumeric  ; must be a known HTML entity name
    decimal ::= 1*7 ascii_digit
    hexadecimal ::= 1*6 ascii_hexdigit

``tokenize_state.marker`` holds the kind being parsed (``&``, ``#`` or
``x``) and ``tokenize_state.size`` counts value bytes.
"""

from __future__ import annotations

from html.entities import html5

from huellas.charsets import (
    AMPERSAND,
    ASCII_ALPHANUMERIC,
    ASCII_DIGITS,
    ASCII_HEX_DIGITS,
    CHARACTER_REFERENCE_DECIMAL_SIZE_MAX,
    CHARACTER_REFERENCE_HEXADECIMAL_SIZE_MAX,
    CHARACTER_REFERENCE_NAMED_SIZE_MAX,
    NUMBER_SIGN,
    SEMICOLON,
)
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import TokenType

_HEX_MARKER = ord("x")

_LIMITS: dict[int, tuple[frozenset[int], int]] = {
    AMPERSAND: (ASCII_ALPHANUMERIC, CHARACTER_REFERENCE_NAMED_SIZE_MAX),
    NUMBER_SIGN: (ASCII_DIGITS, CHARACTER_REFERENCE_DECIMAL_SIZE_MAX),
    _HEX_MARKER: (ASCII_HEX_DIGITS, CHARACTER_REFERENCE_HEXADECIMAL_SIZE_MAX),
}


def start(tokenizer: Tokenizer) -> Next:
    """Start of a character reference.

    ```markdown
    > | a&amp;b
         ^
    ```
    """
    if tokenizer.current != AMPERSAND:
        return State.NOK
    tokenizer.enter(TokenType.CHARACTER_REFERENCE)
    tokenizer.enter(TokenType.CHARACTER_REFERENCE_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.CHARACTER_REFERENCE_MARKER)
    return after_marker


def after_marker(tokenizer: Tokenizer) -> Next:
    """After ``&``, at ``#`` for numeric references or at a name."""
    if tokenizer.current == NUMBER_SIGN:
        tokenizer.enter(TokenType.CHARACTER_REFERENCE_MARKER_NUMERIC)
        tokenizer.consume()
        tokenizer.exit(TokenType.CHARACTER_REFERENCE_MARKER_NUMERIC)
        return numeric

    tokenizer.tokenize_state.marker = AMPERSAND
    tokenizer.enter(TokenType.CHARACTER_REFERENCE_VALUE)
    return value(tokenizer)


def numeric(tokenizer: Tokenizer) -> Next:
    """After ``#``, at ``x`` for hexadecimal or at a digit."""
    if tokenizer.current in (ord("x"), ord("X")):
        tokenizer.enter(TokenType.CHARACTER_REFERENCE_MARKER_HEXADECIMAL)
        tokenizer.consume()
        tokenizer.exit(TokenType.CHARACTER_REFERENCE_MARKER_HEXADECIMAL)
        tokenizer.enter(TokenType.CHARACTER_REFERENCE_VALUE)
        tokenizer.tokenize_state.marker = _HEX_MARKER
        return value

    tokenizer.enter(TokenType.CHARACTER_REFERENCE_VALUE)
    tokenizer.tokenize_state.marker = NUMBER_SIGN
    return value(tokenizer)


def value(tokenizer: Tokenizer) -> Next:
    """In the value, at ``;`` or another value byte."""
    scratch = tokenizer.tokenize_state

    if tokenizer.current == SEMICOLON and scratch.size > 0:
        if scratch.marker == AMPERSAND:
            # Named references must be known, with a semicolon.
            start_offset = tokenizer.events[-1].point.offset
            name = tokenizer.slice(start_offset, tokenizer.point.offset).decode("ascii")
            if f"{name};" not in html5:
                return _nok(tokenizer)

        tokenizer.exit(TokenType.CHARACTER_REFERENCE_VALUE)
        tokenizer.enter(TokenType.CHARACTER_REFERENCE_MARKER_SEMI)
        tokenizer.consume()
        tokenizer.exit(TokenType.CHARACTER_REFERENCE_MARKER_SEMI)
        tokenizer.exit(TokenType.CHARACTER_REFERENCE)
        scratch.marker = 0
        scratch.size = 0
        return State.OK

    allowed, size_max = _LIMITS[scratch.marker]
    if tokenizer.current in allowed and scratch.size < size_max:
        tokenizer.consume()
        scratch.size += 1
        return value

    return _nok(tokenizer)


def _nok(tokenizer: Tokenizer) -> State:
    tokenizer.tokenize_state.marker = 0
    tokenizer.tokenize_state.size = 0
    return State.NOK
