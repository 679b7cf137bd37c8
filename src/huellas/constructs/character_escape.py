"""Character escape: a backslash before ASCII punctuation.

Grammar::

    character_escape ::= '\\' ascii_punctuation

Used in the string and text content types.
"""

from __future__ import annotations

from huellas.charsets import ASCII_PUNCTUATION, BACKSLASH
from huellas.tokenizer import Next, State, Tokenizer
from huellas.tokens import TokenType


def start(tokenizer: Tokenizer) -> Next:
    """Start of a character escape.

    ```markdown
    > | a\\*b
         ^
    ```
    """
    if tokenizer.current != BACKSLASH:
        return State.NOK
    tokenizer.enter(TokenType.CHARACTER_ESCAPE)
    tokenizer.enter(TokenType.CHARACTER_ESCAPE_MARKER)
    tokenizer.consume()
    tokenizer.exit(TokenType.CHARACTER_ESCAPE_MARKER)
    return inside


def inside(tokenizer: Tokenizer) -> Next:
    """After the backslash, at the escaped byte."""
    if tokenizer.current not in ASCII_PUNCTUATION:
        return State.NOK
    tokenizer.enter(TokenType.CHARACTER_ESCAPE_VALUE)
    tokenizer.consume()
    tokenizer.exit(TokenType.CHARACTER_ESCAPE_VALUE)
    tokenizer.exit(TokenType.CHARACTER_ESCAPE)
    return State.OK
